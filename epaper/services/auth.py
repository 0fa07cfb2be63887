"""
Mock authentication.

Credentials are the demo accounts listed in rules.yaml and the "session" is
a plain token kept in a durable key-value store. Restoring a session only
looks for the substring ``admin`` in the token; nothing is verified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from epaper.domain.entities import User, UserRole
from epaper.ports.repo import TokenStorePort
from epaper.rules.models import AuthRules

logger = logging.getLogger(__name__)

DEFAULT_NAMES: dict[UserRole, str] = {"Admin": "Admin User", "Editor": "Editor User"}


@dataclass
class LoginResult:
    user: User | None = None
    token: str | None = None
    success: bool = False
    error: str | None = None


class AuthService:
    def __init__(self, token_store: TokenStorePort, rules: AuthRules):
        self.token_store = token_store
        self.rules = rules

    def _name_for(self, role: UserRole) -> str:
        for account in self.rules.demo_accounts:
            if account.role == role:
                return account.name
        return DEFAULT_NAMES[role]

    def _user_for(self, role: UserRole) -> User:
        return User(id=f"user-{role.lower()}", name=self._name_for(role), role=role)

    def login(self, email: str, password: str, role: UserRole) -> LoginResult:
        if not email or not password:
            return LoginResult(error="Please enter both email and password.")

        account = next(
            (
                a
                for a in self.rules.demo_accounts
                if a.email == email and a.password == password
            ),
            None,
        )
        if account is None:
            logger.warning("Rejected login for %s", email)
            return LoginResult(error="Invalid email or password.")

        if account.role != role:
            logger.warning("Rejected login for %s with role %s", email, role)
            return LoginResult(
                error=f"Invalid role for these credentials. Try logging in as {account.role}."
            )

        token = f"mock-jwt-token-{email}-{role}"
        self.token_store.set(self.rules.token_key, token)
        logger.info("Logged in %s as %s", email, role)
        return LoginResult(user=self._user_for(role), token=token, success=True)

    def restore(self) -> User | None:
        """Rebuild the user from a stored token, if any."""
        token = self.token_store.get(self.rules.token_key)
        if not token:
            return None
        role: UserRole = "Admin" if "admin" in token else "Editor"
        return self._user_for(role)

    def logout(self) -> None:
        self.token_store.remove(self.rules.token_key)
        logger.info("Logged out")
