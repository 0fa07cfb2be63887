import os
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, HTTPException, status

from epaper.context import ServiceContext
from epaper.domain.entities import User
from epaper.rules.loader import default_rules_path, load_rules
from epaper.rules.models import Rules
from epaper.services.editor import EditorSession


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.rules_path = default_rules_path()
        self.data_dir = Path(os.environ.get("EPAPER_DATA_DIR", "./data"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Context ---
@lru_cache
def get_context() -> ServiceContext:
    """One editor session per process."""
    settings = get_settings()
    return ServiceContext.create(get_rules(), settings.data_dir)


def get_editor(ctx: ServiceContext = Depends(get_context)) -> EditorSession:
    return ctx.editor


def get_current_user(editor: EditorSession = Depends(get_editor)) -> User:
    if editor.current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in first.",
        )
    return editor.current_user


@contextmanager
def domain_errors() -> Iterator[None]:
    """Translate service exceptions into HTTP errors."""
    try:
        yield
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
