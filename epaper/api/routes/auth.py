from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from epaper.api.deps import get_context, get_current_user
from epaper.api.schemas import LoginRequest, LoginResponse
from epaper.context import ServiceContext
from epaper.domain.entities import User

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, ctx: ServiceContext = Depends(get_context)) -> Any:
    result = ctx.auth_service.login(request.email, request.password, request.role)
    if not result.success or result.user is None or result.token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.error)

    ctx.editor.sign_in(result.user)
    return LoginResponse(user=result.user, token=result.token)


@router.post("/logout")
def logout(ctx: ServiceContext = Depends(get_context)) -> dict[str, Any]:
    ctx.auth_service.logout()
    ctx.editor.sign_out()
    return {"success": True}


@router.get("/me", response_model=User)
def me(user: User = Depends(get_current_user)) -> Any:
    return user
