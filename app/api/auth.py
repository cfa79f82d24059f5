from fastapi import APIRouter, Depends, Response

from app.api.deps import get_account_service, get_current_account, get_session_token
from app.api.schemas.auth import LoginRequest, RegisterRequest, SuccessResponse
from app.core.config import settings
from app.domain.account.schemas import Account
from app.domain.account.service import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        samesite="lax",
        secure=settings.is_production,
    )


@router.post("/register", response_model=Account)
async def register(
    request: RegisterRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> Account:
    account, token = await service.register(request.email, request.password, request.name)
    _set_session_cookie(response, token)
    return account


@router.post("/login", response_model=Account)
async def login(
    request: LoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
) -> Account:
    account, token = await service.authenticate(request.email, request.password)
    _set_session_cookie(response, token)
    return account


@router.get("/me", response_model=Account)
async def me(account: Account = Depends(get_current_account)) -> Account:
    return account


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    service: AccountService = Depends(get_account_service),
) -> SuccessResponse:
    await service.logout(token)
    response.delete_cookie(settings.session_cookie_name, samesite="lax")
    return SuccessResponse()
