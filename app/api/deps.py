from fastapi import Depends, Request

from app.core.config import settings
from app.core.context import set_user_id
from app.core.exceptions import UnauthorizedError
from app.domain.account.schemas import Account
from app.domain.account.service import AccountService
from app.domain.history.service import HistoryService
from app.infra.db import Database


def get_db(request: Request) -> Database:
    """lifespan에서 만든 프로세스 공용 Database"""
    return request.app.state.db


def get_account_service(db: Database = Depends(get_db)) -> AccountService:
    return AccountService(db)


def get_history_service(db: Database = Depends(get_db)) -> HistoryService:
    return HistoryService(db)


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


async def get_current_account(
    token: str | None = Depends(get_session_token),
    service: AccountService = Depends(get_account_service),
) -> Account:
    """쿠키의 세션으로 계정 확인. 요청마다 다시 검증"""
    account = await service.current_account(token)
    set_user_id(account.id)
    return account


async def get_optional_account(
    token: str | None = Depends(get_session_token),
    service: AccountService = Depends(get_account_service),
) -> Account | None:
    if not token:
        return None
    try:
        return await service.current_account(token)
    except UnauthorizedError:
        return None
