from fastapi import APIRouter, Depends

from app.api.deps import get_current_account, get_history_service
from app.api.schemas.auth import SuccessResponse
from app.api.schemas.history import SaveHistoryRequest
from app.domain.account.schemas import Account
from app.domain.history.schemas import HistoryItem
from app.domain.history.service import HistoryService

router = APIRouter(prefix="/history", tags=["history"])


@router.post("/save", response_model=SuccessResponse)
async def save_history(
    request: SaveHistoryRequest,
    account: Account = Depends(get_current_account),
    service: HistoryService = Depends(get_history_service),
) -> SuccessResponse:
    await service.append(account.id, request.cv_text, request.job_description, request.analysis)
    return SuccessResponse()


@router.get("", response_model=list[HistoryItem])
async def list_history(
    account: Account = Depends(get_current_account),
    service: HistoryService = Depends(get_history_service),
) -> list[HistoryItem]:
    return await service.list(account.id)


@router.delete("/{record_id}", response_model=SuccessResponse)
async def delete_history(
    record_id: int,
    account: Account = Depends(get_current_account),
    service: HistoryService = Depends(get_history_service),
) -> SuccessResponse:
    await service.remove(account.id, record_id)
    return SuccessResponse()
