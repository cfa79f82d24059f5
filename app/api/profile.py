from fastapi import APIRouter, Depends, File, UploadFile

from app.api.deps import get_account_service, get_current_account
from app.api.schemas.auth import SuccessResponse
from app.api.schemas.profile import AvatarResponse
from app.core.config import settings
from app.domain.account.schemas import Account, ProfileUpdate
from app.domain.account.service import AccountService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.post("/update", response_model=SuccessResponse)
async def update_profile(
    update: ProfileUpdate,
    account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> SuccessResponse:
    await service.update_profile(account.id, update)
    return SuccessResponse()


@router.post("/avatar", response_model=AvatarResponse)
async def upload_avatar(
    avatar: UploadFile = File(...),
    account: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> AvatarResponse:
    # 최대 크기 초과 여부만 판단하면 되므로 한 바이트 더 읽음
    content = await avatar.read(settings.max_avatar_bytes + 1)
    reference = await service.set_avatar(
        account.id,
        content,
        avatar.filename,
        avatar.content_type,
    )
    return AvatarResponse(avatar=reference)
