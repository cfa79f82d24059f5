from pydantic import BaseModel


class AvatarResponse(BaseModel):
    avatar: str
