from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from hoaxify.models.user import User


# fields stay optional so the validation layer reports null as username_null etc.
class UserCreateRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdateRequest(BaseModel):
    username: Optional[str] = None
    image: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordResetRequest(BaseModel):
    email: Optional[str] = None


class PasswordUpdateRequest(BaseModel):
    password_reset_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("passwordResetToken", "resetToken", "password_reset_token"),
    )
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    image: Optional[str] = None


def user_out(user: User) -> dict:
    return UserOut(id=user.id, username=user.username, email=user.email, image=user.image).model_dump()
