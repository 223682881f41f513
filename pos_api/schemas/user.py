from typing import List

from pydantic import EmailStr, Field

from pos_api.schemas.common import CamelModel


class LoginRequest(CamelModel):
    user_id: str = ""
    password: str = ""


class UserRightsData(CamelModel):
    module_name: str
    can_save: bool = False
    can_update: bool = False
    can_delete: bool = False
    can_view: bool = False


class UserData(CamelModel):
    user_id: str
    name: str
    user_type: str
    email: str | None = None
    contact_no: str | None = None
    active: bool
    rights: List[UserRightsData] = []


class LoginResponse(CamelModel):
    success: bool
    message: str
    token: str | None = None
    token_type: str = "bearer"
    user: UserData | None = None


class CreateUserRequest(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6, max_length=128, description="Plain password (will be hashed).")
    name: str = Field(..., min_length=1)
    user_type: str = "cashier"
    contact_no: str | None = None
    email: EmailStr | None = None
    rights: List[UserRightsData] = []
