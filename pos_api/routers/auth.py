from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from pos_api.database import get_db
from pos_api.core.auth import get_current_user, require_right
from pos_api.core.config import settings
from pos_api.core.rate_limiter import limiter
from pos_api.schemas.common import ApiResponse
from pos_api.schemas.user import CreateUserRequest, LoginRequest, LoginResponse, UserData
from pos_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ---------------- LOGIN (TOKEN-BASED) ----------------
@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(
    request: Request,
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    return AuthService(db, settings).authenticate(credentials.user_id, credentials.password)


# ---------------- REGISTER ----------------
@router.post("/register", response_model=ApiResponse[UserData], status_code=status.HTTP_201_CREATED)
def register(
    user_data: CreateUserRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_right("Users", "save")),
):
    user = AuthService(db, settings).create_user(user_data)

    return ApiResponse[UserData](message="User created successfully", data=user)


# ---------------- CURRENT USER ----------------
@router.get("/me", response_model=ApiResponse[UserData])
def me(current_user=Depends(get_current_user)):
    return ApiResponse[UserData](data=UserData.model_validate(current_user))
