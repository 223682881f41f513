import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from pos_api.core.config import Settings
from pos_api.core.errors import AuthenticationError
from pos_api.core.hashing import hash_password, verify_password
from pos_api.core.jwt import create_access_token
from pos_api.models.users import User, UserRight
from pos_api.schemas.user import CreateUserRequest, LoginResponse, UserData

logger = logging.getLogger("pos_api.auth")


def token_claims(user: User) -> dict:
    return {
        "sub": user.user_id,
        "name": user.name,
        "role": user.user_type,
        "email": user.email or "",
    }


class AuthService:
    def __init__(self, db: Session, config: Settings):
        self.db = db
        self.config = config

    def _load_user(self, user_id: str) -> User | None:
        return self.db.execute(
            select(User).options(selectinload(User.rights)).where(User.user_id == user_id)
        ).scalar_one_or_none()

    def authenticate(self, user_id: str, password: str) -> LoginResponse:
        user_id = (user_id or "").strip()

        if not user_id or not password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User ID and password are required",
            )

        user = self._load_user(user_id)

        # same message for every failure so user ids can't be enumerated
        if user is None or not user.active or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for user '{user_id}'")
            raise AuthenticationError("Invalid user ID or password")

        token = create_access_token(data=token_claims(user), config=self.config)

        logger.info(f"User '{user.user_id}' logged in ({user.user_type}, {len(user.rights)} right(s))")

        return LoginResponse(
            success=True,
            message="Login successful",
            token=token,
            user=UserData.model_validate(user),
        )

    def create_user(self, payload: CreateUserRequest) -> UserData:
        user_id = payload.user_id.strip()

        if self.db.get(User, user_id) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User ID already exists")

        try:
            user = User(
                user_id=user_id,
                password_hash=hash_password(payload.password),
                name=payload.name.strip(),
                user_type=payload.user_type.strip().lower() or "cashier",
                email=payload.email,
                contact_no=payload.contact_no,
                active=True,
            )
            user.rights = [
                UserRight(
                    module_name=right.module_name,
                    can_save=right.can_save,
                    can_update=right.can_update,
                    can_delete=right.can_delete,
                    can_view=right.can_view,
                )
                for right in payload.rights
            ]

            self.db.add(user)
            self.db.commit()

        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(f"User '{user_id}' could not be created: {exc}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User ID already exists")

        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"User '{user_id}' could not be created: {exc}")
            raise HTTPException(status_code=500, detail="Unable to create user")

        self.db.refresh(user)
        logger.info(f"User '{user_id}' created ({user.user_type})")

        return UserData.model_validate(user)
