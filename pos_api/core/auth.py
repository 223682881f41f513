# pos_api/core/auth.py

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from pos_api.core.config import settings
from pos_api.core.errors import AuthenticationError
from pos_api.core.jwt import decode_access_token
from pos_api.core.oauth2 import oauth2_scheme
from pos_api.database import get_db
from pos_api.models.users import User

ACTIONS = ("save", "update", "delete", "view")


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
):
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(token, settings)

    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")

    if not user_id:
        raise AuthenticationError("Invalid token payload")

    user = db.get(User, user_id)

    if user is None or not user.active:
        raise AuthenticationError("User not found or inactive")

    return user


def has_right(user: User, module: str, action: str) -> bool:
    if (user.user_type or "").lower() == "admin":
        return True

    for right in user.rights:
        if right.module_name.lower() == module.lower():
            return bool(getattr(right, f"can_{action}"))

    return False


def require_right(module: str, action: str = "view"):
    if action not in ACTIONS:
        raise ValueError(f"Unknown action '{action}'")

    def checker(current_user: User = Depends(get_current_user)):
        # Ensure the user holds the module right (admins hold all of them)
        if not has_right(current_user, module, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing '{action}' right on {module}",
            )
        return current_user

    return checker
