from fastapi.security import OAuth2PasswordBearer

# Bearer token from the Authorization header. Missing tokens are reported by
# get_current_user so the 401 body uses the standard response envelope.
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/auth/login",
    scheme_name="PosBearer",
    auto_error=False,
)
