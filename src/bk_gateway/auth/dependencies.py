"""FastAPI dependencies: get_current_user_id, require_operator.

Usage in any protected router:
    from src.bk_gateway.auth.dependencies import get_current_user_id

    @router.get("/protected")
    async def protected(user_id: Annotated[str, Depends(get_current_user_id)]):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from config.settings import settings
from src.bk_common.errors import InvalidCredentialsError, OperatorRequiredError
from src.bk_gateway.auth.jwt_handler import decode_access_token

# Tokens come from the external auth service; tokenUrl only feeds Swagger's "Authorize" button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """Validate the Bearer token and return its subject (the user id).

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        payload = decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION
    return str(user_id)


async def require_operator(user_id: str = Depends(get_current_user_id)) -> str:
    """Allow only ids listed in OPERATOR_USER_IDS (pass triggers, event release/clone)."""
    if user_id not in settings.OPERATOR_USER_IDS:
        raise OperatorRequiredError()
    return user_id
