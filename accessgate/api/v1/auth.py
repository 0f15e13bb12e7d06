"""Register and login endpoints, plus auth dependencies (get_current_principal, require_role)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from accessgate.core.config import get_settings
from accessgate.core.database import get_db
from accessgate.core.exceptions import (
    InternalError,
    InvalidCredentialsError,
    RegistrationError,
    TokenError,
)
from accessgate.core.security import Principal
from accessgate.models import RoleName
from accessgate.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
)
from accessgate.services.auth import AuthService
from accessgate.services.authorization import authorize
from accessgate.services.store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

INTERNAL_ERROR_DETAIL = "Internal server error"


def get_auth_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
    """Dependency: AuthService bound to the request's DB session."""
    return AuthService(CredentialStore(db), get_settings())


def _internal_error(e: InternalError) -> HTTPException:
    # Full cause goes to the log; the client only sees a generic message.
    logger.error("Internal auth fault: %s", e.message, exc_info=e.cause or e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_ERROR_DETAIL,
    )


@router.post("/register", response_model=MessageResponse)
def register(
    body: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Create an account with the USER role. Does not log the caller in."""
    try:
        service.register(body.username, str(body.email), body.password)
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except InternalError as e:
        raise _internal_error(e) from e
    return MessageResponse(message="User registered successfully!")


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a session token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        result = service.login(body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    except InternalError as e:
        raise _internal_error(e) from e
    return TokenResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        expires_at=result.expires_at,
        id=result.user_id,
        username=result.username,
        email=result.email,
        roles=[r.value for r in result.roles],
    )


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> Principal:
    """Dependency: require a valid Bearer token and return its principal. Raises 401 otherwise."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return service.validate_token(credentials.credentials)
    except TokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_role(role: RoleName) -> Callable[[Principal], Principal]:
    """Dependency factory: require an authenticated principal holding `role`. Raises 403 otherwise."""

    def dependency(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not authorize(principal.roles, role):
            logger.info(
                "Access denied",
                extra={"username": principal.username, "required_role": role.value},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.value.capitalize()} access required",
            )
        return principal

    return dependency


require_admin = require_role(RoleName.ADMIN)
