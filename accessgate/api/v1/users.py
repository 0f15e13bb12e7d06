"""User endpoints: the caller's own profile and the admin-only account list."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accessgate.api.v1.auth import get_current_principal, require_admin
from accessgate.core.database import get_db
from accessgate.core.security import Principal
from accessgate.schemas.auth import CurrentUser, UserListItem, UsersListResponse
from accessgate.services.store import CredentialStore

router = APIRouter()


@router.get("/me", response_model=CurrentUser)
def get_me(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Return the authenticated account. Roles come from the token, not the database."""
    user = CredentialStore(db).find_by_username(principal.username)
    return CurrentUser(
        id=user.id if user is not None else None,
        username=principal.username,
        email=user.email if user is not None else None,
        roles=sorted(r.value for r in principal.roles),
    )


@router.get("/all", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all accounts without password hashes (admin only)."""
    users = CredentialStore(db).list_users()
    return UsersListResponse(
        users=[
            UserListItem(
                id=u.id,
                username=u.username,
                email=u.email,
                roles=sorted(r.value for r in u.role_names),
                created_at=u.created_at,
            )
            for u in users
        ]
    )
