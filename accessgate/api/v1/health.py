"""Health endpoint: credential database reachability and role bootstrap state."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from accessgate import __version__
from accessgate.core.config import settings
from accessgate.core.database import check_db_connected, get_db
from accessgate.schemas.health import HealthResponse
from accessgate.services.store import CredentialStore

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Report whether the credential database is reachable and roles are seeded."""
    if not check_db_connected(db):
        return HealthResponse(version=__version__, environment=settings.APP_ENV, database="disconnected")
    return HealthResponse(
        version=__version__,
        environment=settings.APP_ENV,
        database="connected",
        roles_seeded=CredentialStore(db).count_roles() > 0,
    )
