"""
CLI entrypoint for the bootstrap job (role seed and optional demo accounts):

  python -m accessgate.bootstrap

The API runs the same bootstrap on startup; this is for provisioning a fresh
database ahead of the first deploy.
"""

import logging
import sys

from accessgate.core.config import get_settings
from accessgate.core.database import SessionLocal
from accessgate.services.bootstrap import run_bootstrap
from accessgate.services.store import CredentialStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Seed roles (if empty) and, when enabled, the demo accounts."""
    settings = get_settings()
    db = SessionLocal()
    try:
        roles_created, users_created = run_bootstrap(CredentialStore(db), settings)
        logger.info(
            "Bootstrap completed: roles_created=%s, users_created=%s",
            roles_created,
            users_created,
        )
        return 0
    except Exception as e:
        logger.exception("Bootstrap failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
