"""
Service wiring.

Builds every service over one document database from the settings, the
way a transport would at startup.
"""

from dataclasses import dataclass
from typing import Optional

from paperdesk.config import Settings, get_settings
from paperdesk.kernel.identity.auth_service import AuthService
from paperdesk.kernel.identity.identity_service import IdentityService
from paperdesk.kernel.identity.jwt import JWTManager
from paperdesk.kernel.identity.providers import GithubProvider, GoogleProvider
from paperdesk.kernel.papers.paper_service import PaperService
from paperdesk.kernel.permissions.permission_service import PermissionService
from paperdesk.kernel.storage.memory import MemoryDatabase
from paperdesk.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    database: MemoryDatabase
    jwt_manager: JWTManager
    permissions: PermissionService
    identity: IdentityService
    auth: AuthService
    papers: PaperService


def build_container(
    settings: Optional[Settings] = None,
    database: Optional[MemoryDatabase] = None,
    github: Optional[GithubProvider] = None,
    google: Optional[GoogleProvider] = None,
) -> ServiceContainer:
    """
    Wire up the services.

    Args:
        settings: Defaults to the cached environment settings
        database: Defaults to a fresh in-memory database
        github: Provider override, mostly for tests
        google: Provider override, mostly for tests
    """
    settings = settings or get_settings()
    database = database or MemoryDatabase()

    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    users = database.get_collection(settings.storage.collection_user)
    papers = database.get_collection(settings.storage.collection_paper)
    contents = database.get_collection(settings.storage.collection_paper_content)

    jwt_manager = JWTManager.from_settings(settings)
    permissions = PermissionService(users)
    identity = IdentityService(users, permissions)

    container = ServiceContainer(
        settings=settings,
        database=database,
        jwt_manager=jwt_manager,
        permissions=permissions,
        identity=identity,
        auth=AuthService(
            identity,
            jwt_manager,
            github=github,
            google=google,
            github_clients=settings.github_auth,
            google_clients=settings.google_auth,
        ),
        papers=PaperService(
            papers,
            contents,
            permissions,
            jwt_manager,
            history_limit=settings.paper_history_limit,
        ),
    )

    logger.info("Services initialized", extra={"environment": settings.environment})
    return container
