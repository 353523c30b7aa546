"""Login flow: check credentials, open a session, then load submissions."""

from dataclasses import dataclass

import structlog

from formdesk.auth.credentials import CredentialDirectory
from formdesk.auth.session import SessionManager
from formdesk.services.data_service import DataService, LoadResult

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
DATA_WARNING = (
    "Logged in successfully, but could not refresh data. "
    "Using cached data if available."
)


@dataclass
class LoginResult:
    """Outcome of a login attempt.

    ``message`` is an error when ``success`` is False and a warning otherwise.
    """

    success: bool
    session_id: str | None = None
    message: str | None = None
    load: LoadResult | None = None


async def login(
    username: str,
    password: str,
    credentials: CredentialDirectory,
    sessions: SessionManager,
    data_service: DataService,
) -> LoginResult:
    """
    Authenticate and initialize data for the new session.

    Data loading never fails the login; a load error becomes a warning.
    """
    user = credentials.authenticate(username, password)
    if user is None:
        logger.info("Login rejected", username=username)
        return LoginResult(success=False, message=INVALID_CREDENTIALS)

    session_id = await sessions.create(user.public_profile())
    load = await data_service.initialize()

    if load.error:
        logger.warning("Logged in with data warning", error=load.error)
        return LoginResult(success=True, session_id=session_id, message=DATA_WARNING, load=load)

    return LoginResult(success=True, session_id=session_id, load=load)
