import logging
import threading
from typing import Optional

from planetscale.models.base import Session

logger = logging.getLogger(__name__)


class SessionState:
    """
    Holds the gateway session for one client.

    A client starts without a session. Every gateway response carries a new
    session which replaces the held one outright; sessions are never merged,
    since the signature covers the server-side state at that point.

    Callers that read the session, make a request and store the returned
    session must hold `lock()` for the whole sequence so concurrent calls on
    the same client cannot lose an update.
    """

    def __init__(self) -> None:
        self._session: Optional[Session] = None
        self._lock = threading.RLock()

    @property
    def current(self) -> Optional[Session]:
        """The most recently received session, or None if none has been received."""
        return self._session

    @property
    def is_established(self) -> bool:
        return self._session is not None

    def lock(self) -> threading.RLock:
        return self._lock

    def replace(self, session: Session) -> None:
        with self._lock:
            if self._session is None:
                logger.info(
                    "Established gateway session %s", session.session_uuid or "<unknown>"
                )
            else:
                logger.debug(
                    "Replaced gateway session %s", session.session_uuid or "<unknown>"
                )
            self._session = session
