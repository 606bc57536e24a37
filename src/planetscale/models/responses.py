"""
Response models for the PlanetScale gateway.

These models define the structures used in gateway responses.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass

from planetscale.exc import ProtocolError
from planetscale.models.base import QuerySession, Session, User, VitessError
from planetscale.result import QueryResult


def _parse_session(data: Dict[str, Any]) -> Session:
    """Parse the session from response data."""
    session_data = data.get("session")
    if not isinstance(session_data, dict):
        raise ProtocolError(
            "Gateway response is missing a session",
            context={"keys": sorted(data)},
        )
    return Session.from_dict(session_data)


@dataclass
class ExecuteResponse:
    """Representation of the response from executing a SQL statement."""

    session: Session
    result: Optional[QueryResult] = None
    error: Optional[VitessError] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecuteResponse":
        """Create an ExecuteResponse from a dictionary."""
        result_data = data.get("result")
        error_data = data.get("error")
        return cls(
            session=_parse_session(data),
            result=QueryResult.from_dict(result_data)
            if result_data is not None
            else None,
            error=VitessError.from_dict(error_data) if error_data is not None else None,
        )


@dataclass
class CreateSessionResponse:
    """Representation of the response from creating a new session."""

    branch: str
    user: User
    session: Session

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CreateSessionResponse":
        """Create a CreateSessionResponse from a dictionary."""
        return cls(
            branch=data.get("branch", ""),
            user=User.from_dict(data.get("user") or {}),
            session=_parse_session(data),
        )

    def to_query_session(self) -> QuerySession:
        return QuerySession(branch=self.branch, user=self.user, session=self.session)
