"""
Request models for the PlanetScale gateway.

These models define the structures used in gateway requests.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass

from planetscale.models.base import Session


@dataclass
class ExecuteRequest:
    """Representation of a request to execute a SQL statement."""

    query: str
    session: Optional[Session] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary for JSON serialization."""
        return {
            "query": self.query,
            "session": self.session.to_dict() if self.session is not None else None,
        }


@dataclass
class CreateSessionRequest:
    """Representation of a request to create a new session."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary for JSON serialization."""
        return {}
