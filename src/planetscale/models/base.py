"""
Base models for the PlanetScale gateway.

These models define the common structures used in gateway requests and responses.
"""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Field:
    """Description of one result column."""

    name: str
    type: str
    table: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        return cls(
            name=data.get("name", ""),
            type=data.get("type", ""),
            table=data.get("table"),
        )


@dataclass(frozen=True)
class Row:
    """A row as sent on the wire: per-column byte lengths and a base64 value blob."""

    lengths: List[str]
    values: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Row":
        return cls(lengths=list(data.get("lengths") or []), values=data.get("values"))


@dataclass(frozen=True)
class VitessError:
    """Statement-level error information returned by the gateway."""

    message: str
    code: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VitessError":
        return cls(message=data.get("message", ""), code=data.get("code", ""))


@dataclass(frozen=True)
class SessionOptions:
    included_fields: Optional[str] = None
    client_found_rows: Optional[bool] = None


@dataclass(frozen=True)
class VitessSession:
    """The Vitess half of a gateway session."""

    autocommit: Optional[bool] = None
    found_rows: Optional[str] = None
    row_count: Optional[str] = None
    options: SessionOptions = field(default_factory=SessionOptions)
    ddl_strategy: Optional[str] = None
    session_uuid: Optional[str] = None
    enable_system_settings: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VitessSession":
        options = data.get("options") or {}
        return cls(
            autocommit=data.get("autocommit"),
            found_rows=data.get("foundRows"),
            row_count=data.get("rowCount"),
            options=SessionOptions(
                included_fields=options.get("includedFields"),
                client_found_rows=options.get("clientFoundRows"),
            ),
            ddl_strategy=data.get("DDLStrategy"),
            session_uuid=data.get("SessionUUID"),
            enable_system_settings=data.get("enableSystemSettings"),
        )


@dataclass(frozen=True)
class Session:
    """
    Opaque session state issued by the gateway.

    The parsed attributes are for inspection only. The raw object is what gets
    sent back with the next request, so keys this client does not model are
    preserved verbatim.
    """

    signature: Optional[str]
    vitess_session: VitessSession
    raw: Dict[str, Any] = field(repr=False, compare=True, hash=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            signature=data.get("signature"),
            vitess_session=VitessSession.from_dict(data.get("vitessSession") or {}),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the session back to the JSON object the gateway issued."""
        return dict(self.raw)

    @property
    def autocommit(self) -> Optional[bool]:
        return self.vitess_session.autocommit

    @property
    def session_uuid(self) -> Optional[str]:
        return self.vitess_session.session_uuid


@dataclass(frozen=True)
class User:
    username: str
    psid: str
    role: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            username=data.get("username", ""),
            psid=data.get("psid", ""),
            role=data.get("role", ""),
        )


@dataclass(frozen=True)
class QuerySession:
    """The payload of a CreateSession call: branch and user metadata plus the session."""

    branch: str
    user: User
    session: Session
