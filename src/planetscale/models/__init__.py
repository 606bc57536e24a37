"""
Models for the PlanetScale gateway.

This package contains data models for gateway requests and responses.
Response envelopes live in planetscale.models.responses.
"""

from planetscale.models.base import (
    Field,
    Row,
    VitessError,
    SessionOptions,
    VitessSession,
    Session,
    User,
    QuerySession,
)
from planetscale.models.requests import (
    ExecuteRequest,
    CreateSessionRequest,
)

__all__ = [
    # Base models
    "Field",
    "Row",
    "VitessError",
    "SessionOptions",
    "VitessSession",
    "Session",
    "User",
    "QuerySession",
    # Request models
    "ExecuteRequest",
    "CreateSessionRequest",
]
