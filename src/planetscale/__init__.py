from planetscale.exc import *

__version__ = "0.1.0"
USER_AGENT_NAME = "planetscale-python"

from planetscale.types import CachePolicy, Query
from planetscale.result import QueryResult
from planetscale.models.base import Field, Row, QuerySession, Session, User, VitessError


def connect(username: str, password: str, **kwargs) -> "Client":
    from .client import Client

    return Client(username, password, **kwargs)
