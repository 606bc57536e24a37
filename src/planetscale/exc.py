import json
import logging

logger = logging.getLogger(__name__)


# Shaped after the PEP-249 exception tree
# https://peps.python.org/pep-0249/#exceptions
class Error(Exception):
    """Base class for all client exceptions.
    `message`: An optional user-friendly error message. It should be short, actionable and stable
    `context`: Optional extra context about the error. MUST be JSON serializable
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.context = context or {}

    def __str__(self):
        return self.message

    def message_with_context(self):
        return self.message + ": " + json.dumps(self.context, default=str)


class InterfaceError(Error):
    pass


class DatabaseError(Error):
    pass


class OperationalError(DatabaseError):
    pass


class ProgrammingError(DatabaseError):
    pass


class DataError(DatabaseError):
    pass


### Custom error classes ###
class TransportError(OperationalError):
    """Thrown if the HTTP request to the gateway failed or returned a non-2xx status.
    Its context will have the following keys:
    "method": The gateway RPC that failed
    "http-code": HTTP response code (if available)
    "body": The response body (if available)
    "original-exception": The Python level original exception (if available)
    """

    pass


class ProtocolError(OperationalError):
    """Thrown if a response envelope is well-formed HTTP but violates the gateway
    protocol, e.g. it carries neither an error nor a result."""

    pass


class StatementError(DatabaseError):
    """Thrown if the gateway rejected a SQL statement.

    `error` is the VitessError from the response and `response` the full
    ExecuteResponse. The session carried by that response has already been
    stored on the client by the time this is raised.
    """

    def __init__(self, error, response=None, context=None):
        super().__init__(error.message, context)
        self.error = error
        self.response = response

    @property
    def code(self) -> str:
        return self.error.code


class DecodeError(DataError):
    """Thrown if row data returned by the gateway cannot be decoded: bad base64,
    bad length prefixes, unparseable numeric values, or a record shape that does
    not match the requested type."""

    pass
