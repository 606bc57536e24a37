import base64
import json
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Optional, TypeVar, Union

from planetscale import __version__
from planetscale import USER_AGENT_NAME
from planetscale.exc import (
    Error,
    ProgrammingError,
    ProtocolError,
    StatementError,
    TransportError,
)
from planetscale.auth.authenticators import BasicAuthProvider
from planetscale.common.context import ClientContext
from planetscale.common.http import HttpHeader, HttpMethod
from planetscale.common.unified_http_client import UnifiedHttpClient
from planetscale.models.base import QuerySession, Session
from planetscale.models.requests import CreateSessionRequest, ExecuteRequest
from planetscale.models.responses import CreateSessionResponse, ExecuteResponse
from planetscale.result import QueryResult
from planetscale.session import SessionState
from planetscale.types import CachePolicy, Query, SSLOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Client:
    def __init__(
        self,
        username: str,
        password: str,
        http_client: Optional[UnifiedHttpClient] = None,
        **kwargs,
    ) -> None:
        """
        Create a client for the PlanetScale SQL-over-HTTP gateway.

        No request is made until the first call to execute() or refresh().

        Parameters:
            :param username: PlanetScale database username.
            :param password: PlanetScale database password.
            :param http_client: `UnifiedHttpClient`, optional
                An HTTP client to share. When omitted the client creates its own
                and closes it in close().

        Other Parameters:
            host: `str`, optional (default is aws.connect.psdb.cloud)
                Gateway host name. A scheme may be included.
            user_agent_entry: `str`, optional
                Appended to the User-Agent header, e.g. the name of your application.
            _socket_timeout: `float`, optional
                Connect and read timeout in seconds for each request.
            _pool_maxsize: `int`, optional (default is 10)
                Maximum number of pooled connections to the gateway.
            _tls_no_verify: `bool`, optional (default is False)
                Skip TLS certificate verification.
            _tls_trusted_ca_file: `str`, optional
                Path to a CA bundle to verify the gateway certificate against.
        """

        self._username = username
        self._password = password
        self._kwargs = kwargs

        user_agent_entry = kwargs.get("user_agent_entry")
        if user_agent_entry:
            useragent_header = "{}/{} ({})".format(
                USER_AGENT_NAME, __version__, user_agent_entry
            )
        else:
            useragent_header = "{}/{}".format(USER_AGENT_NAME, __version__)

        self.client_context = ClientContext(
            hostname=kwargs.get("host"),
            ssl_options=SSLOptions(
                tls_verify=not kwargs.get("_tls_no_verify", False),
                tls_trusted_ca_file=kwargs.get("_tls_trusted_ca_file"),
            ),
            socket_timeout=kwargs.get("_socket_timeout"),
            pool_maxsize=kwargs.get("_pool_maxsize"),
            user_agent=useragent_header,
        )
        self.base_url = self.client_context.base_url

        self._owns_http_client = http_client is None
        self.http_client = http_client or UnifiedHttpClient(self.client_context)
        self.auth_provider = BasicAuthProvider(username, password)
        self._session_state = SessionState()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def username(self) -> str:
        return self._username

    @property
    def session(self) -> Optional[Session]:
        """The session issued by the most recent gateway response, if any."""
        return self._session_state.current

    def close(self) -> None:
        """Release the HTTP connection pool if this client created it."""
        if self._owns_http_client:
            self.http_client.close()

    def build_cache_key(self, query: Query) -> Optional[str]:
        """
        Return the cache key for a query, or None if its policy does not cache.

        The key depends only on the username and the statement text with
        surrounding whitespace removed.
        """
        if not query.cache_policy.is_ttl:
            return None
        sql = base64.b64encode(query.sql.strip().encode("utf-8")).decode("ascii")
        return f"{self._username}.{sql}"

    def _build_headers(self, query: Optional[Query] = None) -> Dict[str, str]:
        headers = {HttpHeader.CONTENT_TYPE.value: "application/json"}
        self.auth_provider.add_headers(headers)

        if query is not None:
            cache_key = self.build_cache_key(query)
            if cache_key is None:
                headers[HttpHeader.CACHE_CONTROL.value] = "no-cache"
            else:
                headers[HttpHeader.CACHE_CONTROL.value] = "max-age={}".format(
                    query.cache_policy.ttl_seconds
                )
                headers[HttpHeader.CACHE_KEY.value] = cache_key
        return headers

    def _post(self, rpc: str, payload: Dict[str, Any], headers: Dict[str, str]):
        """
        POST a JSON payload to a gateway RPC and return the decoded JSON object.

        Raises:
            TransportError: If the request fails or returns a non-2xx status
            ProtocolError: If the response body is not a JSON object
        """
        body = json.dumps(payload).encode("utf-8")
        response = self.http_client.request(
            HttpMethod.POST,
            "{}/{}".format(self.base_url, rpc),
            headers=headers,
            body=body,
        )

        if not 200 <= response.status < 300:
            raise TransportError(
                f"{rpc} request failed with status {response.status}",
                {
                    "method": rpc,
                    "http-code": response.status,
                    "body": (response.data or b"").decode("utf-8", "replace"),
                },
            )

        try:
            data = json.loads(response.data.decode("utf-8"))
        except ValueError as e:
            raise ProtocolError(
                f"{rpc} response is not valid JSON", {"method": rpc}
            ) from e

        if not isinstance(data, dict):
            raise ProtocolError(
                f"{rpc} response is not a JSON object", {"method": rpc}
            )
        return data

    def execute(
        self,
        query: Union[str, Query],
        cache_policy: Optional[CachePolicy] = None,
    ) -> QueryResult:
        """
        Execute a SQL statement on the gateway.

        The session returned by the gateway replaces the client's session, even
        when the statement fails.

        Args:
            query: SQL text or a Query
            cache_policy: Cache policy for SQL text; defaults to CachePolicy.ORIGIN.
                Must not be given together with a Query.

        Returns:
            QueryResult: The result of the statement

        Raises:
            StatementError: If the gateway rejected the statement
            TransportError: If the request failed
            ProtocolError: If the response carries neither a result nor an error
        """
        if isinstance(query, Query):
            if cache_policy is not None:
                raise ProgrammingError(
                    "cache_policy cannot be combined with a Query; set it on the Query"
                )
        else:
            query = Query(query, cache_policy or CachePolicy.ORIGIN)

        headers = self._build_headers(query)

        with self._session_state.lock():
            request = ExecuteRequest(query=query.sql, session=self._session_state.current)
            data = self._post("Execute", request.to_dict(), headers)
            response = ExecuteResponse.from_dict(data)
            self._session_state.replace(response.session)

        if response.error is not None:
            logger.debug("Statement failed with code %s", response.error.code)
            raise StatementError(
                response.error, response, context={"code": response.error.code}
            )

        if response.result is None:
            raise ProtocolError(
                "Execute response carries neither a result nor an error",
                {"method": "Execute"},
            )
        return response.result

    def refresh(self) -> QuerySession:
        """
        Request a brand new session from the gateway and make it the client's session.

        Returns:
            QuerySession: The new session with the branch and user it belongs to
        """
        with self._session_state.lock():
            data = self._post(
                "CreateSession", CreateSessionRequest().to_dict(), self._build_headers()
            )
            response = CreateSessionResponse.from_dict(data)
            self._session_state.replace(response.session)

        return response.to_query_session()

    def boost(self, enabled: bool = True) -> None:
        """Turn PlanetScale Boost cached queries on or off for this session."""
        self.execute(
            "SET @@boost_cached_queries = {};".format("true" if enabled else "false")
        )

    def _spawn(self) -> "Client":
        """A client with the same credentials and configuration but its own session."""
        return Client(
            self._username,
            self._password,
            http_client=self.http_client,
            **self._kwargs,
        )

    @contextmanager
    def begin(self) -> Generator["Client", None, None]:
        """
        Run a transaction on a dedicated client.

        Yields a new client whose session is independent of this one, after
        executing BEGIN on it. COMMIT is executed when the block finishes. If
        BEGIN, the block or COMMIT raises, ROLLBACK is executed and the original
        exception propagates unchanged.

        Example:
            with client.begin() as tx:
                tx.execute("INSERT INTO users (name) VALUES ('a')")
        """
        tx = self._spawn()
        try:
            tx.execute("BEGIN")
            yield tx
            tx.execute("COMMIT")
        except BaseException:
            tx._rollback()
            raise

    def transaction(self, handler: Callable[["Client"], T]) -> T:
        """
        Call `handler` inside a transaction and return what it returns.

        See begin() for how the transaction is committed or rolled back.
        """
        with self.begin() as tx:
            return handler(tx)

    def _rollback(self) -> None:
        try:
            self.execute("ROLLBACK")
        except Error as e:
            logger.warning("Attempt to roll back transaction failed: %s", e)
