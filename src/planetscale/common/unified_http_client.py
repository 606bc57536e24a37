import logging
import ssl
import urllib.parse
from contextlib import contextmanager
from typing import Dict, Optional, Generator

import urllib3
from urllib3 import PoolManager
from urllib3.exceptions import HTTPError

# Compatibility import for different urllib3 versions
try:
    # If urllib3~=2.0 is installed
    from urllib3 import BaseHTTPResponse
except ImportError:
    # If urllib3~=1.0 is installed
    from urllib3 import HTTPResponse as BaseHTTPResponse

from planetscale.exc import TransportError
from planetscale.common.context import ClientContext
from planetscale.common.http import HttpMethod, HttpHeader

logger = logging.getLogger(__name__)


class UnifiedHttpClient:
    """
    HTTP client for all gateway requests.

    This client uses urllib3 with a single pool manager. Requests are never
    retried: a failed request is surfaced to the caller immediately as a
    TransportError.
    """

    def __init__(self, client_context: ClientContext):
        """
        Initialize the HTTP client.

        Args:
            client_context: ClientContext instance containing HTTP configuration
        """
        self.config = client_context
        self._pool_manager = None
        self._setup_pool_manager()

    def _build_ssl_context(self) -> ssl.SSLContext:
        ssl_context = ssl.create_default_context()

        if not self.config.ssl_options.tls_verify:
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE

        if self.config.ssl_options.tls_trusted_ca_file:
            ssl_context.load_verify_locations(
                self.config.ssl_options.tls_trusted_ca_file
            )
        return ssl_context

    def _setup_pool_manager(self):
        self._pool_manager = PoolManager(
            maxsize=self.config.pool_maxsize,
            retries=False,
            timeout=urllib3.Timeout(
                connect=self.config.socket_timeout, read=self.config.socket_timeout
            )
            if self.config.socket_timeout
            else None,
            ssl_context=self._build_ssl_context(),
        )

    def _prepare_headers(
        self, headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        """Prepare headers for the request, including User-Agent."""
        request_headers = {}

        if self.config.user_agent:
            request_headers[HttpHeader.USER_AGENT.value] = self.config.user_agent

        if headers:
            request_headers.update(headers)

        return request_headers

    @contextmanager
    def request_context(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> Generator[BaseHTTPResponse, None, None]:
        """
        Context manager for making HTTP requests with proper resource cleanup.

        Args:
            method: HTTP method
            url: URL to request
            headers: Optional headers dict
            **kwargs: Additional arguments passed to urllib3 request

        Yields:
            BaseHTTPResponse: The HTTP response object
        """
        if self._pool_manager is None:
            raise TransportError("HTTP client is closed", {"url": url})

        logger.debug(
            "Making %s request to %s", method.value, urllib.parse.urlparse(url).path
        )

        request_headers = self._prepare_headers(headers)
        response = None

        try:
            response = self._pool_manager.request(
                method=method.value, url=url, headers=request_headers, **kwargs
            )
        except HTTPError as e:
            logger.error("HTTP request error: %s", e)
            raise TransportError(
                f"HTTP request error: {e}", {"original-exception": str(e)}
            ) from e

        try:
            yield response
        finally:
            response.close()

    def request(
        self,
        method: HttpMethod,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> BaseHTTPResponse:
        """
        Make an HTTP request.

        Args:
            method: HTTP method
            url: URL to request
            headers: Optional headers dict
            **kwargs: Additional arguments passed to urllib3 request

        Returns:
            BaseHTTPResponse: The HTTP response object with data pre-loaded
        """
        with self.request_context(method, url, headers=headers, **kwargs) as response:
            # status and headers remain accessible after close(); read() caches the body
            response.read()
            return response

    def close(self):
        """Close the underlying connection pool."""
        if self._pool_manager:
            self._pool_manager.clear()
            self._pool_manager = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
