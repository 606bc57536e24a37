from typing import Dict

from urllib3.util import make_headers

from planetscale.common.http import HttpHeader


class AuthProvider:
    def add_headers(self, request_headers: Dict[str, str]):
        pass


class BasicAuthProvider(AuthProvider):
    """Adds an HTTP Basic Authorization header built from a PlanetScale username and password."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.__authorization_header_value = make_headers(
            basic_auth=f"{username}:{password}"
        )["authorization"]

    def add_headers(self, request_headers: Dict[str, str]):
        request_headers[HttpHeader.AUTHORIZATION.value] = self.__authorization_header_value
