import logging
from typing import Optional

from planetscale.types import SSLOptions

logger = logging.getLogger(__name__)

DEFAULT_HOST = "aws.connect.psdb.cloud"
SERVICE_PATH = "/psdb.v1alpha1.Database"


class ClientContext:
    def __init__(
        self,
        hostname: Optional[str] = None,
        ssl_options: Optional[SSLOptions] = None,
        socket_timeout: Optional[float] = None,
        pool_maxsize: Optional[int] = None,
        user_agent: Optional[str] = None,
    ):
        self.hostname = hostname or DEFAULT_HOST
        self.ssl_options = ssl_options or SSLOptions()
        self.socket_timeout = socket_timeout
        self.pool_maxsize = pool_maxsize or 10
        self.user_agent = user_agent

    @property
    def base_url(self) -> str:
        """The gateway service URL, e.g. https://aws.connect.psdb.cloud/psdb.v1alpha1.Database"""
        host = self.hostname.rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return host + SERVICE_PATH
