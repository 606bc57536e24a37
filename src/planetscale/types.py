from dataclasses import dataclass
from typing import Optional


class SSLOptions:
    tls_verify: bool
    tls_trusted_ca_file: Optional[str]

    def __init__(
        self,
        tls_verify: bool = True,
        tls_trusted_ca_file: Optional[str] = None,
    ):
        self.tls_verify = tls_verify
        self.tls_trusted_ca_file = tls_trusted_ca_file


@dataclass(frozen=True)
class CachePolicy:
    """How an Execute request may be served from an HTTP cache.

    `CachePolicy.ORIGIN` always goes to the gateway. `CachePolicy.ttl(n)` lets a
    cache in front of the gateway answer identical statements from the same user
    for `n` seconds.
    """

    ttl_seconds: Optional[int] = None

    ORIGIN = None  # type: CachePolicy

    @classmethod
    def ttl(cls, seconds: int) -> "CachePolicy":
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValueError(f"TTL must be a positive number of seconds, got {seconds!r}")
        return cls(ttl_seconds=seconds)

    @property
    def is_ttl(self) -> bool:
        return self.ttl_seconds is not None


CachePolicy.ORIGIN = CachePolicy()


@dataclass(frozen=True)
class Query:
    """A SQL statement and the cache policy to run it under."""

    sql: str
    cache_policy: CachePolicy = CachePolicy.ORIGIN
