"""HTTP probe - the network boundary of the redirect resolver.

uri_expand only ever needs one operation: a HEAD request that does not
follow redirects. Keeping it behind an interface lets tests swap in a
fake transport and lets embedders share a client.

Implementations:
- HttpxProbe: httpx.Client with a per-request timeout (production)
- OfflineProbe: answers every request with 200, so nothing is followed
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from interp.errors import ProbeError

if TYPE_CHECKING:
    from interp.config import InterpolationConfig


logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307})


@dataclass(frozen=True)
class ProbeResponse:
    """Status code and headers of a HEAD response."""
    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    def __post_init__(self):
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers))

    @property
    def is_redirect(self) -> bool:
        return self.status_code in REDIRECT_STATUSES

    @property
    def location(self) -> str | None:
        """Location header, or None when missing or blank."""
        value = self.headers.get("location")
        if value is None or not value.strip():
            return None
        return value.strip()


class HttpProbe(ABC):
    """Abstract interface for HEAD probes."""

    @abstractmethod
    def head(self, url: str) -> ProbeResponse:
        """Issue a HEAD request to an absolute HTTP(S) URL.

        Redirects must not be followed.

        Raises:
            ProbeError: On connection failures, timeouts and malformed responses
        """
        ...

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> "HttpProbe":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class HttpxProbe(HttpProbe):
    """HEAD probe backed by httpx.

    Args:
        timeout: Per-request timeout in seconds
        user_agent: Optional User-Agent header
        client: Pre-built client (its timeout and transport are used as is)
        transport: Custom transport, e.g. httpx.MockTransport in tests
    """

    def __init__(
        self,
        timeout: float = 5.0,
        user_agent: str | None = None,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._owns_client = client is None
        if client is None:
            headers = {"User-Agent": user_agent} if user_agent else None
            client = httpx.Client(
                timeout=timeout,
                follow_redirects=False,
                headers=headers,
                transport=transport,
            )
        self.client = client

    def head(self, url: str) -> ProbeResponse:
        try:
            response = self.client.head(url, follow_redirects=False)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProbeError(f"HEAD {url} failed: {e}", url=url) from e

        logger.debug(f"HEAD {url} -> {response.status_code}")
        return ProbeResponse(response.status_code, response.headers)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()


class OfflineProbe(HttpProbe):
    """Probe that never touches the network; every URL is final."""

    def head(self, url: str) -> ProbeResponse:
        return ProbeResponse(200)


_PROBE_MAPPING = {
    "httpx": HttpxProbe,
    "offline": OfflineProbe,
}


def get_probe(
    config: "InterpolationConfig | None" = None,
    mode: str = "httpx",
) -> HttpProbe:
    """Factory function to create an HTTP probe.

    Args:
        config: Interpolation configuration (uses defaults if None)
        mode: Probe mode - 'httpx' or 'offline'

    Returns:
        HttpProbe instance
    """
    if mode not in _PROBE_MAPPING:
        raise ValueError(
            f"Unknown probe mode: {mode}. Available: {list(_PROBE_MAPPING)}"
        )

    if mode == "offline":
        return OfflineProbe()

    if config is None:
        from interp.config import InterpolationConfig
        config = InterpolationConfig()

    return HttpxProbe(timeout=config.http_timeout, user_agent=config.user_agent)


__all__ = [
    "HttpProbe",
    "HttpxProbe",
    "OfflineProbe",
    "ProbeResponse",
    "REDIRECT_STATUSES",
    "get_probe",
]
