"""URI value type exposed to templates.

Wraps httpx.URL so templates see plain string attributes
(``{{ (url | to_uri).host }}``) and parse failures surface as UriParseError.
"""

import re
from typing import Any

import httpx

from interp.errors import UriParseError

HTTP_SCHEMES = frozenset({"http", "https"})

# Unreserved, reserved and percent characters of RFC 3986
_URI_CHARS = re.compile(r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*")


class Uri:
    """Parsed URI with scheme, userinfo, host, port, path, query and fragment."""

    __slots__ = ("_url",)

    def __init__(self, url: httpx.URL):
        self._url = url

    @classmethod
    def parse(cls, text: Any, base: Any = None) -> "Uri":
        """Parse ``text``, resolving it against ``base`` when given.

        Raises:
            UriParseError: If either value is not a valid URI
        """
        for value in (text, base):
            if value is not None and not _URI_CHARS.fullmatch(str(value)):
                raise UriParseError(f"Invalid URI {str(value)!r}: characters outside RFC 3986")

        try:
            url = httpx.URL(str(text))
            if base is not None:
                url = httpx.URL(str(base)).join(url)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise UriParseError(f"Invalid URI {str(text)!r}: {e}") from e
        return cls(url)

    def join(self, reference: Any) -> "Uri":
        """Resolve a (possibly relative) reference against this URI."""
        return Uri.parse(reference, base=self)

    @property
    def scheme(self) -> str:
        return self._url.scheme

    @property
    def userinfo(self) -> str:
        return self._url.userinfo.decode("ascii")

    @property
    def host(self) -> str:
        return self._url.host

    @property
    def port(self) -> int | None:
        return self._url.port

    @property
    def path(self) -> str:
        return self._url.path

    @property
    def query(self) -> str:
        return self._url.query.decode("ascii")

    @property
    def fragment(self) -> str:
        return self._url.fragment

    @property
    def is_http(self) -> bool:
        return self.scheme in HTTP_SCHEMES

    def __str__(self) -> str:
        return str(self._url)

    def __repr__(self) -> str:
        return f"Uri({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uri):
            return self._url == other._url
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._url)


__all__ = ["Uri", "HTTP_SCHEMES"]
