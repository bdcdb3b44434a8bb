"""Extension library - filters callable from option templates.

    {{ query | uri_escape }}
    {{ path | to_uri(base_url) }}
    {{ short_url | uri_expand }}
    {{ title | to_xpath }}
    {{ text | regex_replace('\\s+', ' ') }}
    {{ text | regex_replace_first('^Re: ', '') }}

The functions here are plain Python and hold no engine state. uri_expand
takes its HTTP probe and logger as arguments; interp.environment binds
them when the filters are registered.
"""

import logging
import re
import threading
import traceback
from typing import Any
from urllib.parse import quote

from interp.errors import ProbeError, UriParseError
from .http import HttpProbe
from .uri import Uri

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def get_extension_logger() -> logging.Logger:
    """Get or create the logger shared by the extension library."""
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = logging.getLogger("interp.extensions")
    return _logger


def set_extension_logger(logger: logging.Logger | None) -> None:
    """Replace the extension logger (None restores the default on next use)."""
    global _logger
    with _logger_lock:
        _logger = logger


def _log_error(logger: logging.Logger, error_kind: str, operation: str,
               inputs: dict[str, Any], message: str, trace: str | None = None) -> None:
    """Emit a structured error record. Never raises."""
    try:
        text = f"{error_kind} in {operation}({', '.join(f'{k}={v!r}' for k, v in inputs.items())}): {message}"
        if trace:
            text = f"{text}:\n{trace}"
        logger.error(text, extra={
            "error_kind": error_kind,
            "operation": operation,
            "inputs": inputs,
            "trace": trace,
        })
    except Exception:
        # logging must never break a render
        pass


def uri_escape(text: Any) -> Any:
    """Percent-encode a string for use inside a URI component (RFC 3986)."""
    try:
        return quote(text, safe="")
    except (TypeError, UnicodeError, AttributeError):
        return text


def to_uri(text: Any, base: Any = None) -> Uri | None:
    """Parse a URI, optionally resolving it against a base URI.

    Returns None instead of raising for malformed input.
    """
    try:
        return Uri.parse(text, base=base)
    except UriParseError:
        return None


def uri_expand(
    url: Any,
    limit: int = 5,
    *,
    probe: HttpProbe,
    logger: logging.Logger | None = None,
) -> str:
    """Get the destination of a URL by following redirects up to ``limit`` times.

    - A string that is not a valid URI is returned unchanged.
    - Non-HTTP(S) and host-less URIs are returned as they are.
    - On a network/protocol error the last URL reached is returned.
    - When the limit is exhausted the original URL is returned.

    Args:
        url: URL string or Uri
        limit: Maximum number of HEAD requests
        probe: HTTP probe used for HEAD requests
        logger: Logger for swallowed errors (defaults to the extension logger)

    Returns:
        The resolved URL as a string
    """
    if isinstance(url, Uri):
        uri = url
        original = str(url)
    else:
        original = str(url)
        try:
            uri = Uri.parse(original)
        except UriParseError:
            return original

    logger = logger or get_extension_logger()
    followed = False

    for _ in range(limit):
        try:
            if uri.is_http and uri.host:
                response = probe.head(str(uri))
                if response.is_redirect and response.location:
                    uri = uri.join(response.location)
                    followed = True
                    continue
        except (UriParseError, ProbeError) as e:
            _log_error(
                logger,
                error_kind=type(e).__name__,
                operation="uri_expand",
                inputs={"url": original, "uri": str(uri)},
                message=str(e),
                trace=traceback.format_exc(),
            )

        # Until a redirect is followed the input itself is the answer
        return str(uri) if followed else original

    _log_error(
        logger,
        error_kind="RedirectLimitExceeded",
        operation="uri_expand",
        inputs={"url": original, "uri": str(uri), "limit": limit},
        message="Too many redirections",
    )
    return original


def to_xpath(text: Any) -> str:
    """Escape a string for use as an XPath string literal.

    A value containing both quote characters is split into runs that each
    avoid one of them and joined with concat().
    """
    text = str(text)
    runs = _quote_safe_runs(text)
    quoted = [f'"{run}"' if "'" in run else f"'{run}'" for run in runs]
    if len(quoted) == 1:
        return quoted[0]
    return f"concat({', '.join(quoted)})"


_NO_DOUBLE_QUOTE = re.compile(r'[^"]+')
_NO_SINGLE_QUOTE = re.compile(r"[^']+")


def _quote_safe_runs(text: str) -> list[str]:
    if not text:
        return [""]

    runs = []
    pos = 0
    while pos < len(text):
        match = _NO_DOUBLE_QUOTE.match(text, pos) or _NO_SINGLE_QUOTE.match(text, pos)
        runs.append(match.group())
        pos = match.end()
    return runs


def regex_replace(text: Any, pattern: str, replacement: Any = "") -> str:
    """Replace every match of ``pattern`` in ``text``."""
    return re.compile(pattern).sub(str(replacement), str(text))


def regex_replace_first(text: Any, pattern: str, replacement: Any = "") -> str:
    """Replace the first match of ``pattern`` in ``text``."""
    return re.compile(pattern).sub(str(replacement), str(text), count=1)


__all__ = [
    "get_extension_logger",
    "set_extension_logger",
    "uri_escape",
    "to_uri",
    "uri_expand",
    "to_xpath",
    "regex_replace",
    "regex_replace_first",
]
