"""Template environment - Jinja2 set up for option interpolation.

Registers the extension library filters and the extension tags, and
translates Jinja2 errors into the interp error taxonomy at render time.
"""

import functools
import logging
import threading
from typing import Any, Callable

from jinja2 import (
    ChainableUndefined,
    Environment,
    StrictUndefined,
    TemplateError,
    TemplateSyntaxError,
    UndefinedError,
)

from interp.config import InterpolationConfig
from interp.errors import (
    ExtensionError,
    InterpolationError,
    TemplatingRuntimeError,
    TemplatingSyntaxError,
    UndefinedVariableError,
)
from interp.extensions.filters import (
    regex_replace,
    regex_replace_first,
    to_uri,
    to_xpath,
    uri_escape,
    uri_expand,
)
from interp.extensions.http import HttpProbe, get_probe
from interp.extensions.tags import CredentialExtension, LineBreakExtension

logger = logging.getLogger(__name__)


def _guarded(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    """Report anything a filter raises as an ExtensionError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (TemplateError, InterpolationError):
            raise
        except Exception as e:
            raise ExtensionError(name, e) from e
    return wrapper


def create_environment(
    config: InterpolationConfig | None = None,
    probe: HttpProbe | None = None,
    extension_logger: logging.Logger | None = None,
) -> Environment:
    """Create a Jinja2 environment with the interpolation extensions.

    Args:
        config: Interpolation configuration (uses defaults if None)
        probe: HTTP probe for uri_expand (httpx-backed if None)
        extension_logger: Logger for errors swallowed by uri_expand

    Returns:
        Configured Jinja2 Environment
    """
    config = config or InterpolationConfig()
    probe = probe or get_probe(config)

    environment = Environment(
        extensions=[CredentialExtension, LineBreakExtension],
        undefined=StrictUndefined if config.strict_undefined else ChainableUndefined,
        keep_trailing_newline=config.keep_trailing_newline,
        autoescape=False,
    )

    def expand(url: Any, limit: int = config.redirect_limit) -> str:
        return uri_expand(url, limit, probe=probe, logger=extension_logger)

    filters = {
        "uri_escape": uri_escape,
        "to_uri": to_uri,
        "uri_expand": expand,
        "to_xpath": to_xpath,
        "regex_replace": regex_replace,
        "regex_replace_first": regex_replace_first,
    }
    environment.filters.update(
        {name: _guarded(name, func) for name, func in filters.items()}
    )
    return environment


_default_environment: Environment | None = None
_default_lock = threading.Lock()


def get_default_environment() -> Environment:
    """Get or create the process-wide environment shared by agents."""
    global _default_environment
    if _default_environment is None:
        with _default_lock:
            if _default_environment is None:
                _default_environment = create_environment(InterpolationConfig.from_env())
                logger.debug("Default template environment created")
    return _default_environment


def reset_default_environment() -> None:
    """Drop the shared environment; the next use builds a fresh one."""
    global _default_environment
    with _default_lock:
        _default_environment = None


def render_template(environment: Environment, source: str, variables: dict[str, Any]) -> str:
    """Parse and render one template string.

    Raises:
        TemplatingSyntaxError: Malformed source, unknown tag or filter
        TemplatingRuntimeError: Render failure, including failing filters and tags
        UndefinedVariableError: The template used a variable the context lacks
    """
    try:
        template = environment.from_string(source)
    except TemplateSyntaxError as e:
        raise TemplatingSyntaxError(str(e), lineno=e.lineno) from e

    try:
        return template.render(variables)
    except InterpolationError:
        raise
    except UndefinedError as e:
        raise UndefinedVariableError(str(e)) from e
    except TemplateError as e:
        raise TemplatingRuntimeError(str(e)) from e


__all__ = [
    "create_environment",
    "get_default_environment",
    "reset_default_environment",
    "render_template",
]
