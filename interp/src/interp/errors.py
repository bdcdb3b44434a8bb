"""Error taxonomy for option interpolation.

Two families matter to callers:

- TemplatingError: the template itself is broken (bad syntax, a missing
  credential, a filter that blew up). The validation hook reports these
  as field errors on the agent's options.
- Everything else (UndefinedVariableError in particular): the template is
  fine but the data it needs is not there yet, typically because no
  subject has been pushed. The validation hook ignores these.

UriParseError and ProbeError never leave the extension library.
"""


class InterpolationError(Exception):
    """Base class for all interpolation errors."""


class TemplatingError(InterpolationError):
    """A template could not be parsed or rendered."""


class TemplatingSyntaxError(TemplatingError):
    """Malformed template source, unknown tag or unknown filter."""

    def __init__(self, message: str, lineno: int | None = None):
        self.lineno = lineno
        super().__init__(message)


class TemplatingRuntimeError(TemplatingError):
    """Failure while rendering a parsed template."""


class CredentialNotFound(TemplatingRuntimeError):
    """The credential tag referenced a name the agent does not define."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No user credential named '{name}' defined")


class ExtensionError(TemplatingRuntimeError):
    """A registered filter raised while rendering."""

    def __init__(self, filter_name: str, cause: BaseException):
        self.filter_name = filter_name
        self.cause = cause
        super().__init__(f"{filter_name}: {type(cause).__name__}: {cause}")


class UndefinedVariableError(InterpolationError):
    """A template referenced a variable that is not in the context."""


class UriParseError(InterpolationError, ValueError):
    """Text could not be parsed as a URI."""


class ProbeError(Exception):
    """Transport-level failure of an HTTP probe (connect, timeout, protocol)."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


__all__ = [
    "InterpolationError",
    "TemplatingError",
    "TemplatingSyntaxError",
    "TemplatingRuntimeError",
    "CredentialNotFound",
    "ExtensionError",
    "UndefinedVariableError",
    "UriParseError",
    "ProbeError",
]
