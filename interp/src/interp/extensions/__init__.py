"""Extensions package - what option templates can call beyond plain variables.

- filters: uri_escape, to_uri, uri_expand, to_xpath, regex_replace, regex_replace_first
- tags: {% credential name %}, {% line_break %}
- http: the HEAD probe used by uri_expand
"""

from .filters import (
    get_extension_logger,
    regex_replace,
    regex_replace_first,
    set_extension_logger,
    to_uri,
    to_xpath,
    uri_escape,
    uri_expand,
)
from .http import HttpProbe, HttpxProbe, OfflineProbe, ProbeResponse, get_probe
from .tags import CredentialExtension, LineBreakExtension
from .uri import Uri

__all__ = [
    # Filters
    "uri_escape",
    "to_uri",
    "uri_expand",
    "to_xpath",
    "regex_replace",
    "regex_replace_first",
    "get_extension_logger",
    "set_extension_logger",

    # Tags
    "CredentialExtension",
    "LineBreakExtension",

    # HTTP
    "HttpProbe",
    "HttpxProbe",
    "OfflineProbe",
    "ProbeResponse",
    "get_probe",

    # Values
    "Uri",
]
