"""interp - template interpolation for agent options.

Agents keep static options (strings, nested mappings, sequences) that may
embed Jinja2 expressions. interp renders them against a per-agent
evaluation context:

- Scoped evaluation context (current subject stack, local scopes, registers)
- Recursive, cached interpolation of whole option trees
- Filters for URIs, XPath literals, regex replacement and redirect expansion
- Tags for credentials and literal line breaks
- A validation hook that reports templating errors on the options field

Quick Start:
    from interp import Agent, InMemoryCredentialStore

    store = InMemoryCredentialStore({"feed": {"token": "abc"}})
    agent = Agent("feed", {"url": "{{ link | uri_expand }}",
                           "auth": "Bearer {% credential token %}"},
                  id="feed", credentials=store)

    assert agent.is_valid()
    options = agent.interpolated({"link": "https://bit.ly/xyz"})
"""

from interp.errors import (
    InterpolationError,
    TemplatingError,
    TemplatingSyntaxError,
    TemplatingRuntimeError,
    CredentialNotFound,
    ExtensionError,
    UndefinedVariableError,
    UriParseError,
    ProbeError,
)
from interp.config import InterpolationConfig
from interp.context import EvaluationContext
from interp.environment import create_environment, get_default_environment, render_template
from interp.engine import Interpolatable
from interp.credentials import CredentialStore, InMemoryCredentialStore, NoCredentialStore
from interp.validation import ValidationErrors, AgentValidationError
from interp.agent import Agent, AgentDefinition

__all__ = [
    # Errors
    "InterpolationError",
    "TemplatingError",
    "TemplatingSyntaxError",
    "TemplatingRuntimeError",
    "CredentialNotFound",
    "ExtensionError",
    "UndefinedVariableError",
    "UriParseError",
    "ProbeError",

    # Config
    "InterpolationConfig",

    # Engine
    "EvaluationContext",
    "Interpolatable",
    "create_environment",
    "get_default_environment",
    "render_template",

    # Agent
    "Agent",
    "AgentDefinition",
    "CredentialStore",
    "InMemoryCredentialStore",
    "NoCredentialStore",
    "ValidationErrors",
    "AgentValidationError",
]
