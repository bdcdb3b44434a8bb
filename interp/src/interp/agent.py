"""Agent - an automation unit whose options may contain templates.

Usage:
    credentials = InMemoryCredentialStore({"weather": {"api_key": "s3cret"}})
    agent = Agent(
        "weather",
        {"url": "https://api.example.com/?q={{ city | uri_escape }}&key={% credential api_key %}"},
        credentials=credentials,
    )

    agent.is_valid()                       # True
    agent.interpolated({"city": "Paris"})  # {"url": "https://...q=Paris&key=s3cret"}
"""

import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment
from pydantic import BaseModel, Field

from interp.credentials import CredentialStore, NoCredentialStore
from interp.engine import Interpolatable


class AgentDefinition(BaseModel):
    """Serialized form of an agent (YAML or dict)."""
    name: str = Field(..., min_length=1)
    id: str | None = Field(None, description="Owner id used for credential lookup")
    options: dict[str, Any] = Field(default_factory=dict)


class Agent(Interpolatable):
    """Owner of an options tree, its credentials and its evaluation context.

    Attributes:
        id: Owner id, used as the credential store key
        name: Human-readable name
        options: Configuration tree, possibly containing templates
        credentials: Credential store consulted by {% credential %}
    """

    validators = Interpolatable.validators + ("validate_options",)

    def __init__(
        self,
        name: str,
        options: Any = None,
        *,
        id: str | None = None,
        credentials: CredentialStore | None = None,
        environment: Environment | None = None,
    ):
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.options = {} if options is None else options
        self.credentials = credentials or NoCredentialStore()
        self._template_environment = environment

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs) -> "Agent":
        """Create an agent from a definition dict."""
        definition = AgentDefinition.model_validate(data)
        return cls(definition.name, definition.options, id=definition.id, **kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path, **kwargs) -> "Agent":
        """Load an agent definition from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Agent file not found: {path}")

        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.from_dict(data.get("agent", data), **kwargs)

    def credential(self, name: str) -> str | None:
        return self.credentials.lookup_credential(self.id, name)

    def validate_options(self) -> None:
        if not isinstance(self.options, Mapping):
            self.errors.add("options", "must be a mapping")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r}, name={self.name!r})"


__all__ = ["Agent", "AgentDefinition"]
