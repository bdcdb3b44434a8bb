"""Interpolation configuration.

Engine-level settings only: how templates treat undefined variables and
how the redirect resolver talks to the network. Agent options themselves
are not configured here.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Field name -> environment variable read by from_env()
ENV_VARS = {
    "redirect_limit": "INTERP_REDIRECT_LIMIT",
    "http_timeout": "INTERP_HTTP_TIMEOUT",
    "user_agent": "INTERP_USER_AGENT",
    "strict_undefined": "INTERP_STRICT_UNDEFINED",
}


class InterpolationConfig(BaseModel):
    """Interpolation configuration - template policy and redirect limits.

    Attributes:
        redirect_limit: Default maximum HEAD requests in uri_expand
        http_timeout: Per-request timeout in seconds for redirect probes
        user_agent: User-Agent sent with redirect probes
        strict_undefined: Raise on undefined variables instead of rendering empty
        keep_trailing_newline: Preserve a trailing newline in template source
    """

    # Redirect resolver
    redirect_limit: int = Field(5, gt=0, description="Maximum redirect hops")
    http_timeout: float = Field(5.0, gt=0.0, description="Probe timeout in seconds")
    user_agent: str | None = Field(None, description="User-Agent for probes")

    # Template policy
    strict_undefined: bool = Field(True, description="Fail on undefined variables")
    keep_trailing_newline: bool = Field(True)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "InterpolationConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        config_data = data.get("interpolation", data)

        return cls(**config_data)

    @classmethod
    def default(cls) -> "InterpolationConfig":
        """Load default configuration."""
        default_path = Path(__file__).parent / "default.yaml"
        return cls.from_yaml(default_path)

    @classmethod
    def from_env(cls) -> "InterpolationConfig":
        """Create config from environment variables, falling back to defaults.

        A variable whose value does not validate is ignored with a warning
        and the default.yaml value is used for that field.
        """
        values = cls.default().model_dump()
        for field, var in ENV_VARS.items():
            raw = os.getenv(var)
            if raw is None:
                continue
            try:
                cls.model_validate({**values, field: raw})
            except ValidationError as e:
                logger.warning(f"Ignoring {var}={raw!r}: {e.errors()[0]['msg']}")
                continue
            values[field] = raw
        return cls(**values)


__all__ = ["InterpolationConfig"]
