"""Configuration for the APIM CLI.

Configuration is a single Pydantic model describing how to reach the
Management API. Values come, in increasing order of precedence, from the
model defaults, environment variables (optionally seeded from ``.env``
files) and command-line options.

Environment variable binding:
    APIM_URL            Management API root, e.g. http://localhost:8083/management
    APIM_ORGANIZATION   Organization id (default: DEFAULT)
    APIM_ENVIRONMENT    Environment id (default: DEFAULT)
    APIM_TIMEOUT        Total request timeout in seconds (default: 10)
    APIM_VERIFY_SSL     "false" disables certificate verification
    APIM_USERNAME       Fallback for --username
    APIM_PASSWORD       Fallback for --password

Usage examples:
    >>> from apim_cli.configuration import ManagementApiConfig
    >>>
    >>> config = ManagementApiConfig.from_env()
    >>> config = ManagementApiConfig(url="https://apim.example.com/management")
    >>> print(config.base_url)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:8083/management"
DEFAULT_ORGANIZATION = "DEFAULT"
DEFAULT_ENVIRONMENT = "DEFAULT"

ENV_PREFIX = "APIM_"

_FALSE_VALUES = {"0", "false", "no", "off"}


class ManagementApiConfig(BaseModel):
    """Connection settings for the Management API."""

    url: str = Field(default=DEFAULT_URL, description="Management API root URL")
    organization: str = Field(default=DEFAULT_ORGANIZATION, min_length=1)
    environment: str = Field(default=DEFAULT_ENVIRONMENT, min_length=1)
    timeout: float = Field(default=10.0, gt=0, description="Total request timeout in seconds")
    verify_ssl: bool = True

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Management API URL must start with http:// or https://: {value!r}")
        return value.rstrip("/")

    @property
    def base_url(self) -> str:
        """Root of the environment-scoped endpoints."""
        return (
            f"{self.url}/organizations/{self.organization}"
            f"/environments/{self.environment}"
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> "ManagementApiConfig":
        """Build a config from ``APIM_*`` variables; non-None overrides win."""
        values: Dict[str, Any] = {}
        for field in ("url", "organization", "environment", "timeout"):
            env_value = os.getenv(f"{ENV_PREFIX}{field.upper()}")
            if env_value:
                values[field] = env_value

        verify_ssl = os.getenv(f"{ENV_PREFIX}VERIFY_SSL")
        if verify_ssl:
            values["verify_ssl"] = verify_ssl.strip().lower() not in _FALSE_VALUES

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def load_environment_variables(env_file: Optional[Path] = None) -> List[str]:
    """Load ``.env`` files without overriding variables already set.

    An explicit ``env_file`` is read before the current directory's ``.env``,
    so its values take precedence.

    Returns:
        Paths of the files that were loaded
    """
    loaded_files = []
    if env_file is not None:
        env_file = Path(env_file)
        if env_file.is_file():
            load_dotenv(env_file, override=False)
            loaded_files.append(str(env_file))
            logger.info(f"Loaded environment variables from {env_file}")
        else:
            logger.warning(f"Environment file not found: {env_file}")

    project_env = Path.cwd() / ".env"
    if project_env.is_file():
        load_dotenv(project_env, override=False)
        loaded_files.append(str(project_env))
        logger.info(f"Loaded environment variables from project .env: {project_env}")

    if not loaded_files:
        logger.debug("No .env file found")
    return loaded_files


__all__ = [
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_ORGANIZATION",
    "DEFAULT_URL",
    "ManagementApiConfig",
    "load_environment_variables",
]
