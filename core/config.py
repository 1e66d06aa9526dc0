"""Configuration models and loading."""

import json
import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "egress-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"
SECRET_ENV_VAR = "PROXY_SECRET"
DIST_NAME = "egress-proxy"


def package_version() -> str:
    """Version of the installed distribution."""
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return "0.0.0+local"


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    dashboard: bool = True


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None leaves timeouts to the network and the caller
    timeout: float | None = None
    follow_redirects: bool = True


class CacheSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_entries: int = Field(default=256, ge=1)
    max_body_bytes: int = Field(default=5 * 1024 * 1024, ge=0)


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: str = ""
    version: str = Field(default_factory=package_version)
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @property
    def secret_source(self) -> str:
        if os.environ.get(SECRET_ENV_VAR):
            return f"${SECRET_ENV_VAR}"
        return "config file" if self.secret else "unset"


def load_config(path: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed.

    The `PROXY_SECRET` environment variable overrides the file's secret.
    """
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        config = Config()
        # Version is resolved at startup, never pinned in the file
        path.write_text(config.model_dump_json(indent=2, exclude={"version"}))
    else:
        try:
            data = json.loads(path.read_text())
            config = Config.model_validate(data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
        except ValidationError as e:
            raise ConfigurationError(f"{path} is invalid: {e}") from e

    env_secret = os.environ.get(SECRET_ENV_VAR)
    if env_secret:
        config = config.model_copy(update={"secret": env_secret})
    return config
