"""Configuration models.

BundlerConfig mirrors the parts of the host bundler configuration the chain
reads and writes. TracerSettings controls the inverse dependency tracer and
is loaded from settings.yaml files with environment overrides:
- User global (~/.resolver-chain/settings.yaml)
- Project (.resolver-chain/settings.yaml)
- Environment (RESOLVER_CHAIN_TRACE_DEPTH, RESOLVER_CHAIN_TRACE_MAX_NODES)
"""

import logging
import os
from pathlib import Path
from typing import Any
from typing import Callable

import yaml
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_DEPTH_LIMIT = 25
DEFAULT_MAX_NODES = 1000

ENV_DEPTH_LIMIT = "RESOLVER_CHAIN_TRACE_DEPTH"
ENV_MAX_NODES = "RESOLVER_CHAIN_TRACE_MAX_NODES"


class ServerConfig(BaseModel):
    """Dev server configuration."""

    model_config = ConfigDict(extra="allow")

    unstable_server_root: str | None = Field(None, description="Root used for server-relative paths")


class ResolverConfig(BaseModel):
    """Resolver section of the bundler configuration."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    resolve_request: Callable[..., Any] | None = Field(
        None, description="Custom resolve function invoked as (context, module_name, platform)"
    )


class BundlerConfig(BaseModel):
    """Host bundler configuration."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    project_root: str | None = Field(None, description="Project root directory")
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    def trace_root(self, project_root: str) -> str:
        """Directory that import stack paths are shown relative to."""
        return self.server.unstable_server_root or self.project_root or project_root


class TracerSettings(BaseModel):
    """Inverse dependency tracer limits."""

    depth_limit: int = Field(default=DEFAULT_DEPTH_LIMIT, ge=0, description="Maximum import chain depth")
    max_nodes: int = Field(default=DEFAULT_MAX_NODES, ge=1, description="Maximum nodes in one traced tree")


def _read_tracer_section(settings_file: Path) -> dict[str, Any]:
    if not settings_file.exists():
        return {}

    try:
        with open(settings_file) as f:
            settings = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read {settings_file}: {e}")
        return {}

    if not isinstance(settings, dict):
        return {}
    section = settings.get("tracer")
    return section if isinstance(section, dict) else {}


def load_tracer_settings(settings_dir: Path | None = None, user_settings_dir: Path | None = None) -> TracerSettings:
    """Load tracer settings.

    Resolution order (later wins):
    1. Defaults
    2. User settings (~/.resolver-chain/settings.yaml)
    3. Project settings (.resolver-chain/settings.yaml)
    4. Environment variables

    Args:
        settings_dir: Project settings directory (default: .resolver-chain)
        user_settings_dir: User settings directory (default: ~/.resolver-chain)

    Returns:
        TracerSettings; invalid values are dropped per key with a warning,
        keeping the value from the previous layer
    """
    if settings_dir is None:
        settings_dir = Path(".resolver-chain")
    if user_settings_dir is None:
        user_settings_dir = Path.home() / ".resolver-chain"

    env_layer: dict[str, Any] = {}
    if env_depth := os.getenv(ENV_DEPTH_LIMIT):
        env_layer["depth_limit"] = env_depth
    if env_nodes := os.getenv(ENV_MAX_NODES):
        env_layer["max_nodes"] = env_nodes

    layers = [
        (str(user_settings_dir / "settings.yaml"), _read_tracer_section(user_settings_dir / "settings.yaml")),
        (str(settings_dir / "settings.yaml"), _read_tracer_section(settings_dir / "settings.yaml")),
        ("environment", env_layer),
    ]

    settings = TracerSettings()
    for source, layer in layers:
        settings = _apply_layer(settings, layer, source)
    return settings


def _apply_layer(settings: TracerSettings, layer: dict[str, Any], source: str) -> TracerSettings:
    """Overlay one settings layer, dropping only the keys that fail validation."""
    for key, value in layer.items():
        if key not in TracerSettings.model_fields:
            logger.debug(f"Ignoring unknown tracer setting '{key}' from {source}")
            continue
        try:
            settings = TracerSettings(**{**settings.model_dump(), key: value})
        except ValidationError as e:
            logger.warning(f"Invalid tracer setting '{key}' from {source}, keeping {getattr(settings, key)}: {e}")
    return settings
