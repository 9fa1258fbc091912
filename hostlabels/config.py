"""Settings for hostlabels, loaded from YAML."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .core.codec import OS_MAXSTR
from .core.exceptions import LabelError
from .core.expansion import OS_COMMENT_MAX
from .facts.base import FactProvider, NetworkInfo, OSInfo, StaticFactProvider

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HOSTLABELS_CONFIG"


class ProviderKind(str, Enum):
    """Which fact provider to use."""

    AUTO = "auto"
    LINUX = "linux"
    PORTABLE = "portable"
    STATIC = "static"


class StaticFacts(BaseModel):
    """Facts served by the static provider."""

    os: OSInfo = Field(default_factory=OSInfo)
    network: NetworkInfo = Field(default_factory=NetworkInfo)
    utc_offset: Optional[int] = Field(
        None, description="UTC offset in hours; local clock when unset"
    )


class Settings(BaseModel):
    """hostlabels settings."""

    label_file: Optional[Path] = Field(None, description="Default label file")
    output_capacity: int = Field(
        default=OS_MAXSTR, gt=0, description="Capacity of rendered output"
    )
    expansion_max_length: int = Field(
        default=OS_COMMENT_MAX, gt=0, description="Capacity of one expanded value"
    )
    provider: ProviderKind = Field(default=ProviderKind.AUTO)
    static_facts: StaticFacts = Field(default_factory=StaticFacts)

    def build_provider(self) -> FactProvider:
        """Instantiate the configured fact provider."""
        if self.provider == ProviderKind.STATIC:
            return StaticFactProvider(
                os_info=self.static_facts.os,
                network=self.static_facts.network,
                utc_offset=self.static_facts.utc_offset,
            )
        if self.provider == ProviderKind.LINUX:
            from .facts.linux import LinuxFactProvider

            return LinuxFactProvider()
        if self.provider == ProviderKind.PORTABLE:
            from .facts.system import PortableFactProvider

            return PortableFactProvider()

        from .facts.system import get_default_provider

        return get_default_provider()


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        path: Settings file; defaults to $HOSTLABELS_CONFIG. When neither is
            given, or the file does not exist, defaults are returned.

    Returns:
        Settings instance

    Raises:
        LabelError: If the file cannot be read or holds invalid settings
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return Settings()

    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", path)
        return Settings()
    except OSError as e:
        raise LabelError(f"Cannot read settings file {path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
        return Settings(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        raise LabelError(f"Invalid settings file {path}: {e}") from e
