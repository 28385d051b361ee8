"""
Runtime configuration for OPTRACK.

Settings come from three layers (later overrides earlier):
1. Defaults declared on TrackerSettings
2. An optional YAML file named by OPTRACK_CONFIG (loaded with OmegaConf)
3. Environment overrides for paths (OPTRACK_STORE, OPTRACK_LOGS)

Examples:
    >>> settings = load_settings()
    >>> settings.proxy_base
    'https://r.jina.ai'

    # configs/tracker.yaml
    #   proxy_base: https://proxy.example.org
    #   fetch_timeout: 10
    >>> settings = load_settings(Path("configs/tracker.yaml"))
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULT_PROXY_BASE = "https://r.jina.ai"
DEFAULT_STORE_PATH = "~/.optrack/store.json"
DEFAULT_LOG_PATH = "~/.optrack/logs"


@dataclass
class TrackerSettings:
    """Settings shared by the fetcher, storage, and dashboard."""

    proxy_base: str = DEFAULT_PROXY_BASE
    fetch_timeout: float = 20.0
    storage_prefix: str = "opportunity-tracker"
    store_path: str = DEFAULT_STORE_PATH
    log_path: str = DEFAULT_LOG_PATH
    due_soon_days: int = 7
    list_limit: int = 6

    @property
    def store_file(self) -> Path:
        return Path(self.store_path).expanduser()

    @property
    def log_dir(self) -> Path:
        return Path(self.log_path).expanduser()


def load_settings(config_path: Optional[Path] = None) -> TrackerSettings:
    """
    Load tracker settings, merging a YAML file over the defaults.

    Args:
        config_path: Optional YAML path (defaults to OPTRACK_CONFIG env variable)

    Returns:
        TrackerSettings instance

    Raises:
        omegaconf.errors.ConfigKeyError: If the YAML file has unknown keys
    """
    merged = OmegaConf.structured(TrackerSettings)

    if config_path is None and os.getenv("OPTRACK_CONFIG"):
        config_path = Path(os.getenv("OPTRACK_CONFIG"))

    if config_path is not None and Path(config_path).exists():
        merged = OmegaConf.merge(merged, OmegaConf.load(config_path))

    settings = OmegaConf.to_object(merged)

    # Environment wins for paths so tests and shells can redirect storage
    if os.getenv("OPTRACK_STORE"):
        settings.store_path = os.getenv("OPTRACK_STORE")
    if os.getenv("OPTRACK_LOGS"):
        settings.log_path = os.getenv("OPTRACK_LOGS")

    return settings
