"""
Centralized settings and path configuration for the pricing service.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def get_package_root() -> Path:
    """Get the ``profile_pricing`` package directory."""
    return Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Seed catalog loaded into the product store at startup
    seed_catalog: Path
    load_seed: bool = True

    # Logging
    log_level: str = 'INFO'

    # API server
    api_host: str = '0.0.0.0'
    api_port: int = 8000

    @classmethod
    def load(cls, package_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the environment, falling back to packaged defaults."""
        root = package_root or get_package_root()
        seed_override = os.environ.get('PRICING_SEED_CATALOG')

        return cls(
            seed_catalog=Path(seed_override) if seed_override else root / 'data' / 'seed_products.csv',
            load_seed=_env_bool('PRICING_LOAD_SEED', True),
            log_level=os.environ.get('PRICING_LOG_LEVEL', 'INFO').upper(),
            api_host=os.environ.get('PRICING_API_HOST', '0.0.0.0'),
            api_port=int(os.environ.get('PRICING_API_PORT', '8000')),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
