"""
Centralized runtime settings for the listing pricer.
"""
import os
from dataclasses import dataclass
from typing import Optional


ENV_PREFIX = 'LISTING_PRICER_'


def parse_bool(value: str) -> bool:
    """Parse a boolean from an environment string."""
    return value.strip().lower() in ('true', '1', 'yes', 'on')


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    log_level: str = 'INFO'

    # Raise instead of falling back to desiredProfit when no tier matches
    strict_tiers: bool = False

    # Preview API
    api_host: str = '0.0.0.0'
    api_port: int = 8000
    cors_origins: tuple = ('*',)

    @classmethod
    def load(cls, environ: Optional[dict] = None) -> 'Settings':
        """Load settings from LISTING_PRICER_* environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value not in (None, '') else None

        origins = get('CORS_ORIGINS')
        return cls(
            log_level=(get('LOG_LEVEL') or defaults.log_level).upper(),
            strict_tiers=parse_bool(get('STRICT_TIERS')) if get('STRICT_TIERS') else defaults.strict_tiers,
            api_host=get('API_HOST') or defaults.api_host,
            api_port=int(get('API_PORT') or defaults.api_port),
            cors_origins=tuple(o.strip() for o in origins.split(',')) if origins else defaults.cors_origins,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
