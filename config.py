"""
Configuration for the productivity tracker
Database settings for PostgreSQL and the optional recommendation LLM
Environment-aware configuration based on APP_ENV
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Literal
from urllib.parse import quote_plus
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Environment modes
EnvironmentMode = Literal["development", "test", "production"]

# Whole name segments that mark a production database ("productivity_test" has none)
PRODUCTION_NAME_TOKENS = {"prod", "production"}


def _name_tokens(name: str) -> set:
    return set(re.split(r"[^a-z0-9]+", name.lower()))


def load_app_environment(mode: Optional[str] = None) -> str:
    """
    Load environment variables from the appropriate .env file.

    Priority:
    1. Explicit 'mode' argument
    2. APP_ENV environment variable
    3. Default to 'development'

    Loads .env.{mode} if it exists, falling back to .env
    """
    if not mode:
        mode = os.getenv('APP_ENV', 'development')

    base_path = Path(__file__).parent
    env_file = base_path / f'.env.{mode}'

    if not env_file.exists():
        env_file = base_path / '.env'

    if env_file.exists():
        logger.info(f"Loading config from {env_file}")
        # Host environment variables take precedence over file values
        load_dotenv(env_file, override=False)
    else:
        logger.debug(f"No config file found for mode '{mode}'")

    return mode


@dataclass
class DatabaseConfig:
    """PostgreSQL database configuration"""

    host: str
    port: int
    database: str
    user: str
    password: str

    # Connection pool settings
    min_pool_size: int = 2
    max_pool_size: int = 10
    command_timeout: int = 60  # seconds

    ssl_mode: str = "require"

    @property
    def connection_string(self) -> str:
        """Get PostgreSQL connection string"""
        return (
            f"postgresql://{self.user}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}"
            f"?sslmode={self.ssl_mode}"
        )

    @property
    def asyncpg_dsn(self) -> str:
        """Get asyncpg DSN format"""
        return (
            f"postgresql://{self.user}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @classmethod
    def from_environment(cls, mode: Optional[EnvironmentMode] = None) -> 'DatabaseConfig':
        """
        Load configuration from environment variables

        Environment variables:
        - APP_ENV: Environment mode (development, test, production)
        - DB_HOST: Database host (default: localhost)
        - DB_PORT: Database port (default: 5432)
        - DB_NAME: Database name (default: productivity_db, productivity_test in test mode)
        - DB_USER: Database user
        - DB_PASSWORD: Database password
        - DB_SSL_MODE: SSL mode (default: prefer in development/test, require in production)

        Args:
            mode: Override environment mode (default: reads from APP_ENV)
        """
        mode = load_app_environment(mode)
        default_name = 'productivity_test' if mode == 'test' else 'productivity_db'

        config = cls(
            host=os.getenv('DB_HOST', 'localhost'),
            port=int(os.getenv('DB_PORT', '5432')),
            database=os.getenv('DB_NAME', default_name),
            user=os.getenv('DB_USER', 'postgres'),
            password=os.getenv('DB_PASSWORD', ''),
            ssl_mode=os.getenv('DB_SSL_MODE', 'require' if mode == 'production' else 'prefer'),
            min_pool_size=int(os.getenv('DB_MIN_POOL_SIZE', '2')),
            max_pool_size=int(os.getenv('DB_MAX_POOL_SIZE', '10')),
        )

        config.validate_safety(mode)

        return config

    def validate_safety(self, mode: str):
        """Ensure configuration is safe for the requested mode"""
        if mode == 'test':
            if 'test' not in self.database:
                raise ValueError(f"SAFETY ERROR: Test mode requested but database is '{self.database}'. Test database must contain 'test'.")
            if PRODUCTION_NAME_TOKENS & _name_tokens(self.database):
                raise ValueError(f"SAFETY ERROR: Test mode requested but database '{self.database}' appears to be production.")

    @classmethod
    def for_local_development(cls) -> 'DatabaseConfig':
        """Configuration for local PostgreSQL instance"""
        return cls(
            host='localhost',
            port=5432,
            database='productivity_db',
            user='postgres',
            password='postgres',
            ssl_mode='prefer',
            min_pool_size=2,
            max_pool_size=5,
        )

    @classmethod
    def for_testing(cls) -> 'DatabaseConfig':
        """Configuration for test PostgreSQL database"""
        return cls(
            host='localhost',
            port=5432,
            database='productivity_test',
            user='postgres',
            password='postgres',
            ssl_mode='prefer',
            min_pool_size=1,
            max_pool_size=5,
        )


class LLMProvider(Enum):
    """Supported LLM providers for productivity recommendations."""
    CLAUDE = "claude"
    OPENAI = "openai"


DEFAULT_MODELS = {
    LLMProvider.CLAUDE: "claude-sonnet-4-20250514",
    LLMProvider.OPENAI: "gpt-4o-mini",
}

API_KEY_VARIABLES = {
    LLMProvider.CLAUDE: "ANTHROPIC_API_KEY",
    LLMProvider.OPENAI: "OPENAI_API_KEY",
}


@dataclass
class RecommendationConfig:
    """
    Configuration for the AI recommendation collaborator.

    Environment Variables:
    - RECOMMENDATIONS_ENABLED: Enable/disable AI recommendations (default: true)
    - RECOMMENDATION_PROVIDER: claude or openai (default: claude)
    - RECOMMENDATION_MODEL: Model name (default depends on provider)
    - ANTHROPIC_API_KEY / OPENAI_API_KEY: Provider credentials

    Recommendations are switched off when the provider has no API key.
    """
    enabled: bool = False
    provider: LLMProvider = LLMProvider.CLAUDE
    model: str = DEFAULT_MODELS[LLMProvider.CLAUDE]
    api_key: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 4096

    @classmethod
    def from_environment(cls) -> "RecommendationConfig":
        enabled_str = os.getenv("RECOMMENDATIONS_ENABLED", "true").lower()

        provider_name = os.getenv("RECOMMENDATION_PROVIDER", LLMProvider.CLAUDE.value).lower()
        try:
            provider = LLMProvider(provider_name)
        except ValueError:
            logger.warning(f"Unknown recommendation provider '{provider_name}', using claude")
            provider = LLMProvider.CLAUDE

        api_key = os.getenv(API_KEY_VARIABLES[provider])

        return cls(
            enabled=enabled_str in ("true", "1", "yes") and bool(api_key),
            provider=provider,
            model=os.getenv("RECOMMENDATION_MODEL", DEFAULT_MODELS[provider]),
            api_key=api_key,
            temperature=float(os.getenv("RECOMMENDATION_TEMPERATURE", "0.7")),
            max_tokens=int(os.getenv("RECOMMENDATION_MAX_TOKENS", "4096")),
        )


# Utility functions
def get_environment_mode() -> EnvironmentMode:
    """Get current environment mode from APP_ENV variable"""
    mode = os.getenv('APP_ENV', 'development').lower()
    if mode not in ('development', 'test', 'production'):
        mode = 'development'
    return mode  # type: ignore


def is_test_mode() -> bool:
    """Check if running in test mode"""
    return get_environment_mode() == 'test'


def is_production_mode() -> bool:
    """Check if running in production mode"""
    return get_environment_mode() == 'production'


def get_log_level() -> int:
    """Root log level from LOG_LEVEL (default INFO)"""
    level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
    return getattr(logging, level_name, logging.INFO)

