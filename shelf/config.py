import logging
import os
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing_extensions import Self

from shelf.domain.catalog.model.value import RESERVED_FIELD_NAMES


# =============================================================================
# Application Configuration
# =============================================================================


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by SHELF_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("SHELF_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


def _default_port() -> int:
    # PORT is honoured for parity with common PaaS conventions
    return int(os.environ.get("PORT", "3000"))


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "Shelf"
    version: str = "0.1.0"
    description: str = "Catalog of books and artworks with image uploads"
    host: str = "0.0.0.0"
    port: int = Field(default_factory=_default_port)
    public_url: str = ""  # External base URL; empty = relative asset links


class CorsConfig(BaseModel):
    """CORS configuration (nested in Config, uses env_nested_delimiter)."""

    allowed_origins: list[str] = ["*"]
    allowed_methods: list[str] = ["GET", "POST", "PUT", "DELETE"]
    allowed_headers: list[str] = ["*"]


class CatalogConfig(BaseModel):
    """Catalog collection shape and ownership policy."""

    collection: str = "books"  # URL segment, e.g. "books", "artworks", "buku"
    fields: list[str] = ["title", "author"]  # Required text fields on create
    allow_mutation_of_unowned_records: bool = False

    @model_validator(mode="after")
    def check_fields(self) -> Self:
        if not self.fields:
            raise ValueError("catalog.fields must name at least one field")
        clash = RESERVED_FIELD_NAMES.intersection(self.fields)
        if clash:
            raise ValueError(f"catalog.fields uses reserved names: {sorted(clash)}")
        return self


class IdentityConfig(BaseModel):
    """Where the caller identity is read from."""

    header: str = "Authorization"


class StoreConfig(BaseModel):
    """Record store configuration (nested in Config, uses env_nested_delimiter)."""

    backend: Literal["json", "memory", "database"] = "json"
    path: str = "data/books.json"  # JSON backend only
    seed_file: str | None = None  # Initial records for an empty store
    serialize_writes: bool = False  # Opt-in lock around read-modify-write


class DatabaseConfig(BaseModel):
    """Database configuration, used when store.backend is "database".

    An empty url is replaced with a SQLite file next to the JSON store.
    """

    url: str = ""
    echo: bool = False


class AssetConfig(BaseModel):
    """Uploaded image configuration (nested in Config, uses env_nested_delimiter)."""

    backend: Literal["disk", "inline"] = "disk"
    upload_dir: str = "uploads"
    url_prefix: str = "/uploads"
    max_size: int = 5 * 1024 * 1024  # bytes
    accepted_types: list[str] = ["image/jpeg", "image/png", "image/gif", "image/webp"]


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from SHELF_LOG_FILE env var."""
        return os.environ.get("SHELF_LOG_FILE")


class Config(BaseSettings):
    # These are BaseModel, so env_nested_delimiter handles their env vars
    server: Server = Server()
    cors: CorsConfig = CorsConfig()
    catalog: CatalogConfig = CatalogConfig()
    identity: IdentityConfig = IdentityConfig()
    store: StoreConfig = StoreConfig()
    database: DatabaseConfig = DatabaseConfig()
    assets: AssetConfig = AssetConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = {
        "env_prefix": "SHELF_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows SHELF_STORE__BACKEND override
    }

    @model_validator(mode="after")
    def derive_database_url(self) -> Self:
        """Derive database URL from the store path if not explicitly set."""
        if not self.database.url:
            db_file = Path(self.store.path).parent / "shelf.db"
            self.database = DatabaseConfig(
                url=f"sqlite+aiosqlite:///{db_file}",
                echo=self.database.echo,
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - SHELF_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so every module logger
    picks up the handlers.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
