from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.cookbook.toml_example_repository import BUNDLED_COOKBOOK_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="FieldCatalogRetrieval", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # Cache root: every snapshot, fingerprint and vector store lives below it
    cache_root: Path = Field(
        default=Path.home() / ".cache" / "field-catalog-retrieval",
        validation_alias="CACHE_ROOT",
    )

    # Field catalog
    metadata_max_age_days: int = Field(
        default=7,
        ge=0,
        validation_alias="METADATA_MAX_AGE_DAYS",
        description="Snapshots at least this old are refetched.",
    )
    catalog_version: str = Field(default="v22", validation_alias="CATALOG_VERSION")
    catalog_fetch_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        validation_alias="CATALOG_FETCH_TIMEOUT_SECONDS",
    )
    catalog_page_size: int = Field(default=10_000, ge=1, validation_alias="CATALOG_PAGE_SIZE")

    # Embeddings
    embedding_model_name: str = Field(
        default="BAAI/bge-base-en-v1.5",
        validation_alias="EMBEDDING_MODEL_NAME",
        description="Changing the model invalidates every vector store.",
    )
    embedding_device: Literal["cpu", "cuda", "mps"] = Field(
        default="cpu",
        validation_alias="EMBEDDING_DEVICE",
    )

    # Retrieval
    query_cookbook_path: Path = Field(
        default=BUNDLED_COOKBOOK_PATH,
        validation_alias="QUERY_COOKBOOK_PATH",
    )
    field_suggestion_limit: int = Field(default=10, ge=1, validation_alias="FIELD_SUGGESTION_LIMIT")
    example_context_limit: int = Field(default=3, ge=1, validation_alias="EXAMPLE_CONTEXT_LIMIT")


# Global settings instance
settings = Settings()
