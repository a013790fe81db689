"""Configuration management for mongo-jsonschema."""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DraftName = Literal["draft4", "draft6", "draft7", "draft2019-09", "draft2020-12"]


class MongoConfig(BaseModel):
    """Connection settings used to fetch collection validators."""

    uri: str = Field(default="mongodb://localhost:27017", description="MongoDB connection string.")
    database: str = Field(default="test", description="Database holding the collections to validate against.")
    server_selection_timeout_ms: int = Field(default=5000, ge=1000, le=120000, description="Server selection timeout passed to MongoClient.")


class ValidationConfig(BaseModel):
    """Settings for the JSON Schema validation step."""

    draft: DraftName = Field(default="draft7", description="JSON Schema draft used to validate converted schemas.")
    check_formats: bool = Field(default=False, description="Enforce the 'format' keyword (e.g. date-time) during validation.")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format ('json' or 'console')")


class Config(BaseSettings):
    """Main configuration. Loads from environment variables prefixed with MONGO_JSONSCHEMA_."""

    model_config = SettingsConfigDict(
        env_prefix='MONGO_JSONSCHEMA_',
        env_nested_delimiter='__',  # e.g., MONGO_JSONSCHEMA_MONGO__URI
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    mongo: MongoConfig = Field(default_factory=MongoConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, file_path: Path) -> "Config":
        """Create configuration strictly from a JSON file.
        Environment variables are not layered on top.
        """
        with open(file_path) as f:
            config_data = json.load(f)
        return cls.model_validate(config_data)
