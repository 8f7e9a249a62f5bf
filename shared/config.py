"""
Shared configuration management for search skill services.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias=AliasChoices("SKILL_ENV", "env"))
    log_level: str = Field(default="info", validation_alias=AliasChoices("SKILL_LOG_LEVEL", "log_level"))
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("SKILL_HOST", "host"))

    # Folder priority rules. Kept as raw strings; the rule loader owns parsing
    # so that a bad value degrades instead of failing settings validation.
    folder_priority_rules: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FOLDER_PRIORITY_RULES", "FolderPriorityRules", "folder_priority_rules"),
    )
    default_folder_priority: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEFAULT_FOLDER_PRIORITY", "DefaultFolderPriority", "default_folder_priority"),
    )

    # Resolution strategy: substring | segment | auto
    folder_priority_strategy: str = Field(
        default="substring",
        validation_alias=AliasChoices("FOLDER_PRIORITY_STRATEGY", "folder_priority_strategy"),
    )
    folder_priority_anchor: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FOLDER_PRIORITY_ANCHOR", "folder_priority_anchor"),
    )
    folder_priority_segment_prefix: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FOLDER_PRIORITY_SEGMENT_PREFIX", "folder_priority_segment_prefix"),
    )
    folder_priority_segment_sentinel: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("FOLDER_PRIORITY_SEGMENT_SENTINEL", "folder_priority_segment_sentinel"),
    )

    # Output contract: merge keeps the record's fields, replace emits only the priority
    folder_priority_output_key: str = Field(
        default="priority",
        validation_alias=AliasChoices("FOLDER_PRIORITY_OUTPUT_KEY", "folder_priority_output_key"),
    )
    folder_priority_output_mode: str = Field(
        default="merge",
        validation_alias=AliasChoices("FOLDER_PRIORITY_OUTPUT_MODE", "folder_priority_output_mode"),
    )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
