"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PersonalWorkspaceSettings(BaseSettings):
    """Personal workspace provisioning settings.

    Environment variables:
        TENANT_OPERATOR_PWS_NAME_PREFIX: Prefix of derived workspace names (default: personal-)
        TENANT_OPERATOR_PWS_DEFAULT_CPU: CPU quota of a personal workspace (default: 2)
        TENANT_OPERATOR_PWS_DEFAULT_MEMORY: Memory quota of a personal workspace (default: 4Gi)
        TENANT_OPERATOR_PWS_DEFAULT_INSTANCES: Maximum instances (default: 2)
        TENANT_OPERATOR_PWS_GRANT_NAME: Name of the role binding in the tenant namespace
        TENANT_OPERATOR_PWS_GRANT_CLUSTER_ROLE: Cluster role bound by the grant
        TENANT_OPERATOR_PWS_TYPE_LABEL_KEY: Label marking workspaces as personal
        TENANT_OPERATOR_PWS_TARGET_LABEL_KEY: Label selecting the managing operator
        TENANT_OPERATOR_PWS_TARGET_LABEL_VALUE: Value of the operator selector label
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANT_OPERATOR_PWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name_prefix: str = Field(
        default="personal-",
        description="Prefix prepended to derived personal workspace names",
    )
    default_cpu: str = Field(default="2", description="CPU quota (cores)")
    default_memory: str = Field(default="4Gi", description="Memory quota")
    default_instances: int = Field(
        default=2,
        description="Maximum number of instances in a personal workspace",
        ge=1,
        le=100,
    )
    grant_name: str = Field(
        default="personal-workspace-manage-templates",
        description="Name of the permission grant in the tenant namespace",
    )
    grant_cluster_role: str = Field(
        default="personal-workspace-manager",
        description="Cluster role referenced by the permission grant",
    )
    type_label_key: str = Field(
        default="tenant-operator/workspace-type",
        description="Label key marking a workspace as personal",
    )
    target_label_key: str = Field(
        default="tenant-operator/target",
        description="Label key selecting the operator instance",
    )
    target_label_value: str = Field(
        default="default",
        description="Label value selecting the operator instance",
    )

    @field_validator("name_prefix")
    @classmethod
    def validate_name_prefix(cls, v: str) -> str:
        """Require a non-empty prefix ending in the name separator."""
        if not v or not v.endswith("-"):
            raise ValueError(
                f"name_prefix must be non-empty and end with '-', got {v!r}"
            )
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Tenant Operator", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def personal_workspace(self) -> PersonalWorkspaceSettings:
        """Get personal workspace settings."""
        return get_personal_workspace_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_personal_workspace_settings() -> PersonalWorkspaceSettings:
    """Get cached personal workspace settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return PersonalWorkspaceSettings()
