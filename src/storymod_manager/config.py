from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SMM_",
        extra="ignore",
    )

    log_level: str = "INFO"
    origin_label: str = "origin"
    after_patch_label: str = "after_patch"
    empty_label: str = "EmptyMod"
    merged_label: str = "ModMerged"
    abort_on_invalid_structure: bool = False
    unknown_node_warning: bool = True

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


settings = Settings()
