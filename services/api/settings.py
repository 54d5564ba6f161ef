# services/api/settings.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field, field_validator
from typing import List
from pathlib import Path

from core.variants import StoreConfig, get_variant


class Settings(BaseSettings):
    # Target spreadsheet / tab
    spreadsheet_id: str = ""
    sheet_name: str = "Sheet1"

    # Credentials (first non-empty wins, see core/credentials.py)
    service_account_json_string: str = ""
    google_application_credentials: str = ""
    local_key_file: str = "config/service-account-key.json"

    # Column whose cells hold JSON objects
    custom_data_column: str = "customData"

    # Rows are read as A:<sheet_last_column>
    sheet_last_column: str = "Z"

    # "server" or "functions"
    deployment_variant: str = Field(
        default="server",
        description="Which deployment's response quirks to reproduce",
    )

    # CORS settings
    allowed_origins: str = "http://localhost:4200"

    log_level: str = "INFO"
    port: int = 3000

    model_config = ConfigDict(
        # Always load .env from the same folder as this settings.py
        env_file=str(Path(__file__).resolve().parent / ".env"),
        extra="ignore",
    )

    @field_validator("deployment_variant")
    @classmethod
    def _known_variant(cls, v: str) -> str:
        return get_variant(v).name

    @field_validator("sheet_last_column")
    @classmethod
    def _column_letters(cls, v: str) -> str:
        v = v.strip().upper()
        if not v.isalpha():
            raise ValueError(f"sheet_last_column must be a column letter, got {v!r}")
        return v

    def get_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def store_config(self) -> StoreConfig:
        return StoreConfig(
            spreadsheet_id=self.spreadsheet_id,
            sheet_name=self.sheet_name,
            custom_data_column=self.custom_data_column,
            last_column=self.sheet_last_column,
            variant=get_variant(self.deployment_variant),
        )


_settings_instance = None

def get_settings() -> Settings:
    """Singleton pattern for settings."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
