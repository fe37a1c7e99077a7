import json
from typing import Annotated, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Callboard"
    environment: str = "development"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    database_url: str = "sqlite:///./callboard.db"

    rc_server_url: str = "https://platform.ringcentral.com"
    rc_app_client_id: str = ""
    rc_app_client_secret: str = ""
    rc_user_jwt: str = ""
    rc_time_zone: str = "America/Los_Angeles"
    rc_aggregation_page_size: int = 100
    rc_extension_page_size: int = 1000
    rc_message_page_size: int = 1000

    company_name: str = "DKC Lending LLC"

    cors_origins: Annotated[List[str], NoDecode] = ["http://localhost:3000", "http://localhost:3001"]
    cors_origin_patterns: Annotated[List[str], NoDecode] = [
        "https://*.vercel.app",
        "https://*.gohighlevel.com",
        "https://*.ngrok-free.app",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )

    @field_validator("cors_origins", "cors_origin_patterns", mode="before")
    def parse_origin_list(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            cleaned = value.strip()
            if cleaned == "":
                return []
            if cleaned.startswith("["):
                return json.loads(cleaned)
            return [item.strip() for item in cleaned.split(",") if item.strip()]
        return [str(value)]

    @field_validator("rc_time_zone")
    def check_time_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {value}") from exc
        return value

    def missing_ringcentral_settings(self) -> List[str]:
        fields = ("rc_server_url", "rc_app_client_id", "rc_app_client_secret", "rc_user_jwt")
        return [field.upper() for field in fields if not getattr(self, field)]


settings = Settings()
