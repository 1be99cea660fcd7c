from typing import Optional

from pydantic_settings import BaseSettings

from relay.services.indicator_service import IndicatorMode

REQUIRED_ENV_VARS = (
    "LINE_CHANNEL_ACCESS_TOKEN",
    "LINE_CHANNEL_SECRET",
    "GOOGLE_PROJECT_ID",
    "GOOGLE_APPLICATION_CREDENTIALS",
)


class Settings(BaseSettings):
    line_channel_access_token: str = ""
    line_channel_secret: str = ""
    line_verify_signature: bool = True
    line_api_base_url: str = "https://api.line.me/v2/bot"
    line_timeout_seconds: float = 10.0

    google_project_id: str = ""
    google_application_credentials: Optional[str] = None
    google_credentials_json: Optional[str] = None
    dialogflow_language_code: str = "th-TH"
    nlu_timeout_seconds: float = 10.0

    indicator_mode: IndicatorMode = IndicatorMode.NATIVE
    indicator_time_unit_seconds: float = 1.0

    log_level: str = "INFO"
    port: int = 3000

    class Config:
        env_file = ".env"
        extra = "ignore"

    def missing_env_vars(self) -> list[str]:
        """Names of required variables left empty.

        Inline JSON credentials satisfy the credentials file requirement.
        """
        values = {
            "LINE_CHANNEL_ACCESS_TOKEN": self.line_channel_access_token,
            "LINE_CHANNEL_SECRET": self.line_channel_secret,
            "GOOGLE_PROJECT_ID": self.google_project_id,
            "GOOGLE_APPLICATION_CREDENTIALS": self.google_application_credentials
            or self.google_credentials_json,
        }
        return [name for name in REQUIRED_ENV_VARS if not values[name]]


settings = Settings()
