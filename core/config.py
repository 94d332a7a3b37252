from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Assessment defaults
    default_skinfold_formula: str = Field("pollock3", alias="DEFAULT_SKINFOLD_FORMULA")
    body_fat_equation: str = Field("siri", alias="BODY_FAT_EQUATION")  # siri|brozek

    # CORS / Web
    allowed_origins: str = Field("http://localhost:5173,http://localhost:3000", alias="ALLOWED_ORIGINS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
