from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

	APP_NAME: str = Field(default="StorePulse Analytics API")
	DEBUG: bool = Field(default=False)
	API_PREFIX: str = Field(default="")

	# Database
	DATABASE_URL: str = Field(default="")

	# Azure Monitor / Application Insights
	AZURE_MONITOR_CONN_STR: str = Field(default="")
	ENABLE_APP_INSIGHTS: bool = Field(default=True)
	SAMPLING_RATIO: float = Field(default=1.0)

	# Analytics timeline
	ANALYTICS_TIMEZONE: str = Field(default="UTC")
	ANALYTICS_CACHE_SIZE: int = Field(default=128, ge=0)
	ANALYTICS_MAX_WORKERS: int = Field(default=0, ge=0)
	POINT_LABEL_MAX_LENGTH: int = Field(default=12, ge=1)


settings = Settings()
