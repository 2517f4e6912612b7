from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from pathlib import Path
from typing import Optional

PACKAGE_PROMPTS_DIR = Path(__file__).parent / "data" / "prompts"

class Settings(BaseSettings):
    OPENAI_API_KEY: str = Field("", description="OpenAI API Key")
    MODEL: str = "gpt-4o-mini"
    DB_PATH: str = Field("./db.sqlite", description="Path to SQLite database")
    ANALYSIS_WINDOW: int = Field(50, description="Messages fed to each analysis")
    MESSAGES_LIMIT: int = Field(20, description="Cap for GET /messages")
    PROMPTS_DIR: Optional[str] = Field(None, description="Override directory for prompt YAML files")
    LOG_LEVEL: str = "INFO"

    # Only needed by scripts/backfill_history.py
    SLACK_BOT_TOKEN: str = Field("", description="Slack Bot User OAuth Token")

    # MLflow settings
    MLFLOW_TRACKING_URI: str = Field("http://127.0.0.1:5000", description="MLflow tracking server URI")
    MLFLOW_ENABLE_TRACING: bool = Field(False, description="Enable MLflow tracing")

    # Dashboard (client side)
    DASHBOARD_API_URL: str = Field("http://127.0.0.1:8000", description="Base URL of the AsyncBrief API")
    DASHBOARD_STATE_PATH: str = Field(
        str(Path.home() / ".asyncbrief" / "prompts.json"),
        description="Client-local prompt template overrides"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def prompts_dir(self) -> Path:
        return Path(self.PROMPTS_DIR) if self.PROMPTS_DIR else PACKAGE_PROMPTS_DIR

@lru_cache()
def get_settings() -> Settings:
    return Settings()
