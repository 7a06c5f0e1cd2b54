from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from codereview import constants


class Settings(BaseSettings):
    GEMINI_API_KEY: str = ""
    MODEL_NAME: str = constants.MODEL_NAME

    RETRY_ATTEMPTS: int = Field(constants.RETRY_ATTEMPTS, ge=0)
    INITIAL_DELAY_MS: int = Field(constants.INITIAL_DELAY_MS, ge=0)
    BACKOFF_FACTOR: float = Field(constants.BACKOFF_FACTOR, ge=1)
    ATTEMPT_TIMEOUT_S: Optional[float] = Field(None, gt=0)

    RATE_LIMIT: str = constants.RATE_LIMIT
    CORS_ORIGINS: List[str] = constants.CORS_ORIGINS

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
