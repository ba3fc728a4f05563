from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    default_alpha: Optional[float] = None
    unanswered_category_score: Optional[float] = None
    methodology_path: str = ""
    log_level: str = "INFO"

    class Config:
        env_prefix = "VALUATION_"
        env_file = ".env"
        extra = "ignore"
