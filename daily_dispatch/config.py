from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    api_host: str = Field(default="localhost", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")

    # News provider credentials (absent key disables that tier)
    newsapi_key: Optional[str] = Field(default=None, description="NewsAPI key")
    gnews_key: Optional[str] = Field(default=None, description="GNews API key")
    news_request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single news provider request"
    )
    article_content_max_chars: int = Field(
        default=5000,
        description="Maximum characters kept from a fetched article page"
    )

    # LLM
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_model_name: str = Field(default="gpt-4o", description="OpenAI model for lessons and articles")
    openai_summary_model_name: str = Field(default="gpt-4o-mini", description="OpenAI model for summaries")
    agent_max_steps: int = Field(default=6, description="Maximum tool-calling rounds per generation")
    generation_cache_ttl_seconds: int = Field(
        default=3600,
        description="TTL for cached article/summary generations"
    )

    # Memgraph
    memgraph_uri: str = Field(default="bolt://localhost:7687", description="Memgraph connection URI")
    memgraph_username: str = Field(
        default="",
        description="Memgraph username",
        validation_alias=AliasChoices("MEMGRAPH_USER", "MEMGRAPH_USERNAME"),
    )
    memgraph_password: str = Field(default="", description="Memgraph password")
    memgraph_connect_retries: int = Field(default=5, description="Connection attempts at startup")
    memgraph_retry_delay_seconds: float = Field(default=2.0, description="Delay between connection attempts")

    # Scheduler (fixed offset, no DST)
    schedule_hour: int = Field(default=3, description="Local hour of the daily run")
    schedule_minute: int = Field(default=0, description="Local minute of the daily run")
    schedule_utc_offset_hours: int = Field(default=8, description="Fixed UTC offset of the schedule")

    # Cache
    cache_list_ttl_seconds: int = Field(default=30 * 24 * 60 * 60, description="TTL refreshed on list writes")
    cache_history_limit: int = Field(default=100, description="Entries kept in cleanup history")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("newsapi_key", "gnews_key", "openai_api_key", mode="before")
    @classmethod
    def empty_key_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("schedule_hour")
    @classmethod
    def validate_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError("schedule_hour must be between 0 and 23")
        return value

    @field_validator("schedule_minute")
    @classmethod
    def validate_minute(cls, value: int) -> int:
        if not 0 <= value <= 59:
            raise ValueError("schedule_minute must be between 0 and 59")
        return value

    class Config:
        env_file = [".env", ".env.local"]  # .env.local takes precedence over .env
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
