"""Configuration management for PointFour."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # Serper web search
    serper_api_key: str = Field("", description="Serper API key")
    serper_gl: str = Field("uk", description="Search country code")
    serper_hl: str = Field("en", description="Search interface language")
    results_per_query: int = Field(10, description="Results requested per search query")
    search_timeout: float = Field(15.0, description="Search request timeout in seconds")
    max_search_workers: int = Field(4, description="Parallel search queries per request")

    # Review page enrichment
    fetch_page_content: bool = Field(False, description="Fetch review pages to enrich tags and full content")
    page_fetch_timeout: float = Field(10.0, description="Page fetch timeout in seconds")
    page_fetch_workers: int = Field(4, description="Parallel page fetches per request")

    # OpenAI API
    openai_api_key: str = Field("", description="OpenAI API key")
    OPENAI_API_KEY: str = Field("", description="OpenAI API key (alternative naming)")
    openai_model: str = Field("gpt-4o-mini", description="Model used for review extraction")

    @property
    def effective_openai_key(self) -> str:
        """Get the effective OpenAI API key from either field."""
        return self.openai_api_key or self.OPENAI_API_KEY

    llm_max_tokens: int = Field(1500, description="Token budget for the extraction call")
    llm_temperature: float = Field(0.2, description="Sampling temperature for extraction")
    llm_timeout: float = Field(30.0, description="LLM request timeout in seconds")
    llm_cache_enabled: bool = Field(False, description="Cache LLM responses on disk")
    cache_dir: str = Field(".cache/llm_cache", description="Directory for the LLM response cache")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Retry settings (search gateway)
    max_retries: int = Field(3, description="Maximum retry attempts")
    retry_delay: float = Field(1.0, description="Base retry delay in seconds")
    retry_backoff: float = Field(2.0, description="Retry backoff multiplier")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
