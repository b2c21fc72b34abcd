"""Application configuration using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    app_host: str = "0.0.0.0"
    app_port: int = 3000

    # Static assets served to the chat UI
    public_dir: str = "public"
    public_subdirs: list[str] = ["screenshots", "downloads", "videos"]

    # ==========================================================================
    # LLM (OpenRouter, OpenAI-compatible API)
    # ==========================================================================
    openrouter_api_key: str = ""
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "openai/gpt-4o-mini"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2000
    llm_timeout_seconds: float = 60.0
    llm_referer: str = "http://localhost:3000"
    llm_app_title: str = "Shopping Agent"

    # LLM Caching (Redis)
    redis_url: str = "redis://localhost:6379/0"
    llm_cache_enabled: bool = False
    llm_cache_ttl_seconds: int = 600

    # Cost Tracking
    track_llm_costs: bool = True
    llm_cost_limit_per_day: float = 5.0

    # ==========================================================================
    # Browser Settings
    # ==========================================================================
    session_file: str = "browser-session.json"
    browser_headless: bool = False
    browser_args: list[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-blink-features=AutomationControlled",
    ]
    browser_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    browser_viewport: dict[str, int] = {"width": 1920, "height": 1080}
    browser_locale: str = "en-IN"

    # Navigation timing (milliseconds)
    open_site_timeout_ms: int = 60000
    open_site_settle_ms: int = 6000
    platform_nav_timeout_ms: int = 30000
    platform_settle_ms: int = 2000
    search_input_timeout_ms: int = 10000
    search_settle_ms: int = 4000
    login_wait_timeout_ms: int = 300000
    login_settle_ms: int = 6000
    youtube_settle_ms: int = 3000

    # ==========================================================================
    # Aggregation
    # ==========================================================================
    universal_product_threshold: int = 10  # Stop visiting sites once reached, also the cap
    platform_product_limit: int = 15
    youtube_video_count: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def llm_configured(self) -> bool:
        return bool(self.openrouter_api_key)


settings = Settings()
