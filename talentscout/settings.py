from dataclasses import dataclass
import os

DEFAULT_GITHUB_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    return float(value)


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip() or default


@dataclass(frozen=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "talentscout")
    log_level: str = _env_str("LOG_LEVEL", "INFO")
    log_format: str = _env_str("LOG_FORMAT", "console")
    log_requests: bool = _env_bool("LOG_REQUESTS", True)
    log_uvicorn_access: bool = _env_bool("LOG_UVICORN_ACCESS", False)
    log_request_skip_paths: str = _env_str("LOG_REQUEST_SKIP_PATHS", "/healthz")
    log_redact_fields: str = os.getenv("LOG_REDACT_FIELDS", "")
    github_base_url: str = _env_str("GITHUB_BASE_URL", "https://github.com")
    github_http_timeout_seconds: float = _env_float("GITHUB_HTTP_TIMEOUT_SECONDS", 15.0)
    github_http_user_agent: str = _env_str("GITHUB_HTTP_USER_AGENT", DEFAULT_GITHUB_USER_AGENT)
    github_http_accept_language: str = _env_str("GITHUB_HTTP_ACCEPT_LANGUAGE", "en-US,en;q=0.5")
    github_profile_batch_size: int = _env_int("GITHUB_PROFILE_BATCH_SIZE", 3)
    github_batch_delay_seconds: float = _env_float("GITHUB_BATCH_DELAY_SECONDS", 3.0)
    github_connectivity_check_enabled: bool = _env_bool(
        "GITHUB_CONNECTIVITY_CHECK_ENABLED",
        True,
    )
    github_default_query: str = _env_str("GITHUB_DEFAULT_QUERY", "javascript developer")
    github_default_pages: int = _env_int("GITHUB_DEFAULT_PAGES", 3)
    github_max_pages: int = _env_int("GITHUB_MAX_PAGES", 10)
    result_cache_max_entries: int = _env_int("RESULT_CACHE_MAX_ENTRIES", 1024)
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = _env_str("GEMINI_MODEL", "gemini-2.0-flash")
    gemini_base_url: str = _env_str(
        "GEMINI_BASE_URL",
        "https://generativelanguage.googleapis.com/v1beta",
    )
    gemini_timeout_seconds: float = _env_float("GEMINI_TIMEOUT_SECONDS", 15.0)
    enrichment_enabled: bool = _env_bool("ENRICHMENT_ENABLED", True)
    enrichment_max_attempts: int = _env_int("ENRICHMENT_MAX_ATTEMPTS", 3)
    enrichment_retry_base_delay_seconds: float = _env_float(
        "ENRICHMENT_RETRY_BASE_DELAY_SECONDS",
        1.0,
    )
    enrichment_min_dispatch_interval_seconds: float = _env_float(
        "ENRICHMENT_MIN_DISPATCH_INTERVAL_SECONDS",
        1.0,
    )
    history_data_dir: str = _env_str("HISTORY_DATA_DIR", "data")


settings = Settings()
