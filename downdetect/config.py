from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    downdetect_log_level: str = "info"

    # CORS
    downdetect_cors_origins: str = "*"

    # Crowd-sourced outage reports
    downdetector_enabled: bool = True
    downdetector_url_template: str = "https://downdetector.{domain}/api/status/{service}"
    downdetector_domains: str = "com,co.uk,de,fr,it"  # cascade order, default TLD first
    downdetector_attempt_timeout: float = 10.0

    # Active probe
    probe_timeout: float = 10.0
    probe_user_agent: str = "DownDetect/1.0 (Service Status Monitor)"
    fallback_tld: str = "com"

    # Usage accounting
    usage_log_interval: int = 10

    # HTTP client timeouts (seconds)
    downdetect_http_connect_timeout: float = 5.0

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def cascade_domains(self) -> list[str]:
        return [d.strip() for d in self.downdetector_domains.split(",") if d.strip()]

    @property
    def primary_source_available(self) -> bool:
        """Capability flag for the crowd-sourced integration, read once at startup."""
        return self.downdetector_enabled and bool(self.downdetector_url_template.strip())


settings = Settings()
