"""Environment-based configuration for the downscale operator."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Downscale operator configuration.

    All settings can be overridden via environment variables with
    DOWNSCALE_ prefix. For example:
        DOWNSCALE_ELASTICSEARCH_URL=https://es-http.prod:9200
        DOWNSCALE_MAX_UNAVAILABLE=2
    """

    # Search cluster HTTP API
    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_username: str | None = None
    elasticsearch_password: str | None = None
    request_timeout_seconds: float = 10.0

    # Cluster identity
    namespace: str = "default"
    cluster_name: str = "elasticsearch"

    # Safety budget: members allowed to be unavailable at once (unset = no limit)
    max_unavailable: int | None = 1

    # Reconcile loop timing
    requeue_after_seconds: float = 10.0
    interval_seconds: float = 30.0

    log_level: str = "INFO"

    model_config = {"env_prefix": "DOWNSCALE_"}
