from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings."""
    
    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_RELOAD: bool = True
    
    # Version and environment
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Cache settings
    CACHE_BACKEND: str = "memory"  # "memory" or "redis"
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_KEY_PREFIX: str = "weather"
    CACHE_KEY_INCLUDE_DATE: bool = False
    CACHE_VALIDITY_SECONDS: int = 3600
    CACHE_STALE_RETENTION_SECONDS: int = 86400
    
    # Quota settings (shared across all requests and instances on one store)
    QUOTA_LIMIT: int = 100
    QUOTA_WINDOW_SECONDS: int = 3600
    QUOTA_KEY: str = "external-api-usage"
    
    # Provider settings
    PROVIDER_TYPE: str = "mock"  # "mock" or "http"
    PROVIDER_URL: str = "https://external.api/weather"
    PROVIDER_TIMEOUT_SECONDS: float = 5.0
    PROVIDER_FAILURE_RATE: float = 0.2
    
    class Config:
        env_file = ".env"

settings = Settings() 
