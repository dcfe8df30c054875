from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    day_count_base: int = 360
    max_evolution_days: int = 40000
    decimal_precision: int = 50
    liquidation_threshold: str = "0.01"

    timezone: str = "America/Sao_Paulo"
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"

settings = Settings()
