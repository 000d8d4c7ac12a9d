from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    env: str = "dev"
    secret_key: str = "change_me_super_secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_minutes: int = 60 * 24 * 30
    bcrypt_rounds: int = 12
    database_url: str = "postgresql+psycopg2://estoque:estoque@db:5432/estoque"
    backend_cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    # Ledger: when false the movement insert and the balance update are two
    # separate commits against an unlocked read
    ledger_atomic_writes: bool = False

    recent_movements_limit: int = 50
    dashboard_low_stock_limit: int = 5
    # Where "today" starts on the dashboard (IANA name, e.g. America/Sao_Paulo)
    business_timezone: str = "UTC"
    min_password_length: int = 6
    seed_demo: bool = False

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        origins = self.backend_cors_origins
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
