from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_origins() -> List[str]:
    # Vite dev server may pick any port in 5173-5182
    return [
        f"http://localhost:{port}" for port in range(5173, 5183)
    ] + [
        f"http://127.0.0.1:{port}" for port in range(5173, 5183)
    ] + ["http://localhost:3000"]


class Settings(BaseSettings):
    # 🌐 HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: List[str] = Field(default_factory=_default_origins)

    # 📄 Spreadsheet uploads
    MAX_UPLOAD_ROWS: int = 5000

    # 🪵 Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MINDEASE_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
