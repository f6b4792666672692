# backend/app/config.py
from functools import lru_cache
from pathlib import Path
import os

MAX_IMAGE_BYTES = 5 * 1024 * 1024


def _default_data_dir() -> Path:
    container_data = Path("/app/data")
    if container_data.exists():
        return container_data
    # backend/app/config.py → ../../.. = <repo root>
    repo_root = Path(__file__).resolve().parents[2]
    return repo_root / "data"


class Settings:
    def __init__(self) -> None:
        self.data_dir = Path(os.getenv("DATA_DIR") or _default_data_dir())
        self.upload_dir = Path(os.getenv("UPLOAD_DIR") or self.data_dir / "uploads")

        # 1) DATABASE_URL wins when set (e.g. postgresql+psycopg://...)
        # 2) otherwise a SQLite file under the data directory
        self.database_url = os.getenv("DATABASE_URL") or f"sqlite:///{self.data_dir / 'app.db'}"
        self.is_sqlite = self.database_url.startswith("sqlite")

        self.api_prefix = "/" + os.getenv("API_PREFIX", "/api").strip("/")
        if self.api_prefix == "/":
            self.api_prefix = ""
        self.cors_origins = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
        self.max_image_bytes = int(os.getenv("MAX_IMAGE_BYTES", MAX_IMAGE_BYTES))
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_file = os.getenv("LOG_FILE") or None

    def __repr__(self) -> str:
        return (
            f"Settings(database_url={self.database_url!r}, upload_dir={str(self.upload_dir)!r}, "
            f"api_prefix={self.api_prefix!r})"
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
