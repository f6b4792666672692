from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
import logging

from app.config import get_settings
from app.models.base import Base

logger = logging.getLogger(__name__)

settings = get_settings()
SQLALCHEMY_DATABASE_URL = settings.database_url
_is_sqlite = settings.is_sqlite

if _is_sqlite:
    settings.data_dir.mkdir(parents=True, exist_ok=True)

_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    # register model modules on the metadata before create_all
    import app.models.location  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database schema ready (%s)", (bind or engine).url.render_as_string(hide_password=True))


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
