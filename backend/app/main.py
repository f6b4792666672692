from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.errors import register_error_handlers
from app.api.routers import locations
from app.config import get_settings
from app.db import init_db
from app.logger import setup_logger

settings = get_settings()
logger = setup_logger("app", log_file=settings.log_file, log_level=settings.log_level)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting with %r", settings)
    init_db()
    yield
    logger.info("Shutting down")


app = FastAPI(title="Toilet Spot API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)


@app.get("/health")
def health():
    return {"ok": True}


app.include_router(locations.router, prefix=f"{settings.api_prefix}/locations", tags=["locations"])

# uploaded images, served verbatim
settings.upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(f"{settings.api_prefix}/images", StaticFiles(directory=str(settings.upload_dir)), name="images")

# browser client last so it never shadows the API
app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="client")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
