from fastapi import FastAPI
from sqlalchemy import text
from fastapi.middleware.cors import CORSMiddleware

from keystone import __version__
from keystone.api import router
from keystone.api.errors import register_error_handlers
from keystone.config import settings
from keystone.db import engine
from keystone.logging_config import setup_logging
from keystone.models import Base

logger = setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="Keystone API", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)
app.include_router(router)


@app.get("/health/live")
def health_live() -> dict[str, str]:
    return {"status": "alive"}


@app.get("/health/ready")
def health_ready() -> dict[str, str]:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ready"}


@app.on_event("startup")
def on_startup() -> None:
    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
        logger.info("Schema ensured on %s", engine.url.render_as_string(hide_password=True))
