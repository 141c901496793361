import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings, DEFAULT_SECRET_KEY
from app.db.database import Base, engine
from app.middlewares.error_handler import add_error_handlers
from app.utils.logger import logger

# models must be imported so every table is registered on Base.metadata
from app.models.user_models import User  # noqa: F401
from app.models.class_models import SchoolClass, Section, FacultyClass, FacultySection  # noqa: F401
from app.models.notice_models import Notice, NoticeRecipient, NoticeAttachment  # noqa: F401
from app.models.reply_models import Reply, ReplyRecipient  # noqa: F401

from app.api.v1.api import api_router

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; using the development default")
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.APP_TITLE, settings.APP_VERSION)
    yield


app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_error_handlers(app)

app.include_router(api_router, prefix="/api")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Notice Board API!"}


@app.get("/api/health")
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }
