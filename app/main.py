# app/main.py
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.api_router import api_router
from app.api.errors import register_error_handlers
from app.core import responses
from app.core.config import settings
from app.core.logging import configure_logging
from app.db import init_db

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("Starting up: initializing DB...")
    init_db.init_all()
    logging.info("Startup complete")
    yield


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

if settings.STORAGE_BACKEND == "local":
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    # mount
    app.mount("/storage", StaticFiles(directory=settings.UPLOAD_DIR), name="storage")

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/up", include_in_schema=False)
def health():
    return responses.success({"status": "ok"}, "Application up")
