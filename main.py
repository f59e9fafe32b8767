import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config as settings
from database import init_db
from exceptions import StoreError
from logging_config import setup_logging
from routes import album_api, albums, api, videos

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.STORE_BACKEND == "sql":
        init_db()
    logger.info("album api starting with %s store", settings.STORE_BACKEND)
    yield


app = FastAPI(
    title="Album API",
    description="Artist catalog and per-album API key gateway",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=album_api.CORS_HEADERS["Access-Control-Allow-Headers"].split(", "),
)

# added last so it wraps CORSMiddleware; gateway preflights never reach it
app.middleware("http")(album_api.gateway_preflight)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("store error on %s %s: %s", request.method, request.url.path, exc)
    if album_api.is_gateway_path(request.url.path):
        return album_api.internal_error()
    return JSONResponse(status_code=503, content={"detail": "Backend store unavailable"})


app.include_router(album_api.router, tags=["Album API"])
app.include_router(albums.router, tags=["Albums"])
app.include_router(videos.router, tags=["Videos"])
app.include_router(api.router, tags=["API"])


@app.get("/")
async def root():
    return {"message": "Welcome to the Album API"}
