"""
FastAPI Application Entry Point
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import router
from app.core.config import settings
from app.core.startup import shutdown_handler, startup_handler

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler()],
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Gemini image generation relay"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.on_event("startup")
async def startup():
    await startup_handler()


@app.on_event("shutdown")
async def shutdown():
    await shutdown_handler()


# Include routers
app.include_router(router)
