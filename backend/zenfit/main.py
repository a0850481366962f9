"""
ZenFit API
==========
FastAPI application entry point. Mount routers here.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zenfit.config import get_settings
from zenfit.routers import advisory, progress, routines, sessions

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="ZenFit API",
    description="Running and gym workout log with routines and progress charts",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions.router)
app.include_router(routines.router)
app.include_router(progress.router)
app.include_router(advisory.router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "zenfit-api"}
