"""
Recruiting Portal - Backend API
FastAPI + JWT bearer auth + SQLAlchemy
"""

import argparse
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recruiting import __version__
from recruiting.config import setup_logging
from recruiting.review.database import init_db
from recruiting.review.errors import NotFound, ReviewError

from .db import get_engine
from .routers import applications, health, participants, submissions

logger = logging.getLogger(__name__)


# Create tables on startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(get_engine())
    yield


app = FastAPI(
    title="Recruiting Portal API",
    description="Application review, evaluation and participant tracking",
    version=__version__,
    lifespan=lifespan,
)

# CORS - allow frontend origins
origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    os.getenv("FRONTEND_URL", "http://localhost:3000"),
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReviewError)
async def review_error_handler(request: Request, exc: ReviewError):
    status_code = 404 if isinstance(exc, NotFound) else 400
    logger.info(f"{request.method} {request.url.path} rejected: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(applications.router, prefix="/admin/applications", tags=["Review"])
app.include_router(participants.router, prefix="/admin", tags=["Participants"])
app.include_router(submissions.router, prefix="/applications", tags=["Submissions"])


@app.get("/")
async def root():
    return {
        "name": "Recruiting Portal API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


def run(argv=None):
    """Serve the API with uvicorn."""
    import uvicorn

    parser = argparse.ArgumentParser(description="Recruiting portal API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args(argv)

    setup_logging()
    uvicorn.run("portal.main:app", host=args.host, port=args.port, reload=args.reload)
