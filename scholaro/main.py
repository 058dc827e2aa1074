"""
Application entry point.
Sets up the FastAPI application, middleware, error handlers and routers.

Run with: uvicorn scholaro.main:app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .middlewares.error_handler import add_error_handlers
from .middlewares.timing import TimingMiddleware
from .routes import admin, auth, test, universities
from .utils.cache import init_cache
from .utils.database import close_db_connection, connect_to_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI application
app = FastAPI(
    title="Scholaro API",
    description="Study-prep API: accounts, practice questions, test results and a university directory",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TimingMiddleware)

add_error_handlers(app)

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(test.router, prefix=settings.API_PREFIX)
app.include_router(universities.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)


@app.on_event("startup")
async def startup_event():
    """
    Initialize application services when starting up
    """
    await connect_to_db()
    await init_cache()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Clean up application services when shutting down
    """
    await close_db_connection()


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"status": "healthy"}
