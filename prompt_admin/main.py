from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from prompt_admin.core.config import settings
from prompt_admin.db import init_prompt_table
from prompt_admin.logging import AppException, logger
from prompt_admin.routers import auth, health, prompt_sdr


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if settings.db_auto_create:
        init_prompt_table()

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Edit the SDR system prompt that drives the AI agent",
    lifespan=lifespan
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    logger.error(f"Application error: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, **exc.details}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred. Please try again."}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log slow requests and errors."""
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    if duration > 2 or response.status_code >= 400:
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {duration:.2f}s"
        )
    return response


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(prompt_sdr.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("prompt_admin.main:app", host=settings.host, port=settings.port, reload=settings.debug)
