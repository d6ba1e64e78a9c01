import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db
from db.kv_store import StoreError
from config import load_config
from routes import accounts, subjects, weeks, progress  # Import routers

logger = logging.getLogger("weekwise")


def configure_logging() -> None:
    level = load_config()["logging"]["level"]
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: logging, config and store
    configure_logging()
    init_db()
    yield


app = FastAPI(
    title="WeekWise",
    description="Weekly course content, quizzes and progress tracking",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_headers=["Content-Type", "Authorization"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    expose_headers=["Content-Length"],
    max_age=600,
)

# Include routers
app.include_router(accounts.router, tags=["accounts"])
app.include_router(subjects.router, tags=["subjects"])
app.include_router(weeks.router, tags=["weeks"])
app.include_router(progress.router, tags=["progress"])


# Every error leaves as {"error": message}
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid {location}: {errors[0].get('msg')}" if location else "Invalid request body"
    else:
        message = "Invalid request body"
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(StoreError)
async def store_error(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="WeekWise API")
    parser.add_argument("--init", action="store_true", help="Initialize config and store")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    if args.init:
        configure_logging()
        init_db()
        print("Store initialized and config copied to ~/.weekwise/")
        exit(0)
    # Run server
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level="info")
