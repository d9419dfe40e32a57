import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from postit.cache import cache
from postit.config import settings
from postit.exceptions import PostitError
from postit.middleware import RequestMetricsMiddleware
from postit.routers import comments, metrics, posts, users
from postit.schemas import failure

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    try:
        await cache.connect()
    except Exception as exc:
        logger.warning("Cache unavailable, serving from database only: %s", exc)
    yield
    # Shutdown
    await cache.disconnect()

app = FastAPI(
    title="Postit API",
    description="Users, posts and comments with soft deletion and ownership checks",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestMetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error envelope
@app.exception_handler(PostitError)
async def postit_error_handler(request: Request, exc: PostitError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=failure(exc.message))

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
    return JSONResponse(status_code=400, content=failure(message))

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("%s %s: database error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=failure("Internal server error"))

# Routers
app.include_router(users.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}
