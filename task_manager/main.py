from datetime import datetime, timezone
from pathlib import Path
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from contextlib import asynccontextmanager
from redis.asyncio import Redis
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_manager.api.routes import get_redis, router
from task_manager.core.config import settings
from task_manager.core.errors import TaskManagerError
from task_manager.core.logging import setup_logging
from task_manager.schemas.task import HealthResponse
from task_manager.services.store import TaskStore

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")

    redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    if await TaskStore(redis_client).ping():
        logger.success(f"✅ Connected to Redis at {settings.REDIS_URL}")
    else:
        # Don't raise; /api/health reports the disconnected state
        logger.error(f"❌ Redis unreachable at {settings.REDIS_URL}")
    await redis_client.aclose()

    yield

    logger.info("✅ Application shutdown complete")


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router, prefix="/api")


@app.exception_handler(TaskManagerError)
async def task_manager_error_handler(request: Request, exc: TaskManagerError):
    if exc.http_status >= 500:
        logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.http_status}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown routes and wrong methods get the same body shape as task errors
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning(f"{request.method} {request.url.path} -> 400: {details}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


@app.get("/api/health", response_model=HealthResponse)
async def health_check(redis: Redis = Depends(get_redis)):
    connected = await TaskStore(redis).ping()
    logger.info(f"Health check - Database connected: {connected}")
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "Connected" if connected else "Disconnected",
    }


if settings.FRONTEND_DIR and Path(settings.FRONTEND_DIR).is_dir():
    frontend_dir = Path(settings.FRONTEND_DIR).resolve()
    logger.info(f"📁 Serving frontend build from {frontend_dir}")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str):
        candidate = (frontend_dir / full_path).resolve()
        if full_path and candidate.is_file() and frontend_dir in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(frontend_dir / "index.html")


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Health check: http://localhost:{settings.PORT}/api/health")
    uvicorn.run(
        "task_manager.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
