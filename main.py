from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from db import create_db_and_tables
from exceptions import register_exception_handlers
from logging_config import logger
from middleware import RequestLoggingMiddleware
from routers import admin, auth, public


def warn_on_ephemeral_secret() -> bool:
    if settings.has_ephemeral_secret and settings.ENVIRONMENT != "development":
        logger.warning(
            "SECRET_KEY is not set: using a random per-process key, so session "
            "tokens break across workers and restarts"
        )
        return True
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    warn_on_ephemeral_secret()
    if settings.CREATE_TABLES_ON_STARTUP:
        create_db_and_tables()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

register_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.get("/health", tags=["health"])
def health_check():
    return {
        "success": True,
        "message": "API Loja Social IPCA está a funcionar",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(public.router, prefix="/api/public")
app.include_router(auth.router, prefix="/api/auth")
app.include_router(admin.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
