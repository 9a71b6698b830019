import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jaothui.adapters.sqlite.migrator import SQLiteMigrator
from jaothui.api.deps import get_settings
from jaothui.api.errors import error_detail
from jaothui.app_shell.config import validate_ops_rules
from jaothui.rules.loader import load_rules

logging.basicConfig(
    level=os.environ.get("JAOTHUI_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Fail fast on bad rules, missing environment or an unusable database
    rules = load_rules(settings.rules_path)
    validate_ops_rules(rules, settings.data_dir)
    SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    logger.info("Rules loaded from %s; database at %s", settings.rules_path, settings.db_path)

    yield


app = FastAPI(
    title="JAOTHUI Farm API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from jaothui.api.routes import animals, auth, farms, schedules, uploads  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(farms.router, prefix="/api/farms", tags=["Farms"])
app.include_router(animals.router, prefix="/api/animals", tags=["Animals"])
app.include_router(schedules.router, prefix="/api/schedules", tags=["Schedules"])
app.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])


# CORS (Allow Frontend)
origins = [
    origin.strip()
    for origin in os.environ.get(
        "JAOTHUI_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": error_detail("เกิดข้อผิดพลาดภายในเซิร์ฟเวอร์", "internal_error")},
    )


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "jaothui-api"}


def serve() -> None:
    """Run the API with uvicorn (`jaothui-api`)."""
    import uvicorn

    uvicorn.run(
        app,
        host=os.environ.get("JAOTHUI_HOST", "127.0.0.1"),
        port=int(os.environ.get("JAOTHUI_PORT", "8000")),
    )


if __name__ == "__main__":
    serve()
