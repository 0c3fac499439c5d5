import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from judgedex.config import settings
from judgedex.core.exceptions import JudgedexError
from judgedex.core.logging_config import configure_logging
from judgedex.judges.dependencies import close_courtlistener_client
from judgedex.llm import clear_llm_cache

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "message": message, "success": False},
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_courtlistener_client()
    clear_llm_cache()


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        lifespan=lifespan,
    )

    # Routers
    from judgedex.judges.router import judges_router, profile_router

    app.include_router(profile_router, prefix=settings.API_PREFIX)
    app.include_router(judges_router, prefix=settings.API_PREFIX)

    @app.exception_handler(JudgedexError)
    async def handle_judgedex_error(request: Request, exc: JudgedexError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(exc.status_code, exc.message, exc.headers)

    # Registered before CORS so it sits inside it: unhandled errors still get CORS headers.
    @app.middleware("http")
    async def log_and_contain_errors(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = error_response(500, "Internal server error")
        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info("%s %s %s %dms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    # Set all CORS enabled origins
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=False,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    # Health Check
    @app.get("/health")
    def health_check():
        return {"status": "ok", "version": settings.VERSION}

    return app

app = create_app()
