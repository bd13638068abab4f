# storefront/main.py
import redis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from storefront.api import register_routers
from storefront.data.database import init_db
from storefront.data.seed import seed
from storefront.domain.errors import StorefrontError, ValidationError
from storefront.domain.schemas import field_errors
from storefront.utils.settings import SEED_ON_STARTUP
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _error_body(exc: StorefrontError) -> dict:
    body = {"message": exc.message, "code": exc.code}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    return body


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(_error_body(exc), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            _error_body(ValidationError(field_errors(exc))),
            status_code=400,
        )

    @app.exception_handler(redis.RedisError)
    async def redis_error_handler(request: Request, exc: redis.RedisError):
        logger.error(f"Redis niedostepny: {exc}")
        return JSONResponse(
            {"message": "Magazyn czatu jest chwilowo niedostepny", "code": "storage_unavailable"},
            status_code=503,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Nieobsluzony wyjatek {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            {"message": "Internal Server Error", "code": "server_error"},
            status_code=500,
        )


def create_app() -> FastAPI:
    logger.info("Inicjalizacja bazy danych")
    init_db()
    if SEED_ON_STARTUP:
        seed()

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    register_routers(app)
    register_exception_handlers(app)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
