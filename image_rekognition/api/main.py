"""
Local Front-End API gateway.

Serves the same /images contract as API Gateway in front of the service
Lambda, plus /auth routes for user-pool sign-up and sign-in:

    uvicorn image_rekognition.api.main:app --reload
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from image_rekognition.api.routes.auth import router as auth_router
from image_rekognition.api.routes.images import router as images_router
from image_rekognition.config.settings import runtime_settings
from image_rekognition.core.exceptions import ImageRecognitionError, InvalidRequestError
from image_rekognition.infrastructure.handlers.image_service import format_error
from image_rekognition.infrastructure.logging.log_config import get_logger

logger = get_logger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    runtime_settings.validate_required()
    logger.info("Local gateway started", extra={
        "extra_fields": {
            "table": runtime_settings.table_name,
            "bucket": runtime_settings.image_bucket_name,
            "resized_bucket": runtime_settings.resized_bucket_name
        }
    })
    yield


def error_response(error: Exception) -> JSONResponse:
    """Every handler error becomes a 500, like the integration response pattern."""
    return JSONResponse(
        status_code=500,
        content={"errorMessage": format_error(error)},
        headers=CORS_HEADERS
    )


async def handle_domain_error(request: Request, exc: ImageRecognitionError) -> JSONResponse:
    logger.error("Image request failed", extra={
        "extra_fields": {
            "path": request.url.path,
            "error": str(exc),
            "error_type": type(exc).__name__
        }
    })
    return error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    missing = sorted({str(error["loc"][-1]) for error in exc.errors()})
    return error_response(InvalidRequestError(f"Missing or invalid parameters: {', '.join(missing)}"))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error", extra={
        "extra_fields": {"path": request.url.path, "error_type": type(exc).__name__}
    }, exc_info=True)
    return error_response(exc)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Image Rekognition API",
        version="1.0.0",
        description="List, label and delete uploaded images",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ImageRecognitionError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(auth_router)
    app.include_router(images_router)
    return app


app = create_app()
