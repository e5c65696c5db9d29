"""
Front-End API Lambda.

Entry point: image_rekognition.infrastructure.handlers.image_service.lambda_handler

API Gateway uses a non-proxy integration. Its request template maps the
query string, HTTP method and Authorization header into:

    {"action": "...", "key": "...", "method": "GET", "token": "..."}

The return value becomes the 200 response body. Any exception is re-raised
as "<ErrorType>: <message>", which the integration response selection
pattern maps to 500. Both responses carry Access-Control-Allow-Origin.
"""
from typing import Any, Callable, Dict, Optional

from image_rekognition.core.exceptions import InvalidRequestError
from image_rekognition.core.ports.token_verifier import TokenVerifierPort
from image_rekognition.core.usecases.image_management import ImageManagementUseCase
from image_rekognition.infrastructure.logging.log_config import get_logger
from .dependencies import get_container

logger = get_logger(__name__)

# action -> HTTP methods that may carry it
ACTION_METHODS = {
    "list": ("GET",),
    "getLabels": ("GET",),
    "delete": ("DELETE",),
    "deleteImage": ("DELETE",),
}


class ImageServiceError(Exception):
    """Raised out of the Lambda so API Gateway selects the 500 response."""


class ImageRequestHandler:
    """
    Routes one Front-End API request to the image management use case.

    Args:
        use_case: Image management use case
        token_verifier: Resolves the caller's subject from the request token;
            None when the routing layer already supplied the subject
    """

    def __init__(self, use_case: ImageManagementUseCase, token_verifier: Optional[TokenVerifierPort] = None):
        self.use_case = use_case
        self.token_verifier = token_verifier
        self._dispatch: Dict[str, Callable[[str, Optional[str]], Dict[str, Any]]] = {
            "list": self._list,
            "getLabels": self._get_labels,
            "delete": self._delete,
            "deleteImage": self._delete,
        }

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        action = (event.get("action") or "").strip()
        # S3 keys may begin or end with spaces, so the key is used verbatim
        key = event.get("key") or ""
        method = (event.get("method") or "").strip().upper()

        if not action:
            raise InvalidRequestError("Parameter 'action' is required")
        if not key.strip():
            raise InvalidRequestError("Parameter 'key' is required")
        if action not in ACTION_METHODS:
            raise InvalidRequestError(f"Unknown action '{action}'")
        if method and method not in ACTION_METHODS[action]:
            raise InvalidRequestError(f"Action '{action}' is not allowed for {method}")

        subject_id = event.get("subject")
        if self.token_verifier is not None:
            subject_id = self.token_verifier.verify(event.get("token") or "")

        logger.info("Handling image request", extra={
            "extra_fields": {"action": action, "key": key, "method": method or None}
        })
        return self._dispatch[action](key, subject_id)

    def _list(self, key: str, subject_id: Optional[str]) -> Dict[str, Any]:
        return {"images": self.use_case.list_images(key, subject_id)}

    def _get_labels(self, key: str, subject_id: Optional[str]) -> Dict[str, Any]:
        return self.use_case.get_labels(key, subject_id).to_dict()

    def _delete(self, key: str, subject_id: Optional[str]) -> Dict[str, Any]:
        return self.use_case.delete_image(key, subject_id)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda entry point for the Front-End API.

    Raises:
        ImageServiceError: On any failure, with message "<ErrorType>: <message>"
    """
    container = get_container()
    try:
        handler = ImageRequestHandler(
            container.get_image_management_use_case(),
            container.get_token_verifier()
        )
        return handler.handle(event or {})
    except Exception as e:
        logger.error("Image request failed", extra={
            "extra_fields": {
                "action": (event or {}).get("action"),
                "key": (event or {}).get("key"),
                "error": str(e),
                "error_type": type(e).__name__,
                "request_id": getattr(context, "aws_request_id", "unknown")
            }
        })
        raise ImageServiceError(format_error(e)) from e


def format_error(error: Exception) -> str:
    # The message must be non-empty to match the 500 selection pattern
    return f"{type(error).__name__}: {str(error) or 'request failed'}"
