"""
/images routes, mirroring the API Gateway resource.
"""
from typing import Union

from fastapi import APIRouter, Depends, Query

from image_rekognition.api.dependencies import get_image_request_handler, get_subject_id
from image_rekognition.infrastructure.handlers.image_service import ImageRequestHandler
from image_rekognition.schemas.images import (
    DeleteImageResponse,
    ErrorResponse,
    ImageListResponse,
    LabelRecordResponse
)

# Handler failures surface as 500 with the Lambda error message, as behind API Gateway
router = APIRouter(
    prefix="/images",
    tags=["Images"],
    responses={500: {"model": ErrorResponse, "description": "Handler error"}}
)


@router.get("", response_model=Union[ImageListResponse, LabelRecordResponse])
def get_images(
    action: str = Query(..., description="list or getLabels"),
    key: str = Query(..., description="Listing prefix or image storage key"),
    subject_id: str = Depends(get_subject_id),
    handler: ImageRequestHandler = Depends(get_image_request_handler)
):
    """List images under a prefix, or return the labels of one image."""
    return handler.handle({"action": action, "key": key, "method": "GET", "subject": subject_id})


@router.delete("", response_model=DeleteImageResponse)
def delete_image(
    action: str = Query(..., description="delete"),
    key: str = Query(..., description="Image storage key"),
    subject_id: str = Depends(get_subject_id),
    handler: ImageRequestHandler = Depends(get_image_request_handler)
):
    """Delete an image, its resized copy and its labels."""
    return handler.handle({"action": action, "key": key, "method": "DELETE", "subject": subject_id})
