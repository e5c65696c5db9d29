"""
Response schemas for the local Front-End API gateway.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ImageListResponse(BaseModel):
    images: List[str] = Field(..., description="Image keys under the requested prefix")


class LabelRecordResponse(BaseModel):
    image: str = Field(..., description="Image identifier, the key without 'private/'")
    labels: List[str] = Field(..., description="Label names, highest confidence first")
    confidence: Dict[str, float] = Field(default_factory=dict)
    source_key: str
    resized_key: Optional[str] = None
    detected_at: str


class DeleteImageResponse(BaseModel):
    deleted: str = Field(..., description="Storage key that was removed")
    image: str
    labels_deleted: bool = Field(..., description="Whether a label record existed")


class ErrorResponse(BaseModel):
    """Same message shape API Gateway returns for a failed Lambda."""
    errorMessage: str
