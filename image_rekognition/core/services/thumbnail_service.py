"""
Thumbnail generation with Pillow.
"""
import io
from dataclasses import dataclass
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from ..exceptions import InvalidImageError

_PRESERVED_FORMATS = {"PNG": "image/png", "GIF": "image/gif"}


@dataclass(frozen=True)
class Thumbnail:
    data: bytes
    width: int
    height: int
    content_type: str


class ThumbnailService:
    """
    Resizes images to fit a square bounding box, keeping aspect ratio.
    PNG and GIF sources keep their format, everything else becomes JPEG.
    """

    def __init__(self, max_size: int = 256):
        if max_size <= 0:
            raise ValueError("Thumbnail size must be positive")
        self.max_size = max_size

    def create_thumbnail(self, image_data: bytes) -> Thumbnail:
        """
        Args:
            image_data: Encoded source image

        Returns:
            Thumbnail with encoded bytes and final dimensions

        Raises:
            InvalidImageError: If the data is not a decodable image
        """
        try:
            with Image.open(io.BytesIO(image_data)) as image:
                source_format = image.format or "JPEG"
                image.thumbnail(self._bounding_box())
                output_format, content_type = self._output_format(source_format)
                if output_format == "JPEG" and image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")
                buffer = io.BytesIO()
                image.save(buffer, format=output_format)
                return Thumbnail(
                    data=buffer.getvalue(),
                    width=image.width,
                    height=image.height,
                    content_type=content_type,
                )
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidImageError(f"Cannot create thumbnail: {e}") from e

    def _bounding_box(self) -> Tuple[int, int]:
        return (self.max_size, self.max_size)

    @staticmethod
    def _output_format(source_format: str) -> Tuple[str, str]:
        if source_format in _PRESERVED_FORMATS:
            return source_format, _PRESERVED_FORMATS[source_format]
        return "JPEG", "image/jpeg"
