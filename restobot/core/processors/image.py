# restobot/core/processors/image.py
from __future__ import annotations

import base64
import io
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image


@dataclass(frozen=True)
class ImageOptions:
    max_size: Tuple[int, int] = (1600, 1600)  # keep under model limits
    format: str = "JPEG"
    jpeg_quality: int = 85


class ImageProcessor:
    def __init__(self, options: Optional[ImageOptions] = None):
        self.options = options or ImageOptions()

    def decode_bytes_to_pil(self, data: bytes) -> Image.Image:
        """Raises PIL.UnidentifiedImageError for non-image uploads."""
        return Image.open(io.BytesIO(data)).convert("RGB")

    def encode_pil_to_base64(
        self, img: Image.Image, *, format: Optional[str] = None
    ) -> str:
        buf = io.BytesIO()
        fmt = (format or self.options.format).upper()

        if fmt in ("JPG", "JPEG"):
            img.save(
                buf, format="JPEG", quality=self.options.jpeg_quality, optimize=True
            )
        else:
            img.save(buf, format="PNG", optimize=True)

        return base64.b64encode(buf.getvalue()).decode("utf-8")

    def resize_to_max(self, img: Image.Image) -> Image.Image:
        max_w, max_h = self.options.max_size
        img = img.copy()
        img.thumbnail((max_w, max_h))
        return img

    def mime_type(self) -> str:
        fmt = self.options.format.upper()
        return "image/jpeg" if fmt in ("JPG", "JPEG") else "image/png"

    def to_data_url(self, data: bytes) -> str:
        """
        Decode -> resize -> re-encode -> data URL.
        Ensures consistent size/format before sending to the LLM.
        """
        img = self.resize_to_max(self.decode_bytes_to_pil(data))
        b64_str = self.encode_pil_to_base64(img)
        return f"data:{self.mime_type()};base64,{b64_str}"


_image_processor: Optional[ImageProcessor] = None


def get_image_processor() -> ImageProcessor:
    global _image_processor
    if _image_processor is None:
        _image_processor = ImageProcessor()
    return _image_processor
