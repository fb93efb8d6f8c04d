"""Models for analysis requests and nutrition results."""

import base64
import binascii
import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

PortionSize = Literal["small", "medium", "large"]

SUPPORTED_IMAGE_TYPES = frozenset({"jpeg", "jpg", "png", "webp", "gif"})

_DATA_URL = re.compile(
    r"^data:image/(?P<subtype>[a-z]+);base64,(?P<payload>[A-Za-z0-9+/]+={0,2})$"
)


class AnalysisRequest(BaseModel):
    """Photos of a single meal, as base64 image data URLs."""

    images: list[str] = Field(min_length=1)

    @field_validator("images")
    @classmethod
    def _check_images(cls, images: list[str]) -> list[str]:
        for index, image in enumerate(images):
            match = _DATA_URL.match(image)
            if match is None:
                raise ValueError(f"image {index} is not a base64 image data URL")
            subtype = match["subtype"]
            if subtype not in SUPPORTED_IMAGE_TYPES:
                raise ValueError(f"image {index} has unsupported type image/{subtype}")
            try:
                raw = base64.b64decode(match["payload"], validate=True)
            except binascii.Error as exc:
                raise ValueError(f"image {index} is not valid base64") from exc
            if detect_image_type(raw) is None:
                raise ValueError(f"image {index} is not a recognized image")
        return images


class AnalysisItem(BaseModel):
    """Single component of an analyzed meal."""

    name: str
    weight_grams: float = Field(ge=0)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class AnalysisResult(BaseModel):
    """Nutrition estimate for one portion."""

    food_name: str = Field(min_length=1)
    portion_size: PortionSize
    weight_grams: float = Field(ge=0)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    confidence_score: float | None = Field(default=None, ge=0, le=100)
    items: list[AnalysisItem] | None = None
    is_mock: bool | None = None


def detect_image_type(data: bytes) -> str | None:
    """Infer an image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return None
