"""Request bodies for food log endpoints."""

from pydantic import BaseModel, Field

from food_analyzer.domain.analysis import AnalysisResult


class FoodLogRequest(BaseModel):
    """Finalized result to store, with the AI estimate it started from."""

    result: AnalysisResult
    original: AnalysisResult | None = None
    image_url: str | None = None


class ScaleRequest(BaseModel):
    """Result to rescale to a new total weight."""

    result: AnalysisResult
    weight_grams: float = Field(ge=0)
