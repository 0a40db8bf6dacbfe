from pydantic import BaseModel, ConfigDict, Field

from specsheet.inventory.views import Point


class AnnotationEntry(BaseModel):
    """Marker number and position pairing an overlay circle with a table row."""
    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=1)
    center: Point


class AnnotatedImage(BaseModel):
    path: str
    width: int
    height: int
