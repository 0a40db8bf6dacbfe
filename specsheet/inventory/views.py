import math
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from specsheet.dom.views import DOMRect


def js_round(value: float) -> int:
    """Math.round semantics (half rounds up), used for all pixel coordinates."""
    return int(math.floor(value + 0.5))


class ElementKind(str, Enum):
    BUTTON = "Button"
    LINK = "Link"
    INPUT = "Input"


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_rect(cls, rect: Optional[DOMRect]) -> "BoundingBox":
        if rect is None:
            return cls()
        return cls(
            x=js_round(rect.x),
            y=js_round(rect.y),
            width=js_round(rect.width),
            height=js_round(rect.height),
        )

    @property
    def center(self) -> Point:
        return Point(x=js_round(self.x + self.width / 2), y=js_round(self.y + self.height / 2))


class SelectOption(BaseModel):
    text: str = ""
    value: str = ""
    selected: bool = False


class InputConstraints(BaseModel):
    """Validation-relevant attributes of a native form control."""
    name: str = ""
    element_id: str = ""
    placeholder: str = ""
    value: str = ""
    required: bool = False
    pattern: str = ""
    minlength: str = ""
    maxlength: str = ""
    min: str = ""
    max: str = ""
    step: str = ""
    autocomplete: str = ""
    dataset_rules: List[str] = Field(default_factory=list)
    aria_describedby: str = ""
    aria_description: str = ""
    options: List[SelectOption] = Field(default_factory=list)

    def validation_summary(self, type_attr: str = "") -> str:
        details = []
        if self.required:
            details.append("Required")
        if type_attr and type_attr != "text":
            details.append(f"Type: {type_attr}")
        if self.pattern:
            details.append(f"Pattern: {self.pattern}")
        if self.minlength:
            details.append(f"Min length: {self.minlength}")
        if self.maxlength:
            details.append(f"Max length: {self.maxlength}")
        if self.min:
            details.append(f"Min: {self.min}")
        if self.max:
            details.append(f"Max: {self.max}")
        if self.step:
            details.append(f"Step: {self.step}")
        if self.autocomplete:
            details.append(f"autocomplete={self.autocomplete}")
        details.extend(self.dataset_rules)
        return "\n".join(details)


class ElementRecord(BaseModel):
    kind: ElementKind
    selector: str
    tag: str = ""
    role: str = ""
    type_attr: str = ""
    # "" means the label could not be resolved (inputs only)
    label: str = ""
    bounding_box: BoundingBox = Field(default_factory=BoundingBox)

    # Button / Link
    disabled: bool = False
    href: str = ""
    form_action: str = ""
    target: str = ""

    # Input
    constraints: Optional[InputConstraints] = None

    action_text: str = ""
    notes: str = ""

    @property
    def center(self) -> Point:
        return self.bounding_box.center

    @property
    def validation(self) -> str:
        if self.constraints is None:
            return ""
        return self.constraints.validation_summary(self.type_attr)


class Inventory(BaseModel):
    """Interactive elements of one page: buttons, then links, then inputs."""
    records: List[ElementRecord] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def of_kind(self, kind: ElementKind) -> List[ElementRecord]:
        return [r for r in self.records if r.kind == kind]


class PageAnalysis(BaseModel):
    title: str = ""
    url: str = ""
    headings: List[str] = Field(default_factory=list)
    meta_description: str = ""
    inventory: Inventory = Field(default_factory=Inventory)
