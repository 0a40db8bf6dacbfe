from dataclasses import dataclass, field
from typing import Any, List, Set
from openpyxl import Workbook
from pydantic import BaseModel, Field


class PageMetadata(BaseModel):
    page_id: str
    title: str = ""
    path: str = ""
    headings: List[str] = Field(default_factory=list)
    category: str = ""
    description: str = ""


class SheetArtifact(BaseModel):
    """One page's sheet: names, embedded image geometry and table rows."""
    sheet_name: str
    table_name: str
    image_width: int
    image_height: int
    image_row: int
    table_start_row: int
    rows: List[List[Any]] = Field(default_factory=list)
    metadata: PageMetadata


@dataclass
class WorkbookState:
    """An in-progress workbook plus the names already used in it.

    Scoped to one build; pass it explicitly to every layout call.
    """
    workbook: Workbook
    sheet_names: Set[str] = field(default_factory=set)
    table_names: Set[str] = field(default_factory=set)
    artifacts: List[SheetArtifact] = field(default_factory=list)
