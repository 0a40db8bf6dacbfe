import logging
import math
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.drawing.image import Image as XLImage
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo
from openpyxl.worksheet.worksheet import Worksheet

from specsheet.annotation.views import AnnotatedImage, AnnotationEntry
from specsheet.inventory.views import ElementKind, ElementRecord, Inventory, js_round
from .names import (
    MAX_SHEET_NAME_LENGTH,
    MAX_TABLE_NAME_LENGTH,
    ensure_unique_name,
    sanitize_sheet_name,
    sanitize_table_name,
)
from .views import PageMetadata, SheetArtifact, WorkbookState

logger = logging.getLogger(__name__)

MAX_IMAGE_WIDTH = 720
# Approximate height of one worksheet row in pixels, used to place the table below the image
IMAGE_ROW_HEIGHT = 18
# Zero-based anchor row of the image (Excel row 9)
IMAGE_TOP_ROW = 8
TABLE_GAP_ROWS = 2

COLUMN_WIDTHS = {"A": 14, "B": 80, "C": 18, "D": 18, "E": 18, "F": 18}
TABLE_HEADERS = [
    "No.",
    "Element Type",
    "UI Text / Label",
    "CSS Selector",
    "Action / Initial Value",
    "Validation / Notes",
]
WRAPPED_COLUMNS = (3, 4, 5, 6)
TABLE_STYLE = "TableStyleMedium9"

UNRESOLVED_LABEL_DISPLAY = "(label not detected)"
NO_HEADINGS = "(no headings)"
NO_CATEGORY = "(not set)"
NO_DESCRIPTION = "(no description)"

WRAP_TOP = Alignment(wrap_text=True, vertical="top")


def new_workbook_state(creator: str = "specsheet", created: Optional[datetime] = None) -> WorkbookState:
    workbook = Workbook()
    workbook.remove(workbook.active)
    workbook.properties.creator = creator
    workbook.properties.created = created or datetime.now()
    return WorkbookState(workbook=workbook)


def scale_image(width: int, height: int, max_width: int = MAX_IMAGE_WIDTH) -> Tuple[int, int]:
    """Shrink (never enlarge) to at most `max_width`, keeping the aspect ratio."""
    scale = min(1.0, max_width / width) if width > 0 else 1.0
    return js_round(width * scale), js_round(height * scale)


def table_start_row(image_height: int) -> int:
    """1-based header row of the element table, below the embedded image."""
    return IMAGE_TOP_ROW + math.ceil(image_height / IMAGE_ROW_HEIGHT) + TABLE_GAP_ROWS


def display_label(record: ElementRecord) -> str:
    if record.kind == ElementKind.INPUT and not record.label:
        return UNRESOLVED_LABEL_DISPLAY
    return record.label


def build_table_rows(inventory: Inventory, entries: Sequence[AnnotationEntry]) -> List[List[Any]]:
    if len(entries) != len(inventory):
        raise ValueError(f"{len(entries)} annotation entries for {len(inventory)} inventory records")
    rows = []
    for entry, record in zip(entries, inventory.records):
        rows.append([
            entry.number,
            record.kind.value,
            display_label(record),
            record.selector,
            record.action_text,
            "\n".join(part for part in (record.validation, record.notes) if part),
        ])
    return rows


def _set_cell(ws: Worksheet, row: int, column: int, value: Any):
    if isinstance(value, str):
        value = ILLEGAL_CHARACTERS_RE.sub("", value)
    cell = ws.cell(row=row, column=column, value=value)
    if isinstance(value, str) and value.startswith("="):
        # keep page text literal instead of letting openpyxl treat it as a formula
        cell.data_type = "s"
    return cell


class WorkbookLayoutSynthesizer:
    """
    Lays out one sheet per page: a metadata block (A1:B6), the annotated
    screenshot anchored at A9 scaled to MAX_IMAGE_WIDTH, and an Excel table
    of the numbered inventory starting below the image.
    """

    def add_sheet(
        self,
        state: WorkbookState,
        metadata: PageMetadata,
        inventory: Inventory,
        entries: Sequence[AnnotationEntry],
        image: AnnotatedImage,
    ) -> SheetArtifact:
        rows = build_table_rows(inventory, entries)

        sheet_name = ensure_unique_name(sanitize_sheet_name(metadata.page_id), state.sheet_names, MAX_SHEET_NAME_LENGTH)
        table_name = ensure_unique_name(sanitize_table_name(sheet_name), state.table_names, MAX_TABLE_NAME_LENGTH)

        ws = state.workbook.create_sheet(title=sheet_name)
        for column, width in COLUMN_WIDTHS.items():
            ws.column_dimensions[column].width = width

        self._write_metadata(ws, metadata)

        image_width, image_height = scale_image(image.width, image.height)
        picture = XLImage(image.path)
        picture.width = image_width
        picture.height = image_height
        ws.add_image(picture, f"A{IMAGE_TOP_ROW + 1}")

        start_row = table_start_row(image_height)
        self._write_table(ws, table_name, start_row, rows)

        artifact = SheetArtifact(
            sheet_name=sheet_name,
            table_name=table_name,
            image_width=image_width,
            image_height=image_height,
            image_row=IMAGE_TOP_ROW + 1,
            table_start_row=start_row,
            rows=rows,
            metadata=metadata,
        )
        state.artifacts.append(artifact)
        logger.info("Added sheet %r (table %s, %d rows)", sheet_name, table_name, len(rows))
        return artifact

    def _write_metadata(self, ws: Worksheet, metadata: PageMetadata) -> None:
        block = [
            ("Screen ID", metadata.page_id),
            ("Screen Title", metadata.title),
            ("URL / Path", metadata.path),
            ("Headings", "\n".join(metadata.headings) or NO_HEADINGS),
            ("Category", metadata.category or NO_CATEGORY),
            ("Description", metadata.description or NO_DESCRIPTION),
        ]
        for row, (label, value) in enumerate(block, start=1):
            _set_cell(ws, row, 1, label).font = Font(bold=True)
            _set_cell(ws, row, 2, value)
        ws["B4"].alignment = WRAP_TOP
        ws["B6"].alignment = WRAP_TOP

    def _write_table(self, ws: Worksheet, table_name: str, start_row: int, rows: List[List[Any]]) -> None:
        for column, header in enumerate(TABLE_HEADERS, start=1):
            _set_cell(ws, start_row, column, header)
        for offset, row in enumerate(rows, start=1):
            for column, value in enumerate(row, start=1):
                cell = _set_cell(ws, start_row + offset, column, value)
                if column in WRAPPED_COLUMNS:
                    cell.alignment = WRAP_TOP

        # An Excel table needs at least one body row, so an empty inventory
        # still spans one blank row under the header.
        last_row = start_row + max(len(rows), 1)
        table = Table(displayName=table_name, ref=f"A{start_row}:{get_column_letter(len(TABLE_HEADERS))}{last_row}")
        table.tableStyleInfo = TableStyleInfo(
            name=TABLE_STYLE,
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=False,
        )
        ws.add_table(table)
