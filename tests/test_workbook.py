# tests/test_workbook.py
import math

import pytest
from openpyxl import load_workbook
from PIL import Image

from specsheet.annotation.service import number_inventory
from specsheet.annotation.views import AnnotatedImage
from specsheet.inventory.views import BoundingBox, ElementKind, ElementRecord, InputConstraints, Inventory
from specsheet.workbook.names import ensure_unique_name, sanitize_sheet_name, sanitize_table_name
from specsheet.workbook.service import (
    IMAGE_ROW_HEIGHT,
    MAX_IMAGE_WIDTH,
    TABLE_HEADERS,
    WorkbookLayoutSynthesizer,
    build_table_rows,
    new_workbook_state,
    scale_image,
    table_start_row,
)
from specsheet.workbook.views import PageMetadata


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "shot_annotated.png"
    Image.new("RGB", (1440, 900), (240, 240, 240)).save(path)
    return AnnotatedImage(path=str(path), width=1440, height=900)


def _inventory():
    return Inventory(records=[
        ElementRecord(kind=ElementKind.BUTTON, selector="#save", label="Save", notes="button"),
        ElementRecord(kind=ElementKind.LINK, selector="body > a", label="Home", action_text="/", notes="a"),
        ElementRecord(
            kind=ElementKind.INPUT, selector="#email", type_attr="email", label="",
            bounding_box=BoundingBox(x=0, y=0, width=10, height=10),
            constraints=InputConstraints(required=True),
            notes="Configured actions: type (a@b.c)",
        ),
    ])


def _metadata(page_id="home"):
    return PageMetadata(page_id=page_id, title="Home", path="/", headings=["Welcome", "News"])


# --------------------------
# Names
# --------------------------
def test_sheet_name_sanitation():
    assert sanitize_sheet_name("Screen A!") == "Screen A_"
    assert sanitize_sheet_name("a/b\\c?d*e[f]g:h") == "a_b_c_d_e_f_g_h"
    assert sanitize_sheet_name("'quoted'") == "quoted"
    assert sanitize_sheet_name("") == "Screen"
    assert len(sanitize_sheet_name("x" * 50)) == 31


def test_table_name_sanitation():
    assert sanitize_table_name("Screen A_") == "Spec_ScreenA"
    assert sanitize_table_name("画面") == "Spec_Sheet"


def test_colliding_names_get_numeric_suffix_within_max_length():
    used = set()
    assert ensure_unique_name("Screen A_", used, 31) == "Screen A_"
    assert ensure_unique_name("Screen A_", used, 31) == "Screen A__1"
    assert ensure_unique_name("SCREEN A_", used, 31) == "SCREEN A__2"

    long_used = set()
    base = "y" * 31
    ensure_unique_name(base, long_used, 31)
    second = ensure_unique_name(base, long_used, 31)
    assert second == "y" * 29 + "_1"
    assert len(second) == 31


def test_pages_sanitizing_to_same_name_get_distinct_sheets(image):
    state = new_workbook_state()
    layout = WorkbookLayoutSynthesizer()
    inventory = _inventory()
    entries = number_inventory(inventory)
    first = layout.add_sheet(state, _metadata("Screen A!"), inventory, entries, image)
    second = layout.add_sheet(state, _metadata("Screen A?"), inventory, entries, image)
    assert first.sheet_name == "Screen A_"
    assert second.sheet_name == "Screen A__1"
    assert first.table_name != second.table_name
    assert state.workbook.sheetnames == ["Screen A_", "Screen A__1"]


# --------------------------
# Geometry
# --------------------------
def test_image_is_scaled_down_never_up():
    assert scale_image(1440, 900) == (MAX_IMAGE_WIDTH, 450)
    assert scale_image(400, 300) == (400, 300)


def test_table_starts_below_image():
    assert table_start_row(450) == 8 + math.ceil(450 / IMAGE_ROW_HEIGHT) + 2
    assert table_start_row(0) == 10


# --------------------------
# Rows and sheets
# --------------------------
def test_row_k_matches_entry_k():
    inventory = _inventory()
    entries = number_inventory(inventory)
    rows = build_table_rows(inventory, entries)
    assert [row[0] for row in rows] == [1, 2, 3]
    assert [row[1] for row in rows] == ["Button", "Link", "Input"]
    assert [row[3] for row in rows] == [r.selector for r in inventory.records]
    assert rows[2][2] == "(label not detected)"
    assert rows[2][5] == "Required\nType: email\nConfigured actions: type (a@b.c)"


def test_row_count_mismatch_is_rejected():
    inventory = _inventory()
    with pytest.raises(ValueError):
        build_table_rows(inventory, number_inventory(inventory)[:2])


def test_sheet_layout(tmp_path, image):
    state = new_workbook_state()
    inventory = _inventory()
    artifact = WorkbookLayoutSynthesizer().add_sheet(state, _metadata(), inventory, number_inventory(inventory), image)

    out = tmp_path / "spec.xlsx"
    state.workbook.save(out)
    ws = load_workbook(out)["home"]

    assert [ws.cell(row=r, column=1).value for r in range(1, 7)] == [
        "Screen ID", "Screen Title", "URL / Path", "Headings", "Category", "Description",
    ]
    assert ws["B4"].value == "Welcome\nNews"
    assert ws["B5"].value == "(not set)"
    assert ws["B6"].value == "(no description)"
    assert ws.column_dimensions["B"].width == 80

    start = artifact.table_start_row
    assert (artifact.image_width, artifact.image_height) == (720, 450)
    assert start == table_start_row(450)
    assert [ws.cell(row=start, column=c).value for c in range(1, 7)] == TABLE_HEADERS
    assert ws.cell(row=start + 1, column=3).value == "Save"
    assert ws.cell(row=start + 3, column=1).value == 3

    table = ws.tables[artifact.table_name]
    assert table.ref == f"A{start}:F{start + 3}"


def test_empty_inventory_still_produces_sheet(tmp_path, image):
    state = new_workbook_state()
    artifact = WorkbookLayoutSynthesizer().add_sheet(state, _metadata(), Inventory(), [], image)
    assert artifact.rows == []
    assert artifact.table_start_row == table_start_row(artifact.image_height)
    assert artifact.table_start_row > 9

    out = tmp_path / "empty.xlsx"
    state.workbook.save(out)
    ws = load_workbook(out)["home"]
    assert ws.cell(row=artifact.table_start_row, column=1).value == "No."
    assert ws.cell(row=artifact.table_start_row + 1, column=1).value is None


def test_layout_is_idempotent_across_fresh_workbooks(image):
    inventory = _inventory()
    entries = number_inventory(inventory)
    first = WorkbookLayoutSynthesizer().add_sheet(new_workbook_state(), _metadata(), inventory, entries, image)
    second = WorkbookLayoutSynthesizer().add_sheet(new_workbook_state(), _metadata(), inventory, entries, image)
    assert first == second


def test_formula_like_text_stays_literal(tmp_path, image):
    state = new_workbook_state()
    inventory = Inventory(records=[ElementRecord(kind=ElementKind.BUTTON, selector="#x", label="=SUM(A1)")])
    artifact = WorkbookLayoutSynthesizer().add_sheet(state, _metadata(), inventory, number_inventory(inventory), image)
    ws = state.workbook["home"]
    assert ws.cell(row=artifact.table_start_row + 1, column=3).data_type == "s"
