import logging
import os
from typing import Optional

from specsheet.annotation.service import OverlayCompositor, number_inventory
from specsheet.config import PageConfig, ScreenMeta
from specsheet.dom.views import DOMSnapshot
from specsheet.inventory.correlator import ActionCorrelator
from specsheet.inventory.service import ElementClassifier
from specsheet.inventory.views import PageAnalysis
from specsheet.workbook.service import WorkbookLayoutSynthesizer, new_workbook_state
from specsheet.workbook.views import PageMetadata, SheetArtifact, WorkbookState

logger = logging.getLogger(__name__)


def page_metadata(page: PageConfig, analysis: PageAnalysis, screen: Optional[ScreenMeta] = None) -> PageMetadata:
    screen = screen or ScreenMeta(filename=page.name)
    return PageMetadata(
        page_id=page.name,
        title=analysis.title or page.title or screen.title or "",
        path=page.path,
        headings=analysis.headings,
        category=page.category or screen.category or "",
        description=page.description or screen.description or analysis.meta_description or "",
    )


class SpecSheetBuilder:
    """
    Runs pages through classification, correlation, numbering, overlay
    compositing and sheet layout, accumulating one workbook.

    Pages are added one at a time; the builder holds no browser state.
    """

    def __init__(
        self,
        classifier: Optional[ElementClassifier] = None,
        compositor: Optional[OverlayCompositor] = None,
        layout: Optional[WorkbookLayoutSynthesizer] = None,
        state: Optional[WorkbookState] = None,
    ):
        self.classifier = classifier or ElementClassifier()
        self.compositor = compositor or OverlayCompositor()
        self.layout = layout or WorkbookLayoutSynthesizer()
        self.state = state or new_workbook_state()

    @property
    def sheet_count(self) -> int:
        return len(self.state.artifacts)

    def add_page(
        self,
        snapshot: DOMSnapshot,
        screenshot_path: str,
        annotated_path: str,
        page: PageConfig,
        screen: Optional[ScreenMeta] = None,
    ) -> SheetArtifact:
        analysis = self.classifier.analyze(snapshot)
        inventory = ActionCorrelator(page.actions).correlate(analysis.inventory)
        entries = number_inventory(inventory)
        image = self.compositor.compose(screenshot_path, entries, annotated_path)
        metadata = page_metadata(page, analysis, screen)
        artifact = self.layout.add_sheet(self.state, metadata, inventory, entries, image)
        logger.info("Page %s: %d elements documented on sheet %r", page.name, len(inventory), artifact.sheet_name)
        return artifact

    def save(self, output_path: str) -> str:
        if not self.state.artifacts:
            raise ValueError("Cannot save a workbook without sheets")
        out_dir = os.path.dirname(output_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        self.state.workbook.save(output_path)
        logger.info("Saved workbook with %d sheets to %s", len(self.state.artifacts), output_path)
        return output_path
