# runner/spec_sheet_runner.py
import os
import time
import traceback
from collections import Counter
from typing import Callable, List, Optional
from pydantic import BaseModel, Field

from specsheet.config import PageConfig, ProjectConfig
from specsheet.dom.service import DomSnapshotService
from specsheet.service import SpecSheetBuilder
from specsheet.workbook.views import SheetArtifact
from . import config, metrics, paths
from .action_executor import ActionExecutor, pause
from .browser_manager import BrowserManager
from .browser_profile import ViewportSize
from .errors import CaptureError, SpecSheetError
from .logger import log, pretty_path
from .navigation import open_page, page_url, wait_by_strategy
from .screenshot_service import ScreenshotService


class PageFailure(BaseModel):
    page: str
    error: str


class SpecSheetResult(BaseModel):
    output_path: Optional[str] = None
    screenshot_dir: str
    succeeded: List[str] = Field(default_factory=list)
    failed: List[PageFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and self.output_path is not None


def output_file_path(project: ProjectConfig, file_name: Optional[str] = None, output_dir: Optional[str] = None) -> str:
    name = file_name or project.spec_sheet.file_name or f"{paths.slugify(project.project_name)}_screen_spec.xlsx"
    if os.path.isabs(name):
        return name
    return os.path.join(output_dir or project.spec_output_dir, name)


class SpecSheetRunner:
    """
    Drives the browser through every configured page, one at a time, and
    feeds each rendered page into a SpecSheetBuilder.

    Each page gets its own browser context. A page that fails with a
    SpecSheetError is recorded and skipped; the remaining pages still run.
    """

    def __init__(
        self,
        project: ProjectConfig,
        browser_manager: Optional[BrowserManager] = None,
        builder: Optional[SpecSheetBuilder] = None,
        screenshot_service: Optional[ScreenshotService] = None,
        snapshot_service_factory: Callable = DomSnapshotService,
    ):
        self.project = project
        self.bm = browser_manager or BrowserManager()
        self.builder = builder or SpecSheetBuilder()
        self.screenshots = screenshot_service or ScreenshotService()
        self.snapshot_service_factory = snapshot_service_factory
        # Screenshot file stems handed out in the current run
        self._stems = set()

    def _viewport(self, page: PageConfig) -> ViewportSize:
        viewport = page.viewport or self.project.viewport
        if viewport is None:
            return ViewportSize()
        return ViewportSize(width=viewport.width, height=viewport.height)

    async def run(self, file_name: Optional[str] = None, output_dir: Optional[str] = None, screenshot_dir: Optional[str] = None) -> SpecSheetResult:
        out_dir = paths.ensure_dir(output_dir or self.project.spec_output_dir)
        screens_dir = paths.ensure_dir(screenshot_dir or (
            os.path.join(out_dir, "screens") if output_dir else self.project.screenshot_dir
        ))
        output_path = output_file_path(self.project, file_name, out_dir)
        result = SpecSheetResult(screenshot_dir=screens_dir)
        self._stems = set()

        log("INFO", "run_start", "Spec sheet run started", project=self.project.project_name, pages=len(self.project.pages), output=pretty_path(output_path))
        start = time.time()
        await self.bm.start()
        try:
            for page in self.project.pages:
                try:
                    artifact = await self.process_page(page, screens_dir)
                except SpecSheetError as e:
                    log("ERROR", "page_failed", "Page skipped", page=page.name, error=str(e), error_type=type(e).__name__)
                    metrics.PAGES_COUNTER.labels(status="failed").inc()
                    result.failed.append(PageFailure(page=page.name, error=str(e)))
                    continue
                metrics.PAGES_COUNTER.labels(status="succeeded").inc()
                for kind, count in Counter(row[1] for row in artifact.rows).items():
                    metrics.ELEMENTS_COUNTER.labels(kind=kind).inc(count)
                result.succeeded.append(page.name)
                log("INFO", "page_done", "Page documented", page=page.name, sheet=artifact.sheet_name, elements=len(artifact.rows))
        finally:
            await self.bm.stop()

        if self.builder.sheet_count:
            result.output_path = self.builder.save(output_path)
        else:
            log("WARN", "run_no_sheets", "No page produced a sheet, workbook not written", output=pretty_path(output_path))

        log("INFO", "run_done", "Spec sheet run finished",
            succeeded=len(result.succeeded), failed=len(result.failed),
            output=result.output_path, duration_ms=int((time.time() - start) * 1000))
        return result

    async def process_page(self, page: PageConfig, screens_dir: str) -> SheetArtifact:
        url = page_url(self.project.base_url, page.path)
        log("INFO", "page_start", "Processing page", page=page.name, url=url)
        ctx = await self.bm.new_context(viewport=self._viewport(page))
        try:
            tab = await ctx.new_page()
            await open_page(tab, url)
            await wait_by_strategy(tab, page.wait_strategy)
            await ActionExecutor(tab, page_name=page.name).execute_sequence(page.actions)
            await pause(config.POST_ACTIONS_DELAY_MS)

            snapshot = await self.snapshot_service_factory(tab).capture()
            stem = paths.unique_stem(page.name, self._stems)
            shot_path = paths.screenshot_path(screens_dir, stem)
            await self.screenshots.capture_to_file(tab, shot_path)

            try:
                return self.builder.add_page(
                    snapshot,
                    shot_path,
                    paths.annotated_screenshot_path(screens_dir, stem),
                    page,
                    self.project.screen_meta(page.name),
                )
            except OSError as e:
                raise CaptureError(f"Could not write annotated screenshot for {page.name}: {e}") from e
        finally:
            try:
                await ctx.close()
            except Exception as e:
                log("WARN", "page_context_close_err", "Error while closing context", page=page.name, error=str(e), tb=traceback.format_exc())
