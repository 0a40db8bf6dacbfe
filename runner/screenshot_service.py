# runner/screenshot_service.py
import io
from typing import Tuple
from PIL import Image
from playwright.async_api import Page
from runner.errors import CaptureError
from runner.logger import log

class ScreenshotService:
    """
    Captures lossless full-page PNG screenshots whose pixel grid matches the
    page's CSS coordinates, so element bounding boxes can be drawn onto them.
    """

    def __init__(self, full_page: bool = True):
        self.full_page = full_page

    async def capture_to_file(self, page: Page, path: str) -> Tuple[str, Tuple[int, int]]:
        """
        Captures a screenshot and saves it to `path` as PNG.
        Returns the path and the image size.
        """
        try:
            png_bytes = await page.screenshot(full_page=self.full_page, type='png', animations='disabled')

            with Image.open(io.BytesIO(png_bytes)) as img:
                size = img.size
                img.save(path, format="PNG")

            log("DEBUG", "screenshot_saved", f"Saved screenshot to {path} ({size[0]}x{size[1]})")
            return path, size

        except Exception as e:
            log("ERROR", "screenshot_save_failed", "Failed to save screenshot", path=path, error=str(e))
            raise CaptureError(f"Screenshot failed for {path}: {e}") from e
