import asyncio
import logging
import os
import sys
# Add project root to path
sys.path.append(os.getcwd())

from dotenv import load_dotenv
load_dotenv()

logging.basicConfig(level=os.getenv("SPECSHEET_LOG_LEVEL", "INFO").upper())

from runner.browser_manager import BrowserManager
from runner.browser_profile import BrowserProfile
from runner.errors import ConfigError, BrowserStartError
from runner.spec_sheet_runner import SpecSheetRunner
from specsheet.config import load_project_config


async def build_spec_sheet(config_path: str = None, output_dir: str = None, file_name: str = None, headed: bool = False) -> int:
    try:
        project = load_project_config(config_path)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    profile = BrowserProfile(headless=False) if headed else BrowserProfile()
    runner = SpecSheetRunner(project, browser_manager=BrowserManager(profile))
    try:
        result = await runner.run(file_name=file_name, output_dir=output_dir)
    except BrowserStartError as e:
        print(f"Could not start the browser: {e}")
        return 1

    if result.output_path:
        print(f"Spec sheet written: {result.output_path}")
    else:
        print("No spec sheet written: every page failed")
    print(f"Screenshots: {result.screenshot_dir}")
    print(f"Pages: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
    for failure in result.failed:
        print(f"  - {failure.page}: {failure.error}")
    return 0 if result.ok else 1


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Capture configured pages and build an annotated spec sheet workbook")
    parser.add_argument("config", nargs="?", help="Path to the project configuration JSON")
    parser.add_argument("--output-dir", help="Directory for the workbook (screenshots go to <dir>/screens)")
    parser.add_argument("--file-name", help="Workbook file name")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    args = parser.parse_args()

    sys.exit(asyncio.run(build_spec_sheet(args.config, args.output_dir, args.file_name, args.headed)))
