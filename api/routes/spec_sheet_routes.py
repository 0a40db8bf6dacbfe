# api/routes/spec_sheet_routes.py
import os
import uuid
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Optional, List
from ..deps import get_artifacts_root, get_browser_manager
from runner.errors import ConfigError, BrowserStartError
from runner.logger import log
from runner.paths import make_run_dir
from runner.spec_sheet_runner import PageFailure, SpecSheetRunner
from specsheet.config import load_project_config

router = APIRouter()

class SpecSheetRequest(BaseModel):
    config_path: str
    file_name: Optional[str] = None

class SpecSheetResponse(BaseModel):
    run_id: str
    output_path: Optional[str] = None
    succeeded: List[str]
    failed: List[PageFailure]

@router.post("/spec-sheets", response_model=SpecSheetResponse)
async def create_spec_sheet(req: SpecSheetRequest, root: str = Depends(get_artifacts_root), bm = Depends(get_browser_manager)):
    try:
        project = load_project_config(req.config_path)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))

    run_id = uuid.uuid4().hex
    run_dir = make_run_dir(run_id, root=root)
    log("INFO", "api_spec_sheet_run", "Spec sheet requested", run_id=run_id, config=req.config_path)

    # Only the bare file name is honoured so output stays inside the run directory
    file_name = os.path.basename(req.file_name) if req.file_name else None
    runner = SpecSheetRunner(project, browser_manager=bm)
    try:
        result = await runner.run(file_name=file_name, output_dir=run_dir)
    except BrowserStartError as e:
        raise HTTPException(status_code=503, detail=f"Browser not available: {e}")

    return SpecSheetResponse(
        run_id=run_id,
        output_path=result.output_path,
        succeeded=result.succeeded,
        failed=result.failed,
    )
