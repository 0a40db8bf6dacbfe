# api/routes/artifact_routes.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from ..deps import get_artifacts_root
from runner.paths import resolve_inside
import os

router = APIRouter()

@router.get("/runs/{run_id}/artifacts/{artifact_path:path}")
def get_artifact(run_id: str, artifact_path: str, root: str = Depends(get_artifacts_root)):
    run_dir = resolve_inside(root, run_id)
    if not run_dir or not os.path.isdir(run_dir):
        raise HTTPException(status_code=404, detail="run not found")
    path = resolve_inside(run_dir, artifact_path)
    if not path or not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="artifact not found")
    return FileResponse(path, filename=os.path.basename(path))
