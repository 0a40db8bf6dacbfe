# runner/paths.py
import os
import re
import uuid
from . import config

def make_run_dir(run_id: str = None, root: str = None) -> str:
    run_id = run_id or uuid.uuid4().hex
    path = os.path.join(root or config.ARTIFACTS_ROOT, run_id)
    os.makedirs(path, exist_ok=True)
    return path

def ensure_dir(path: str) -> str:
    os.makedirs(path, exist_ok=True)
    return path

def slugify(value: str) -> str:
    if not value:
        return "spec"
    slug = re.sub(r"[^a-z0-9\-_]+", "-", str(value).strip().lower())
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug or "spec"

def unique_stem(value: str, taken: set) -> str:
    """Slug of `value` not yet in `taken`; suffixed -2, -3... on collision. Adds the result to `taken`."""
    base = slugify(value)
    stem = base
    n = 2
    while stem in taken:
        stem = f"{base}-{n}"
        n += 1
    taken.add(stem)
    return stem

def screenshot_path(screens_dir: str, stem: str) -> str:
    return os.path.join(screens_dir, f"{stem}.png")

def annotated_screenshot_path(screens_dir: str, stem: str) -> str:
    return os.path.join(screens_dir, f"{stem}_annotated.png")

def resolve_inside(base_dir: str, relative: str) -> str:
    """Join `relative` onto `base_dir`, returning None when it escapes the base."""
    base = os.path.realpath(base_dir)
    target = os.path.realpath(os.path.join(base, relative))
    if target != base and not target.startswith(base + os.sep):
        return None
    return target
