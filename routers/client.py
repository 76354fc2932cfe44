"""Fallback for paths no API route matched.

Production serves the built single-page client so its router can handle the
path; development sends the browser to the client's dev server instead.
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, RedirectResponse

from core.config import Settings
from core.deps import get_app_settings

router = APIRouter(include_in_schema=False)
logger = logging.getLogger(__name__)


def resolve_bundle_file(dist_dir: Path, full_path: str) -> Path:
    """Return the bundle file for ``full_path``, or ``index.html`` when there is none."""
    root = dist_dir.resolve()
    if full_path:
        candidate = (root / full_path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return candidate
    return root / "index.html"


@router.get("/{full_path:path}")
async def client_fallback(full_path: str, settings: Settings = Depends(get_app_settings)):
    if not settings.is_production:
        return RedirectResponse(settings.client_dev_origin)

    target = resolve_bundle_file(Path(settings.client_dist_dir), full_path)
    if not target.is_file():
        logger.error("Client bundle not found at %s", target)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client bundle not found")
    return FileResponse(target)
