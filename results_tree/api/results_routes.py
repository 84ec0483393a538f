from __future__ import annotations

import io
import threading
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from results_tree.core.config import settings
from results_tree.core.containers import build_results_tree
from results_tree.core.errors import IOFailure, UnknownApplication
from results_tree.domain.models import Category, FindingRef
from results_tree.domain.schemas import (
    CheckDirectoryUpdate,
    ExportFormatName,
    FindingIn,
    FindingRefOut,
    PolicyOut,
    SettingsUpdate,
    VisibilityUpdate,
)
from results_tree.services.export_service import ExportFormat
from results_tree.services.severity_service import SeverityClassifier
from results_tree.services.tree_service import ResultsTree

router = APIRouter(prefix="/api", tags=["results"])
settings_router = APIRouter(prefix="/api/settings", tags=["settings"])

# One tree per process. The core is single-threaded, so every access goes
# through this lock (FastAPI runs sync endpoints in a thread pool).
_lock = threading.RLock()
_tree: ResultsTree = build_results_tree()

_MEDIA_TYPES = {
    ExportFormat.TEXT: "text/plain",
    ExportFormat.XML: "application/xml",
    ExportFormat.JSON: "application/json",
}


def reset_tree(tree: ResultsTree | None = None) -> ResultsTree:
    """Swap in a fresh tree (used on startup and by tests)."""
    global _tree
    with _lock:
        _tree = tree or build_results_tree()
        return _tree


def _category(label: str) -> Category:
    if not SeverityClassifier.is_known(label):
        allowed = ", ".join(SeverityClassifier.labels())
        raise HTTPException(status_code=400, detail=f"Unknown category '{label}'. Available: {allowed}")
    return SeverityClassifier.classify(label)


def _policy_out(tree: ResultsTree) -> dict[str, Any]:
    p = tree.policy
    return {
        "check_directory": p.check_directory,
        "show_full_path": p.show_full_path,
        "save_full_path": p.save_full_path,
        "save_all_errors": p.save_all_errors,
    }


# ── Request / Response schemas ────────────────────────────────────
class ResultsResponse(BaseModel):
    """Visible (or all) file groups with display paths applied."""

    count: int = Field(..., description="Number of findings in the listing.")
    files: list[dict[str, Any]]


class OpenRequest(BaseModel):
    path: str
    index: int
    generation: int = Field(0, description="Generation returned with the reference; stale after a clear.")
    application: str | None = Field(None, description="Registered application name. First one if omitted.")


# ── Endpoints ─────────────────────────────────────────────────────
@router.post(
    "/results",
    response_model=FindingRefOut,
    summary="Report a finding",
    response_description="Reference to the stored finding",
)
def add_result(req: FindingIn) -> dict[str, Any]:
    """Add one finding under its file. Unknown severity labels are filed
    under `error` instead of being rejected."""
    with _lock:
        ref = _tree.add_error(
            req.file,
            req.severity,
            req.message,
            [(loc.file, loc.line) for loc in req.backtrace],
            req.id,
        )
    return ref.to_dict()


@router.get(
    "/results",
    response_model=ResultsResponse,
    summary="List findings",
    response_description="File groups in first-seen order",
)
def list_results(include_hidden: bool = Query(False, description="Include masked findings.")) -> dict[str, Any]:
    with _lock:
        files = _tree.rows(include_hidden=include_hidden)
    return {"count": sum(len(f["findings"]) for f in files), "files": files}


@router.delete("/results", summary="Clear all findings")
def clear_results() -> dict[str, Any]:
    with _lock:
        _tree.clear()
    return {"status": "cleared"}


@router.get("/results/visibility", summary="Get the category mask")
def get_visibility() -> dict[str, bool]:
    with _lock:
        mask = _tree.filter.mask
    return {SeverityClassifier.describe(c): show for c, show in mask.items()}


@router.put("/results/visibility/{category}", summary="Show or hide a category")
def set_visibility(category: str, req: VisibilityUpdate) -> dict[str, bool]:
    cat = _category(category)
    with _lock:
        _tree.show_results(cat, req.show)
        mask = _tree.filter.mask
    return {SeverityClassifier.describe(c): show for c, show in mask.items()}


@router.get(
    "/results/export",
    summary="Export a report",
    response_description="Report body in the requested format",
)
def export_results(
    fmt_name: ExportFormatName | None = Query(None, alias="format", description="`text`, `xml` or `json`."),
) -> Response:
    """Serialize all findings, or only the shown ones when
    `save_all_errors` is off. Paths follow `save_full_path`. Without
    `format` the configured `DEFAULT_EXPORT_FORMAT` is used."""
    try:
        fmt = ExportFormat.parse(fmt_name or settings.DEFAULT_EXPORT_FORMAT)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    sink = io.StringIO()
    with _lock:
        try:
            body = _tree.save_results(sink, fmt)
        except IOFailure as e:
            raise HTTPException(status_code=500, detail=str(e))
    return Response(content=body, media_type=_MEDIA_TYPES[fmt])


@router.get("/results/applications", summary="List external applications")
def list_applications() -> list[str]:
    with _lock:
        return _tree.applications.list()


@router.post("/results/open", summary="Open a finding in an external application")
def open_result(req: OpenRequest) -> dict[str, Any]:
    with _lock:
        try:
            target = _tree.open_finding(FindingRef(req.path, req.index, req.generation), req.application)
        except (KeyError, UnknownApplication) as e:
            raise HTTPException(status_code=404, detail=str(e))
    return {"file": target.file, "line": target.line}


@settings_router.get("", response_model=PolicyOut, summary="Get path and save settings")
def get_settings() -> dict[str, Any]:
    with _lock:
        return _policy_out(_tree)


@settings_router.put("", response_model=PolicyOut, summary="Update path and save settings")
def update_settings(req: SettingsUpdate) -> dict[str, Any]:
    with _lock:
        _tree.update_settings(req.show_full_path, req.save_full_path, req.save_all_errors)
        return _policy_out(_tree)


@settings_router.put("/check-directory", response_model=PolicyOut, summary="Set the checked directory")
def set_check_directory(req: CheckDirectoryUpdate) -> dict[str, Any]:
    """Paths under this directory are shown and saved relative to it
    unless full paths are enabled."""
    with _lock:
        _tree.set_check_directory(req.path)
        return _policy_out(_tree)
