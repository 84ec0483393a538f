from typing import Literal

from pydantic import BaseModel, Field

ExportFormatName = Literal["text", "xml", "json"]


class LocationIn(BaseModel):
    file: str
    line: int = Field(0, ge=0)


class FindingIn(BaseModel):
    """One result as reported by the analysis engine."""

    file: str = Field(..., description="File the finding belongs to.")
    severity: str = Field(
        ...,
        description="Severity label. Unknown labels are filed under `error`.",
        json_schema_extra={"examples": ["style"]},
    )
    message: str = ""
    id: str = ""
    backtrace: list[LocationIn] = []


class FindingRefOut(BaseModel):
    path: str
    index: int
    generation: int = 0


class VisibilityUpdate(BaseModel):
    show: bool


class SettingsUpdate(BaseModel):
    show_full_path: bool
    save_full_path: bool
    save_all_errors: bool


class CheckDirectoryUpdate(BaseModel):
    path: str = Field(..., json_schema_extra={"examples": ["/home/me/project/src"]})


class PolicyOut(BaseModel):
    check_directory: str
    show_full_path: bool
    save_full_path: bool
    save_all_errors: bool
