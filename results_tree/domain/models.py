from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Category(Enum):
    """Severity categories in display order.

    ``NONE`` is the sentinel marking the number of real categories. It is
    never attached to a finding.
    """

    ERROR = 0
    WARNING = 1
    STYLE = 2
    PERFORMANCE = 3
    PORTABILITY = 4
    INFORMATION = 5
    NONE = 6

    @classmethod
    def real(cls) -> list[Category]:
        return [c for c in cls if c is not cls.NONE]


@dataclass(frozen=True)
class Location:
    file: str
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line}


@dataclass
class Finding:
    origin_file: str
    category: Category
    message: str
    backtrace: tuple[Location, ...] = ()
    identifier: str = ""
    # severity label as reported, before classification
    label: str = ""
    hidden: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.origin_file,
            "category": self.category.name.lower(),
            "label": self.label,
            "message": self.message,
            "id": self.identifier,
            "backtrace": [loc.to_dict() for loc in self.backtrace],
            "hidden": self.hidden,
        }


@dataclass
class FileNode:
    path: str
    findings: list[Finding] = field(default_factory=list)
    hidden: bool = True


@dataclass(frozen=True)
class FindingRef:
    path: str
    index: int
    # store generation the ref was issued in; bumped by every clear()
    generation: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "index": self.index, "generation": self.generation}


@dataclass(frozen=True)
class PathPolicy:
    check_directory: str = ""
    show_full_path: bool = False
    save_full_path: bool = False
    save_all_errors: bool = True
