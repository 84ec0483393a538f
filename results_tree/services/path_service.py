from __future__ import annotations

import posixpath
from pathlib import PurePosixPath, PureWindowsPath

from results_tree.domain.models import PathPolicy


def _is_absolute(path: str) -> bool:
    return PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute()


class PathNormalizer:
    """
    Converts reported file paths for display and for saved reports.

    Only an absolute check directory that is a strict, component-wise prefix
    of the path is ever removed. Everything else comes back untouched.
    """

    @staticmethod
    def is_absolute(path: str) -> bool:
        return _is_absolute(path)

    @staticmethod
    def canonical(path: str) -> str:
        """
        Grouping key for a reported file path.

        Backslashes become ``/``, ``.`` and ``..`` segments and doubled
        separators collapse. No filesystem access.
        """
        if not path:
            return ""
        return posixpath.normpath(path.replace("\\", "/"))

    @staticmethod
    def strip(path: str, directory: str) -> str:
        if not path or not directory or not _is_absolute(directory):
            return path

        # Separators are folded only for a backslash-style directory, so a
        # POSIX directory never matches a path spelled with backslashes.
        windows = "\\" in directory
        prefix = directory.replace("\\", "/") if windows else directory
        if not prefix.endswith("/"):
            prefix += "/"

        candidate = path.replace("\\", "/") if windows else path
        if not candidate.startswith(prefix) or len(candidate) == len(prefix):
            return path
        rest = candidate[len(prefix):].lstrip("/")
        return rest or path

    @staticmethod
    def to_display(path: str, policy: PathPolicy) -> str:
        if policy.show_full_path:
            return path
        return PathNormalizer.strip(path, policy.check_directory)

    @staticmethod
    def to_persisted(path: str, policy: PathPolicy) -> str:
        if policy.save_full_path:
            return path
        return PathNormalizer.strip(path, policy.check_directory)
