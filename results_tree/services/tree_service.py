from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, Mapping, Sequence

from results_tree.core.config import Settings
from results_tree.domain.models import Category, Finding, FindingRef, Location, PathPolicy
from results_tree.services.application_service import ApplicationRegistry, LaunchTarget
from results_tree.services.export_service import ExportFormat, ResultExporter, TextSink
from results_tree.services.path_service import PathNormalizer
from results_tree.services.severity_service import SeverityClassifier
from results_tree.services.store_service import ResultStore
from results_tree.services.visibility_service import VisibilityFilter

logger = logging.getLogger(__name__)


def _line(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


class ResultsTree:
    """
    Orchestrates: classify -> store -> filter on the way in,
    filter-aware traversal and export on the way out.

    Not thread safe. Hosts serving concurrent callers must serialize access.
    """

    def __init__(
        self,
        policy: PathPolicy | None = None,
        mask: Mapping[Category, bool] | None = None,
        applications: ApplicationRegistry | None = None,
    ):
        self.store = ResultStore()
        self.filter = VisibilityFilter(self.store, mask)
        self.exporter = ResultExporter()
        self.applications = applications or ApplicationRegistry()
        self._policy = policy or PathPolicy()

    @classmethod
    def from_settings(cls, cfg: Settings, applications: ApplicationRegistry | None = None) -> ResultsTree:
        mask = {c: False for c in cfg.hidden_categories()}
        return cls(policy=cfg.path_policy(), mask=mask, applications=applications)

    @property
    def policy(self) -> PathPolicy:
        return self._policy

    # ---------- Inbound ----------

    def add_error(
        self,
        file: str,
        severity: str,
        message: str,
        backtrace: Iterable[tuple[str, int]] = (),
        identifier: str = "",
    ) -> FindingRef:
        category = SeverityClassifier.classify(severity)
        if not SeverityClassifier.is_known(severity):
            logger.warning(
                "Unknown severity %r, filing under %s",
                severity,
                SeverityClassifier.describe(category),
                extra={"file": file, "label": severity},
            )

        locations = [Location(file=PathNormalizer.canonical(f), line=_line(n)) for f, n in backtrace]
        ref = self.store.add_finding(
            file,
            category,
            message,
            backtrace=locations,
            identifier=identifier,
            label=severity,
        )
        self.filter.apply(ref)
        return ref

    def add_error_item(
        self,
        file: str,
        severity: str,
        message: str,
        files: Sequence[str],
        lines: Sequence[Any],
        identifier: str = "",
    ) -> FindingRef:
        """Parallel ``files``/``lines`` lists, as the analysis engine reports them."""
        return self.add_error(file, severity, message, zip(files, lines), identifier)

    def clear(self) -> None:
        self.store.clear()
        logger.info("Results cleared")

    # ---------- Visibility ----------

    def show_results(self, category: Category, show: bool) -> None:
        self.filter.set_mask(category, show)

    def show_categories(self, mask: Mapping[Category, bool]) -> None:
        self.filter.set_masks(mask)

    # ---------- Settings ----------

    def update_settings(self, show_full_path: bool, save_full_path: bool, save_all_errors: bool) -> None:
        self._policy = dataclasses.replace(
            self._policy,
            show_full_path=show_full_path,
            save_full_path=save_full_path,
            save_all_errors=save_all_errors,
        )
        logger.info(
            "Settings updated: show_full_path=%s save_full_path=%s save_all_errors=%s",
            show_full_path,
            save_full_path,
            save_all_errors,
        )

    def set_check_directory(self, directory: str) -> None:
        self._policy = dataclasses.replace(self._policy, check_directory=PathNormalizer.canonical(directory))

    # ---------- Outbound ----------

    def display_path(self, path: str) -> str:
        return PathNormalizer.to_display(path, self._policy)

    def rows(self, include_hidden: bool = False) -> list[dict[str, Any]]:
        """File groups with their findings, paths rendered for display."""
        out: list[dict[str, Any]] = []
        for node in self.store.iter_files(include_hidden=include_hidden):
            findings = []
            for index, f in enumerate(node.findings):
                if f.hidden and not include_hidden:
                    continue
                row = f.to_dict()
                row["file"] = self.display_path(f.origin_file)
                row["backtrace"] = [
                    {"file": self.display_path(loc.file), "line": loc.line} for loc in f.backtrace
                ]
                row["ref"] = FindingRef(node.path, index, self.store.generation).to_dict()
                findings.append(row)
            out.append(
                {
                    "file": self.display_path(node.path),
                    "path": node.path,
                    "hidden": node.hidden,
                    "findings": findings,
                }
            )
        return out

    def export(self, fmt: ExportFormat | str) -> str:
        return self.exporter.export(self.store, fmt, self._policy)

    def save_results(self, sink: TextSink, fmt: ExportFormat | str) -> str:
        return self.exporter.save(sink, self.store, fmt, self._policy)

    def resolve(self, ref: FindingRef) -> Finding | None:
        return self.store.resolve(ref)

    def launch_target(self, finding: Finding) -> LaunchTarget:
        """
        The location a finding is reported at: its last backtrace entry,
        or the file itself when there is no backtrace. Relative paths are
        resolved against the check directory.
        """
        if finding.backtrace:
            loc = finding.backtrace[-1]
            file, line = loc.file, loc.line
        else:
            file, line = finding.origin_file, 0

        root = self._policy.check_directory
        if root and file and not PathNormalizer.is_absolute(file):
            file = PathNormalizer.canonical(f"{root}/{file}")
        return LaunchTarget(file=file, line=line, message=finding.message, identifier=finding.identifier)

    def open_finding(self, ref: FindingRef, application: str | int | None = None) -> LaunchTarget:
        finding = self.store.resolve(ref)
        if finding is None:
            raise KeyError(f"No finding at {ref.path}#{ref.index}")

        handler = self.applications.pick(0 if application is None else application)

        target = self.launch_target(finding)
        handler.open(target)
        logger.info("Opened finding with %s", handler.name(), extra={"file": target.file})
        return target
