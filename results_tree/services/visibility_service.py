from __future__ import annotations

import logging
from typing import Mapping

from results_tree.core.errors import InvalidCategory
from results_tree.domain.models import Category, FileNode, FindingRef
from results_tree.services.store_service import ResultStore

logger = logging.getLogger(__name__)


def _check(category: Category) -> None:
    if not isinstance(category, Category) or category is Category.NONE:
        raise InvalidCategory(category)


class VisibilityFilter:
    """
    Per-category show/hide mask over a ``ResultStore``.

    Flags are recomputed eagerly on every change: a finding is hidden iff
    its category is masked out, a file is hidden iff none of its findings
    is shown (an empty file counts as hidden).
    """

    def __init__(self, store: ResultStore, mask: Mapping[Category, bool] | None = None):
        self.store = store
        self._mask: dict[Category, bool] = {c: True for c in Category.real()}
        if mask:
            for category, show in mask.items():
                _check(category)
                self._mask[category] = bool(show)

    @property
    def mask(self) -> dict[Category, bool]:
        return dict(self._mask)

    def is_shown(self, category: Category) -> bool:
        _check(category)
        return self._mask[category]

    def set_mask(self, category: Category, show: bool) -> None:
        _check(category)
        self._mask[category] = bool(show)

        affected: dict[str, FileNode] = {}
        for node, finding in self.store.findings_in(category):
            finding.hidden = not show
            affected[node.path] = node

        for node in affected.values():
            self._refresh_file(node)

        logger.info(
            "Category %s %s (%d files affected)",
            category.name.lower(),
            "shown" if show else "hidden",
            len(affected),
            extra={"category": category.name.lower()},
        )

    def set_masks(self, mask: Mapping[Category, bool]) -> None:
        for category, show in mask.items():
            _check(category)
            self._mask[category] = bool(show)
        self.recompute_all()

    def apply(self, ref: FindingRef) -> None:
        """Evaluate the current mask for one freshly added finding."""
        finding = self.store.resolve(ref)
        node = self.store.file_of(ref)
        if finding is None or node is None:
            return
        finding.hidden = not self._mask[finding.category]
        self._refresh_file(node)

    def recompute_all(self) -> None:
        for node in self.store.iter_files(include_hidden=True):
            for finding in node.findings:
                finding.hidden = not self._mask[finding.category]
            self._refresh_file(node)

    @staticmethod
    def _refresh_file(node: FileNode) -> None:
        node.hidden = all(f.hidden for f in node.findings)
