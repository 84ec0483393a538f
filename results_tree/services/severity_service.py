from __future__ import annotations

from results_tree.core.errors import InvalidCategory
from results_tree.domain.models import Category

_LABELS: dict[Category, str] = {
    Category.ERROR: "error",
    Category.WARNING: "warning",
    Category.STYLE: "style",
    Category.PERFORMANCE: "performance",
    Category.PORTABILITY: "portability",
    Category.INFORMATION: "information",
}

_BY_LABEL: dict[str, Category] = {label: cat for cat, label in _LABELS.items()}


class SeverityClassifier:
    """
    Maps severity labels to categories and back.

    Labels match case-sensitively. Anything unrecognized is filed under
    ``FALLBACK`` so a malformed label never drops a finding; use
    ``is_known`` to tell when that happened.
    """

    FALLBACK = Category.ERROR

    @staticmethod
    def classify(label: str) -> Category:
        return _BY_LABEL.get(label, SeverityClassifier.FALLBACK)

    @staticmethod
    def is_known(label: str) -> bool:
        return label in _BY_LABEL

    @staticmethod
    def describe(category: Category) -> str:
        try:
            return _LABELS[category]
        except (KeyError, TypeError):
            raise InvalidCategory(category) from None

    @staticmethod
    def categories() -> list[Category]:
        return Category.real()

    @staticmethod
    def labels() -> list[str]:
        return [_LABELS[c] for c in Category.real()]
