from __future__ import annotations

from results_tree.core.config import Settings, settings
from results_tree.services.application_service import ApplicationRegistry
from results_tree.services.tree_service import ResultsTree


def build_application_registry() -> ApplicationRegistry:
    """Register the external applications findings can be opened with.

    None ship by default. To add one:
    1. Subclass ``ApplicationHandler`` in your host
    2. ``registry.register(MyEditor())`` here
    """
    return ApplicationRegistry()


def build_results_tree(cfg: Settings | None = None) -> ResultsTree:
    return ResultsTree.from_settings(cfg or settings, applications=build_application_registry())
