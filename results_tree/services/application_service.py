"""External application hooks for opening a finding.

Mirrors the provider registry pattern::

    registry = ApplicationRegistry()
    registry.register(MyEditor())

    handler = registry.pick("my-editor")   # raises UnknownApplication if missing
    handler = registry.pick(0)             # by position, like a menu entry

Nothing here starts a process; a host registers handlers that do.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from results_tree.core.errors import UnknownApplication


@dataclass(frozen=True)
class LaunchTarget:
    """What a handler needs to open a finding."""

    file: str
    line: int
    message: str
    identifier: str = ""


class ApplicationHandler(ABC):
    """Interface every external application hook must implement."""

    @abstractmethod
    def name(self) -> str:
        """Short identifier used to select the handler."""

    @abstractmethod
    def open(self, target: LaunchTarget) -> None:
        """Open ``target`` in the application."""


class ApplicationRegistry:
    """Ordered registry of application handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, ApplicationHandler] = {}

    def register(self, handler: ApplicationHandler) -> None:
        self._handlers[handler.name()] = handler

    def get(self, name: str) -> ApplicationHandler | None:
        return self._handlers.get(name)

    def pick(self, selector: str | int) -> ApplicationHandler:
        if isinstance(selector, int):
            handlers = list(self._handlers.values())
            if not 0 <= selector < len(handlers):
                raise UnknownApplication(f"No application at index {selector} ({len(handlers)} registered)")
            return handlers[selector]

        h = self.get(selector)
        if h is None:
            available = ", ".join(self.list()) or "none"
            raise UnknownApplication(f"Unknown application '{selector}'. Available: {available}")
        return h

    def list(self) -> list[str]:
        return list(self._handlers.keys())
