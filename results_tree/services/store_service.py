from __future__ import annotations

from typing import Callable, Iterable, Iterator

from results_tree.core.errors import InvalidCategory
from results_tree.domain.models import Category, FileNode, Finding, FindingRef, Location
from results_tree.services.path_service import PathNormalizer

Visitor = Callable[[FileNode, Finding], None]


class ResultStore:
    """
    Owns file groups and their findings.

    Files keep first-seen order, findings keep insertion order inside
    their file. Nothing is removed except by ``clear()``, which also starts
    a new generation so references issued earlier no longer resolve.
    """

    def __init__(self) -> None:
        self._files: dict[str, FileNode] = {}
        self._by_category: dict[Category, list[tuple[FileNode, Finding]]] = {}
        self._generation = 0

    def __len__(self) -> int:
        return sum(len(node.findings) for node in self._files.values())

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def file_count(self) -> int:
        return len(self._files)

    def add_finding(
        self,
        origin_file: str,
        category: Category,
        message: str,
        backtrace: Iterable[Location] = (),
        identifier: str = "",
        label: str | None = None,
        hidden: bool = False,
    ) -> FindingRef:
        if not isinstance(category, Category) or category is Category.NONE:
            raise InvalidCategory(category)

        key = PathNormalizer.canonical(origin_file)
        node = self._ensure_file(key)

        finding = Finding(
            origin_file=key,
            category=category,
            message=message,
            backtrace=tuple(backtrace),
            identifier=identifier,
            label=label if label is not None else category.name.lower(),
            hidden=hidden,
        )
        node.findings.append(finding)
        if not hidden:
            node.hidden = False
        self._by_category.setdefault(category, []).append((node, finding))
        return FindingRef(path=key, index=len(node.findings) - 1, generation=self._generation)

    def _ensure_file(self, key: str) -> FileNode:
        node = self._files.get(key)
        if node is None:
            node = FileNode(path=key)
            self._files[key] = node
        return node

    def clear(self) -> None:
        self._files = {}
        self._by_category = {}
        self._generation += 1

    def find_file(self, path: str) -> FileNode | None:
        return self._files.get(PathNormalizer.canonical(path))

    def resolve(self, ref: FindingRef) -> Finding | None:
        if ref.generation != self._generation:
            return None
        node = self._files.get(ref.path)
        if node is None or not 0 <= ref.index < len(node.findings):
            return None
        return node.findings[ref.index]

    def file_of(self, ref: FindingRef) -> FileNode | None:
        if ref.generation != self._generation:
            return None
        return self._files.get(ref.path)

    def findings_in(self, category: Category) -> list[tuple[FileNode, Finding]]:
        return list(self._by_category.get(category, []))

    def iter_files(self, include_hidden: bool = True) -> Iterator[FileNode]:
        for node in list(self._files.values()):
            if include_hidden or not node.hidden:
                yield node

    def iter_findings(self, include_hidden: bool = True) -> Iterator[tuple[FileNode, Finding]]:
        for node in self.iter_files(include_hidden):
            for finding in node.findings:
                if include_hidden or not finding.hidden:
                    yield node, finding

    def for_each(self, visitor: Visitor, include_hidden: bool = True) -> None:
        for node, finding in self.iter_findings(include_hidden):
            visitor(node, finding)
