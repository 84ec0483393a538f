"""Report serialization for the results store.

Text format, one record per finding::

    <path>\\t<severity>\\t<id>\\t<message>
    \\t<path>:<line>        (one line per backtrace location, in report order)

Inside each field ``\\`` is written as ``\\\\``, tab as ``\\t``, newline as
``\\n`` and carriage return as ``\\r``, so a record never spills onto
extra lines and the fields can be split back on tabs. Unpaired surrogates
are written as ``?``; the XML format drops them together with every other
code point XML 1.0 forbids. JSON escapes them as ``\\uXXXX``.

XML format::

    <?xml version="1.0" encoding="UTF-8"?>
    <results>
      <error file="a.cpp" severity="style" id="unusedVariable" msg="unused variable">
        <location file="a.cpp" line="10"/>
      </error>
    </results>

JSON format: a list of ``{"file", "severity", "id", "msg", "locations"}``.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any, Protocol
from xml.sax.saxutils import escape

from results_tree.core.errors import IOFailure
from results_tree.domain.models import Finding, PathPolicy
from results_tree.services.path_service import PathNormalizer
from results_tree.services.severity_service import SeverityClassifier
from results_tree.services.store_service import ResultStore

logger = logging.getLogger(__name__)

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}
# Code points XML 1.0 cannot carry at all: C0 controls, lone surrogates
# and the U+FFFE/U+FFFF non-characters
_XML_INVALID = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
_TEXT_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"}


class ExportFormat(str, Enum):
    TEXT = "text"
    XML = "xml"
    JSON = "json"

    @classmethod
    def parse(cls, name: str | ExportFormat) -> ExportFormat:
        if isinstance(name, ExportFormat):
            return name
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            allowed = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown export format '{name}'. Available: {allowed}") from None


class TextSink(Protocol):
    def write(self, text: str) -> Any: ...


def _text_field(value: str) -> str:
    # lone surrogates cannot be encoded by any sink, write them as "?"
    value = value.encode("utf-8", "replace").decode("utf-8")
    return "".join(_TEXT_ESCAPES.get(ch, ch) for ch in value)


def _xml_attr(value: str) -> str:
    return escape(_XML_INVALID.sub("", value), _XML_ENTITIES)


class ResultExporter:
    """
    Walks a ``ResultStore`` and renders the findings selected by the policy.

    With ``save_all_errors`` every finding is written; otherwise only the
    ones currently shown. Paths go through ``PathNormalizer.to_persisted``.
    """

    def select(self, store: ResultStore, policy: PathPolicy) -> list[Finding]:
        include_hidden = policy.save_all_errors
        return [finding for _, finding in store.iter_findings(include_hidden=include_hidden)]

    def records(self, store: ResultStore, policy: PathPolicy) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for f in self.select(store, policy):
            out.append(
                {
                    "file": PathNormalizer.to_persisted(f.origin_file, policy),
                    "severity": SeverityClassifier.describe(f.category),
                    "id": f.identifier,
                    "msg": f.message,
                    "locations": [
                        {"file": PathNormalizer.to_persisted(loc.file, policy), "line": loc.line}
                        for loc in f.backtrace
                    ],
                }
            )
        return out

    def export(self, store: ResultStore, fmt: ExportFormat | str, policy: PathPolicy) -> str:
        fmt = ExportFormat.parse(fmt)
        records = self.records(store, policy)

        if fmt is ExportFormat.XML:
            return self._to_xml(records)
        if fmt is ExportFormat.JSON:
            return json.dumps(records, indent=2) + "\n"
        return self._to_text(records)

    def save(self, sink: TextSink, store: ResultStore, fmt: ExportFormat | str, policy: PathPolicy) -> str:
        fmt = ExportFormat.parse(fmt)
        text = self.export(store, fmt, policy)
        try:
            sink.write(text)
            flush = getattr(sink, "flush", None)
            if callable(flush):
                flush()
        except (OSError, ValueError) as e:
            logger.error("Writing %s report failed: %s", fmt.value, e, extra={"format": fmt.value})
            raise IOFailure(f"Could not write {fmt.value} report: {e}") from e

        logger.info("Saved %s report (%d chars)", fmt.value, len(text), extra={"format": fmt.value})
        return text

    @staticmethod
    def _to_text(records: list[dict[str, Any]]) -> str:
        lines: list[str] = []
        for r in records:
            lines.append("\t".join(_text_field(r[k]) for k in ("file", "severity", "id", "msg")))
            for loc in r["locations"]:
                lines.append(f"\t{_text_field(loc['file'])}:{loc['line']}")
        return "".join(line + "\n" for line in lines)

    @staticmethod
    def _to_xml(records: list[dict[str, Any]]) -> str:
        lines = ['<?xml version="1.0" encoding="UTF-8"?>', "<results>"]
        for r in records:
            attrs = (
                f'file="{_xml_attr(r["file"])}" severity="{_xml_attr(r["severity"])}" '
                f'id="{_xml_attr(r["id"])}" msg="{_xml_attr(r["msg"])}"'
            )
            if not r["locations"]:
                lines.append(f"  <error {attrs}/>")
                continue
            lines.append(f"  <error {attrs}>")
            for loc in r["locations"]:
                lines.append(f'    <location file="{_xml_attr(loc["file"])}" line="{loc["line"]}"/>')
            lines.append("  </error>")
        lines.append("</results>")
        return "\n".join(lines) + "\n"
