#!/usr/bin/env python3
"""Convert a JSON findings file into a text, XML or JSON report.

Input is a list of ``{"file", "severity", "msg", "id", "locations": [{"file", "line"}]}``,
the same shape the JSON export writes.
"""
import argparse
import json
import sys

from results_tree.core.errors import IOFailure
from results_tree.domain.models import PathPolicy
from results_tree.services.export_service import ExportFormat
from results_tree.services.severity_service import SeverityClassifier
from results_tree.services.tree_service import ResultsTree


def load_findings(path):
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return data if isinstance(data, list) else []


def build_tree(items, check_dir, full_path, visible_only, hidden):
    tree = ResultsTree(
        policy=PathPolicy(
            check_directory=check_dir or "",
            show_full_path=full_path,
            save_full_path=full_path,
            save_all_errors=not visible_only,
        ),
        mask={SeverityClassifier.classify(label): False for label in hidden},
    )
    for it in items:
        locations = [(loc.get("file") or "", loc.get("line") or 0) for loc in it.get("locations") or []]
        tree.add_error(
            it.get("file") or "",
            it.get("severity") or "",
            it.get("msg") or "",
            locations,
            it.get("id") or "",
        )
    return tree


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("findings", help="JSON findings file")
    ap.add_argument("--format", choices=[f.value for f in ExportFormat], default="xml")
    ap.add_argument("--out", help="Write here instead of stdout")
    ap.add_argument("--check-dir", default="")
    ap.add_argument("--full-path", action="store_true", help="Keep absolute paths")
    ap.add_argument("--visible-only", action="store_true", help="Skip hidden categories")
    ap.add_argument("--hide", action="append", default=[], choices=SeverityClassifier.labels())
    args = ap.parse_args(argv)

    tree = build_tree(load_findings(args.findings), args.check_dir, args.full_path, args.visible_only, args.hide)

    try:
        if args.out:
            with open(args.out, "w", encoding="utf-8") as f:
                tree.save_results(f, args.format)
        else:
            tree.save_results(sys.stdout, args.format)
    except (IOFailure, OSError) as e:
        print(f"[export] FAILED: {e}", file=sys.stderr)
        return 1

    print(f"[export] {len(tree.store)} findings, {args.format}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
