"""Tests for the results and settings HTTP endpoints."""

import xml.etree.ElementTree as ET

from results_tree.api import results_routes
from results_tree.services.application_service import ApplicationHandler, ApplicationRegistry
from results_tree.services.tree_service import ResultsTree


def _add(client, file, severity, message="m", ident="", backtrace=None):
    body = {"file": file, "severity": severity, "message": message, "id": ident, "backtrace": backtrace or []}
    res = client.post("/api/results", json=body)
    assert res.status_code == 200
    return res.json()


def _seed(client):
    client.put("/api/settings/check-directory", json={"path": "/src"})
    _add(client, "/src/a.cpp", "style", "unused variable", "unusedVariable", [{"file": "/src/a.cpp", "line": 10}])
    _add(client, "/src/b.cpp", "error", "null pointer", "nullPointer", [{"file": "/src/b.cpp", "line": 3}])


def test_add_returns_reference(client):
    ref = _add(client, "/src/./a.cpp", "style")
    assert ref == {"path": "/src/a.cpp", "index": 0, "generation": 0}
    assert _add(client, "/src/a.cpp", "error")["index"] == 1


def test_list_uses_display_paths(client):
    _seed(client)
    data = client.get("/api/results").json()
    assert data["count"] == 2
    assert [g["file"] for g in data["files"]] == ["a.cpp", "b.cpp"]
    assert data["files"][0]["findings"][0]["backtrace"] == [{"file": "a.cpp", "line": 10}]


def test_hide_category_filters_listing(client):
    _seed(client)
    res = client.put("/api/results/visibility/style", json={"show": False})
    assert res.status_code == 200
    assert res.json()["style"] is False

    data = client.get("/api/results").json()
    assert [g["file"] for g in data["files"]] == ["b.cpp"]

    data = client.get("/api/results", params={"include_hidden": True}).json()
    assert data["count"] == 2


def test_unknown_category_rejected(client):
    res = client.put("/api/results/visibility/none", json={"show": False})
    assert res.status_code == 400
    assert "Unknown category" in res.json()["detail"]


def test_visibility_mask_listing(client):
    mask = client.get("/api/results/visibility").json()
    assert list(mask) == ["error", "warning", "style", "performance", "portability", "information"]
    assert all(mask.values())


def test_unknown_severity_accepted(client):
    _add(client, "/src/a.cpp", "bogus", "odd")
    finding = client.get("/api/results").json()["files"][0]["findings"][0]
    assert finding["category"] == "error"
    assert finding["label"] == "bogus"


def test_negative_line_rejected(client):
    body = {"file": "/a.c", "severity": "error", "backtrace": [{"file": "/a.c", "line": -1}]}
    assert client.post("/api/results", json=body).status_code == 422


def test_settings_roundtrip(client):
    res = client.put(
        "/api/settings",
        json={"show_full_path": True, "save_full_path": False, "save_all_errors": False},
    )
    assert res.status_code == 200
    data = client.get("/api/settings").json()
    assert data == {
        "check_directory": "",
        "show_full_path": True,
        "save_full_path": False,
        "save_all_errors": False,
    }


def test_export_visible_only(client):
    _seed(client)
    client.put("/api/results/visibility/style", json={"show": False})
    client.put("/api/settings", json={"show_full_path": False, "save_full_path": False, "save_all_errors": False})

    res = client.get("/api/results/export", params={"format": "xml"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/xml")
    root = ET.fromstring(res.content)
    assert [e.get("id") for e in root.findall("error")] == ["nullPointer"]
    assert root.find("error").get("file") == "b.cpp"


def test_export_text(client):
    _seed(client)
    res = client.get("/api/results/export", params={"format": "text"})
    assert res.status_code == 200
    assert res.text.splitlines()[0] == "a.cpp\tstyle\tunusedVariable\tunused variable"


def test_export_bad_format(client):
    assert client.get("/api/results/export", params={"format": "csv"}).status_code == 422


def test_clear(client):
    _seed(client)
    assert client.delete("/api/results").status_code == 200
    assert client.get("/api/results", params={"include_hidden": True}).json() == {"count": 0, "files": []}


class _Recorder(ApplicationHandler):
    def __init__(self):
        self.targets = []

    def name(self) -> str:
        return "recorder"

    def open(self, target):
        self.targets.append(target)


def test_open_finding(client):
    apps = ApplicationRegistry()
    recorder = _Recorder()
    apps.register(recorder)
    results_routes.reset_tree(ResultsTree(applications=apps))

    ref = _add(client, "/src/a.cpp", "error", backtrace=[{"file": "/src/a.cpp", "line": 5}])
    assert client.get("/api/results/applications").json() == ["recorder"]

    res = client.post("/api/results/open", json=ref)
    assert res.status_code == 200
    assert res.json() == {"file": "/src/a.cpp", "line": 5}
    assert len(recorder.targets) == 1


def test_open_without_applications_is_404(client):
    ref = _add(client, "/src/a.cpp", "error")
    assert client.post("/api/results/open", json=ref).status_code == 404
    assert client.post("/api/results/open", json={"path": "/nope", "index": 0}).status_code == 404


def test_health(client):
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert "version" in data


def test_all_endpoints_have_summaries(client):
    schema = client.get("/openapi.json").json()
    for path, methods in schema.get("paths", {}).items():
        for method, details in methods.items():
            if method in ("get", "post", "put", "delete", "patch"):
                assert "summary" in details, f"{method.upper()} {path} missing summary"


def test_export_defaults_to_configured_format(client, monkeypatch):
    _seed(client)
    monkeypatch.setattr(results_routes.settings, "DEFAULT_EXPORT_FORMAT", "json")
    res = client.get("/api/results/export")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()] == ["unusedVariable", "nullPointer"]


def test_reference_from_before_clear_is_stale(client):
    apps = ApplicationRegistry()
    recorder = _Recorder()
    apps.register(recorder)
    results_routes.reset_tree(ResultsTree(applications=apps))

    old = _add(client, "/src/a.cpp", "style", "old")
    client.delete("/api/results")
    new = _add(client, "/src/a.cpp", "error", "new")
    assert (new["path"], new["index"]) == (old["path"], old["index"])
    assert new["generation"] == old["generation"] + 1

    assert client.post("/api/results/open", json=old).status_code == 404
    assert recorder.targets == []
    ref = client.get("/api/results").json()["files"][0]["findings"][0]["ref"]
    assert ref == new
    assert client.post("/api/results/open", json=ref).status_code == 200
    assert recorder.targets[0].message == "new"
