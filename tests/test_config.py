from results_tree.core.config import Settings
from results_tree.domain.models import Category, PathPolicy


def test_defaults(monkeypatch):
    for name in ("CHECK_DIR", "SHOW_FULL_PATH", "SAVE_FULL_PATH", "SAVE_ALL_ERRORS", "HIDDEN_CATEGORIES"):
        monkeypatch.delenv(name, raising=False)
    cfg = Settings()
    assert cfg.path_policy() == PathPolicy(
        check_directory="",
        show_full_path=False,
        save_full_path=False,
        save_all_errors=True,
    )
    assert cfg.hidden_categories() == []
    assert cfg.DEFAULT_EXPORT_FORMAT == "xml"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CHECK_DIR", "/work/proj")
    monkeypatch.setenv("SHOW_FULL_PATH", "yes")
    monkeypatch.setenv("SAVE_FULL_PATH", "1")
    monkeypatch.setenv("SAVE_ALL_ERRORS", "false")
    monkeypatch.setenv("HIDDEN_CATEGORIES", "style, performance")

    cfg = Settings()
    policy = cfg.path_policy()
    assert policy.check_directory == "/work/proj"
    assert policy.show_full_path is True
    assert policy.save_full_path is True
    assert policy.save_all_errors is False
    assert cfg.hidden_categories() == [Category.STYLE, Category.PERFORMANCE]


def test_unknown_hidden_labels_ignored():
    cfg = Settings(HIDDEN_CATEGORIES="none,,bogus,error")
    assert cfg.hidden_categories() == [Category.ERROR]


def test_hidden_labels_are_case_sensitive():
    cfg = Settings(HIDDEN_CATEGORIES="Style,INFORMATION,warning")
    assert cfg.hidden_categories() == [Category.WARNING]
