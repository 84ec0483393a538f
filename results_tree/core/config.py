import os

from pydantic import BaseModel, Field

from results_tree.domain.models import Category, PathPolicy
from results_tree.services.severity_service import SeverityClassifier


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # Directory being checked; stripped from paths when full paths are off
    CHECK_DIR: str = Field(default_factory=lambda: os.getenv("CHECK_DIR", ""))

    SHOW_FULL_PATH: bool = Field(default_factory=lambda: _env_bool("SHOW_FULL_PATH", False))
    SAVE_FULL_PATH: bool = Field(default_factory=lambda: _env_bool("SAVE_FULL_PATH", False))
    SAVE_ALL_ERRORS: bool = Field(default_factory=lambda: _env_bool("SAVE_ALL_ERRORS", True))

    # Comma separated severity labels hidden at startup, e.g. "style,information".
    # Matched case-sensitively like reported severities; unknown labels are ignored.
    HIDDEN_CATEGORIES: str = Field(default_factory=lambda: os.getenv("HIDDEN_CATEGORIES", ""))

    DEFAULT_EXPORT_FORMAT: str = Field(default_factory=lambda: os.getenv("DEFAULT_EXPORT_FORMAT", "xml"))

    def path_policy(self) -> PathPolicy:
        return PathPolicy(
            check_directory=self.CHECK_DIR,
            show_full_path=self.SHOW_FULL_PATH,
            save_full_path=self.SAVE_FULL_PATH,
            save_all_errors=self.SAVE_ALL_ERRORS,
        )

    def hidden_categories(self) -> list[Category]:
        out: list[Category] = []
        for label in self.HIDDEN_CATEGORIES.split(","):
            label = label.strip()
            if label and SeverityClassifier.is_known(label):
                out.append(SeverityClassifier.classify(label))
        return out


settings = Settings()
