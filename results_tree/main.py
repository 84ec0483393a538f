from fastapi import FastAPI

from results_tree.api.results_routes import router as results_router
from results_tree.api.results_routes import settings_router
from results_tree.core.logging import setup_logging

__version__ = "0.3.0"

setup_logging()

tags_metadata = [
    {
        "name": "results",
        "description": "Report findings, list them grouped by file, show or hide severity categories and export reports.",
    },
    {
        "name": "settings",
        "description": "Path display and report settings: checked directory, full paths, save all or only shown findings.",
    },
    {"name": "health", "description": "Liveness probe."},
]

app = FastAPI(
    title="Results Tree",
    version=__version__,
    description="Filterable store of static-analysis findings grouped by file.",
    openapi_tags=tags_metadata,
)

app.include_router(results_router)
app.include_router(settings_router)


@app.get("/health", tags=["health"], summary="Health check")
def health() -> dict:
    return {"status": "healthy", "version": __version__}
