import pytest
from fastapi.testclient import TestClient

from results_tree.api import results_routes
from results_tree.domain.models import PathPolicy
from results_tree.main import app
from results_tree.services.tree_service import ResultsTree


@pytest.fixture(autouse=True)
def _fresh_app_tree():
    """Give every test its own tree behind the API so state never leaks."""
    results_routes.reset_tree(ResultsTree())
    yield
    results_routes.reset_tree(ResultsTree())


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def tree() -> ResultsTree:
    return ResultsTree(policy=PathPolicy(check_directory="/src"))


@pytest.fixture
def populated(tree: ResultsTree) -> ResultsTree:
    """Three files, mixed categories, inserted out of alphabetical order."""
    tree.add_error("/src/b.cpp", "error", "null pointer dereference", [("/src/b.cpp", 3)], "nullPointer")
    tree.add_error("/src/a.cpp", "style", "unused variable", [("/src/a.cpp", 10)], "unusedVariable")
    tree.add_error("/src/b.cpp", "style", "variable scope can be reduced", [("/src/b.cpp", 7)], "variableScope")
    tree.add_error("/src/c.cpp", "performance", "prefer prefix ++", [("/src/c.cpp", 1)], "postfixOperator")
    tree.add_error("/src/a.cpp", "warning", "uninitialized member", [], "uninitMemberVar")
    return tree
