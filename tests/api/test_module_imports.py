"""
Import checks for the api package: every module loads on its own and only the
application entry point resolves the project root.
"""

import importlib
import sys

import pytest

API_MODULES = [
    "api.config.settings",
    "api.auth.jwt_auth",
    "api.auth.passwords",
    "api.dependencies.auth",
    "api.dependencies.store",
    "api.exceptions.handlers",
    "api.middleware.cors",
    "api.middleware.rate_limiting",
    "api.models.requests",
    "api.models.responses",
    "api.utils.debug",
    "api.utils.rate_limiting",
    "api.utils.session_payloads",
    "api.routes.auth",
    "api.routes.health",
    "api.routes.my_sessions",
    "api.routes.root",
    "api.routes.sessions",
]


@pytest.mark.parametrize("module_name", API_MODULES)
def test_module_imports_without_project_root(module_name):
    module = importlib.import_module(module_name)
    assert not hasattr(module, "BASE_DIR")


def test_main_puts_project_root_on_path():
    main = importlib.import_module("api.main")
    assert (main.BASE_DIR / "api" / "main.py").exists()
    assert str(main.BASE_DIR) in sys.path
