from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Ensure the repo root (containing `typografer/`) is importable when pytest
# picks `tests/` as the rootdir (e.g., single-file runs).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

_ENV_PREFIX = "TYPOGRAFER_"


def _env_truthy(name: str) -> bool:
    v = str(os.getenv(name, "")).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def pytest_addoption(parser):  # noqa: ANN001
    parser.addoption(
        "--run-typograf-tests",
        action="store_true",
        default=False,
        help="Allow tests that call the real Typograf web service.",
    )


def pytest_configure(config):  # noqa: ANN001
    config.addinivalue_line(
        "markers",
        "typograf_integration: tests that call the real Typograf service (requires TYPOGRAFER_RUN_SERVICE_TESTS=true or --run-typograf-tests)",
    )


def pytest_collection_modifyitems(config, items):  # noqa: ANN001
    run_service_tests = bool(config.getoption("--run-typograf-tests")) or _env_truthy("TYPOGRAFER_RUN_SERVICE_TESTS")
    skip_not_enabled = (
        "Typograf integration tests are disabled; set TYPOGRAFER_RUN_SERVICE_TESTS=true or pass --run-typograf-tests"
    )

    for item in items:
        if item.get_closest_marker("typograf_integration") is None:
            continue
        if not run_service_tests:
            item.add_marker(pytest.mark.skip(reason=skip_not_enabled))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Local TYPOGRAFER_* settings must not leak into unit tests.
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX) and key != "TYPOGRAFER_RUN_SERVICE_TESTS":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TYPOGRAFER_DISABLE_FILE_LOG", "1")
