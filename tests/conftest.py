import os

import pytest


@pytest.fixture(autouse=True)
def clean_gitplumb_env(monkeypatch):
    """Keep GITPLUMB_* variables from the outer environment out of tests."""
    for key in list(os.environ):
        if key.startswith("GITPLUMB_"):
            monkeypatch.delenv(key, raising=False)
