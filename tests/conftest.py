"""
Common pytest fixtures and configuration for CodeCraft tests.
"""

import os
import pytest
import sys

from pathlib import Path


# Add the repository root to the Python path to ensure imports work correctly
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's CODECRAFT_* settings and ./codecraft.yaml out of tests."""
    for var in [v for v in os.environ if v.startswith("CODECRAFT_")]:
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def test_file_php():
    return Path(repo_root) / "tests/files/php/User.php"


@pytest.fixture
def test_file_php_greeter():
    return Path(repo_root) / "tests/files/php/Greeter.php"


@pytest.fixture
def test_file_php_broken():
    return Path(repo_root) / "tests/files/php/Broken.php"


@pytest.fixture
def test_file_js():
    return Path(repo_root) / "tests/files/javascript/widgets.js"


@pytest.fixture
def test_file_ts():
    return Path(repo_root) / "tests/files/typescript/store.ts"


@pytest.fixture
def test_file_css():
    return Path(repo_root) / "tests/files/css/theme.css"


@pytest.fixture
def test_file_json():
    return Path(repo_root) / "tests/files/json/settings.json"


@pytest.fixture
def test_file_py():
    return Path(repo_root) / "tests/files/python/inventory.py"


@pytest.fixture
def php_greeter(tmp_path, test_file_php_greeter):
    """A writable copy of Greeter.php."""
    path = tmp_path / "Greeter.php"
    path.write_text(test_file_php_greeter.read_text())
    return path
