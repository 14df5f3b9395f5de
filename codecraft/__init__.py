from pathlib import Path

__version__ = "0.1.0"
PACKAGE_BASE_DIR = Path(__file__).resolve().parent
REPO_DIR = PACKAGE_BASE_DIR.parent

from codecraft.craft import CodeCraft  # noqa: E402

__all__ = ["PACKAGE_BASE_DIR", "REPO_DIR", "CodeCraft", "__version__"]
