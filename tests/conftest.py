import sys
from pathlib import Path

# Load shared fixtures from tests._fixtures so pytest discovers them
pytest_plugins = [
    "tests._fixtures.fixtures",
]

# Ensure the project `src` package is importable during pytest collection.
# This mirrors editable installs by adding the repository root to sys.path.
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))
