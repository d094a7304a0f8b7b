#!/usr/bin/env python3
"""Launcher for the editor API without manual PYTHONPATH tweaking."""

import sys
from pathlib import Path


def main() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    sys.path.insert(0, str(repo_root / "src"))

    from editor_api.main import main as run_api

    run_api()


if __name__ == "__main__":
    main()
