#!/usr/bin/env python3
"""
Simple entry point for loading a module with the SSR runtime.
This avoids relative import issues by running from the project root.
"""

import sys
from pathlib import Path

# Add the project root to the Python path before importing the package
root_path = Path(__file__).parent
sys.path.insert(0, str(root_path))

if __name__ == "__main__":
    from ssr_runtime.__main__ import main  # noqa: E402

    sys.exit(main())
