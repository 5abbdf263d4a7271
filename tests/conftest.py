"""Pytest configuration for window-probe tests."""

import sys
from pathlib import Path

# Add the repository root to the Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))
