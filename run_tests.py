#!/usr/bin/env python3
"""
Test runner for image_presets
Reports the library version and runs the unittest suite under tests/
"""

import sys
import os
import re
import unittest

# Add project root directory to path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

PROJECT_ROOT = os.path.abspath(os.path.dirname(__file__))


def get_version():
    """Extract VERSION from preset_core/schema.py"""
    schema_path = os.path.join(PROJECT_ROOT, "preset_core", "schema.py")
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            match = re.search(r'VERSION\s*=\s*["\']([^"\']+)["\']', f.read())
            if match:
                return match.group(1)
    except FileNotFoundError:
        print("Error: preset_core/schema.py not found")
        sys.exit(1)

    print("Error: Could not find VERSION in preset_core/schema.py")
    sys.exit(1)


def run_tests(pattern="test_*.py"):
    loader = unittest.TestLoader()
    suite = loader.discover(os.path.join(PROJECT_ROOT, "tests"), pattern=pattern)

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


def main():
    print(f"Detected version: {get_version()}")
    pattern = sys.argv[1] if len(sys.argv) > 1 else "test_*.py"
    sys.exit(run_tests(pattern))


if __name__ == "__main__":
    main()
