"""Unit tests conftest for Lambda function test isolation.

Lambda entry points are all named index.py. Tests load them with
importlib under a unique module name; this hook drops any plain
'index' module left over from an interactive session.
"""

import sys


def pytest_sessionstart(session):
    """Clean any cached 'index' module before the session starts."""
    if "index" in sys.modules:
        del sys.modules["index"]
