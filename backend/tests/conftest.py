"""Root conftest — shared test configuration."""

import os

# Keep tests independent of any developer .env overrides
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("GRAPH_STRICT_DEPENDENCIES", "false")
os.environ.setdefault("DEFAULT_MAX_RESOURCES", "9")
