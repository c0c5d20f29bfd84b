"""Root conftest — shared test configuration."""

import os

os.environ.setdefault("LOG_FORMAT", "text")
