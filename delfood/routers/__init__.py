"""FastAPI routers grouped by feature."""

from . import owners  # noqa: F401
