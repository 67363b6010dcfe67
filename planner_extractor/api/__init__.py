"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from planner_extractor.api import app

    uvicorn planner_extractor.api:app
"""

from planner_extractor.api.app import app

__all__ = ["app"]
