"""eventgrid Python package.

Calendar event layout engine: view windows, column packing, geometry,
month-cell overflow, drag/resize rescheduling and the now indicator.

Public API:
  - import from `eventgrid.api` (preferred) or `import eventgrid` (re-export)
"""

from __future__ import annotations

from .api import *  # noqa: F401,F403
from . import api as _api

__all__ = list(_api.__all__)
