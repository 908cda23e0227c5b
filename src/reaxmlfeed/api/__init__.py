"""
Flask REST API for REAXML feed ingestion.

Provides endpoints for:
- Importing REAXML documents
- Health checks
"""

from reaxmlfeed.api.server import create_app
from reaxmlfeed.api.routes import register_routes

__all__ = [
    "create_app",
    "register_routes",
]
