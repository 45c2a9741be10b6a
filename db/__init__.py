"""Database package for MongoDB operations using Beanie ODM.

Modules:
    manager: DatabaseManager singleton for connection handling
    models: Beanie Document models for all collections
    schemas: Request/response Pydantic models
    aggregation: Pipeline helpers for Motor or PyMongo async collections
    logging_handler: MongoDB-backed logging handler

Usage:
    from db.models import CityVisit, LocationPoint

    visit = await CityVisit.find_one(CityVisit.user_id == "u1")
"""

from db.manager import DatabaseManager, db_manager
from db.models import ALL_DOCUMENT_MODELS, CityVisit, LocationPoint, ServerLog

__all__ = [
    "ALL_DOCUMENT_MODELS",
    "CityVisit",
    "DatabaseManager",
    "LocationPoint",
    "ServerLog",
    "db_manager",
]
