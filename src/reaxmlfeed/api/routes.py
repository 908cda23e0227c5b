"""
API Routes for the REAXML feed ingester

Provides REST API endpoints for:
- Importing a REAXML document
- Health checks
"""

from flask import Blueprint, current_app, jsonify, request

from reaxmlfeed.core.database import fetch_one
from reaxmlfeed.core.repository import open_repository
from reaxmlfeed.exceptions import DatabaseError
from reaxmlfeed.logging_config import get_logger
from reaxmlfeed.reaxml.ingestion import ingest_reaxml

logger = get_logger(__name__)

# Create blueprint
api = Blueprint("api", __name__, url_prefix="/api")

XML_CONTENT_TYPES = ("application/xml", "text/xml", "text/plain")
MULTIPART_CONTENT_TYPE = "multipart/form-data"


def _db_path() -> str:
    return current_app.config["DB_PATH"]


def _error(message: str, status: int):
    return jsonify({"status": "error", "error": message}), status


# Health Endpoints
@api.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    try:
        with open_repository(_db_path()) as repo:
            fetch_one(repo.conn, "SELECT 1 AS ok")
            total = repo.count_listings()
        return jsonify({
            "status": "healthy",
            "database": "connected",
            "listings": total,
        })
    except DatabaseError as e:
        logger.warning("Health check failed: %s", e)
        return jsonify({
            "status": "unhealthy",
            "database": "unavailable",
            "error": e.message,
        }), 503


# Import Endpoints
@api.route("/listings/import", methods=["POST"])
def import_listings():
    """Import a REAXML document.

    Accepts the XML as the raw request body or as a ``file`` field of a
    multipart form. Responds 422 when every listing failed, else 200.
    """
    content_type = request.mimetype

    if content_type == MULTIPART_CONTENT_TYPE:
        upload = request.files.get("file")
        if upload is None:
            return _error("Missing 'file' field in multipart form", 400)
        xml = upload.read()
    elif content_type in XML_CONTENT_TYPES:
        xml = request.get_data()
    else:
        return _error(
            f"Unsupported content type: {content_type or 'none'}. "
            f"Send {', '.join(XML_CONTENT_TYPES)} or {MULTIPART_CONTENT_TYPE}.",
            415,
        )

    if not xml or not xml.strip():
        return _error("Request body is empty", 400)

    try:
        with open_repository(_db_path()) as repo:
            report = ingest_reaxml(xml, repo)
    except DatabaseError as e:
        logger.error("Import failed: %s", e)
        return _error(e.message, 503)

    status = 422 if report.failed > 0 and report.successful == 0 else 200
    return jsonify(report.to_dict()), status


def register_routes(app):
    """Register API routes with Flask app."""
    app.register_blueprint(api)

    # Make sure the tables exist before the first import
    try:
        with open_repository(app.config["DB_PATH"]):
            pass
    except DatabaseError as e:
        logger.warning("Failed to initialize database schema: %s", e)

    logger.info("API routes registered")
