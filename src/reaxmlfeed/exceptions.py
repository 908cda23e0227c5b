"""
Custom Exceptions for the REAXML feed ingester

Provides a hierarchy of exceptions for standardized error handling across all modules.

Exception Hierarchy:
    ReaxmlFeedError (base)
    ├── ConfigurationError
    ├── DatabaseError
    │   └── DatabaseConnectionError
    ├── ParsingError
    └── ValidationError

Record-level problems (a listing failing business rules, an unregistered
agency) are not raised; the ingestion pipeline reports them per listing.
"""


class ReaxmlFeedError(Exception):
    """Base exception for all REAXML feed errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


# Configuration Errors
class ConfigurationError(ReaxmlFeedError):
    """Raised when there's a configuration problem."""

    pass


# Database Errors
class DatabaseError(ReaxmlFeedError):
    """Base exception for database-related errors."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when unable to connect to the database."""

    pass


# Document Errors
class ParsingError(ReaxmlFeedError):
    """Raised when a REAXML document is structurally unusable."""

    def __init__(self, message: str, source: str = None):
        self.source = source
        super().__init__(message)


# Request Errors
class ValidationError(ReaxmlFeedError):
    """Raised when request input validation fails."""

    def __init__(self, message: str, field: str = None, value=None):
        self.field = field
        self.value = value
        super().__init__(message)
