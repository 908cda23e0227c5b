"""
Command-line interface modules.

Provides CLI entry points for:
- ingest: Ingest REAXML files into the database
- agency: Register and list agencies
- api_server: Start the REST API
"""
