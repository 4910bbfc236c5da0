"""Command-line interface for google-service-mcp."""
