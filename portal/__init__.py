"""HTTP API for the application review workflow."""
