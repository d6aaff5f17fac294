"""HTTP API for the session auth service."""
