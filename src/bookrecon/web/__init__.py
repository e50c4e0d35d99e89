"""HTTP API for bookrecon."""
