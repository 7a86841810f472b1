"""HTTP API for ihub-admin."""
