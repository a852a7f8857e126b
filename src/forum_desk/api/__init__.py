"""HTTP API for Forum Desk."""
