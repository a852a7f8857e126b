"""Database configuration and utilities."""
