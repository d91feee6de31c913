"""Service layer for wingetctl."""
