"""Application layer for the Templates bounded context."""
