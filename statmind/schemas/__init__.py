"""Data transfer objects and request/response schemas."""
