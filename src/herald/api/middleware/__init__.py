"""API middleware — CORS and API key helpers."""
