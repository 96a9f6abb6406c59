"""HTTP admin API — FastAPI app exposing the notification service."""
