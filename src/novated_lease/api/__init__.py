"""HTTP API — FastAPI app, settings, logging and narratives."""
