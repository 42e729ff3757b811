"""HTTP API: FastAPI app, GameManager, schemas and routes."""
