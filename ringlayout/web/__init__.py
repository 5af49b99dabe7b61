"""Web host — stateless FastAPI app around the engine operations."""
