"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn solcard.api_server.app:app --host 0.0.0.0 --port 3000
"""

from solcard.api_server.server import app

__all__ = ["app"]
