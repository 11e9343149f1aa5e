"""
API Server
Entry point for running the HTTP API with uvicorn.

    python api_server.py

or import the app directly:

    from api.main import app
"""
from api.main import app

__all__ = ["app"]

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
