"""
Main FastAPI Application
FastAPI app creation, CORS configuration, middleware, and startup/shutdown events
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import os
import logging

from .dependencies import initialize_services
from .routes import api_router

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Requirements Analyzer",
    description="Extract requirements from Confluence pages and generate requirements, QA test cases and developer summaries with an LLM.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Session state lives in cookies, so origins must be explicit for credentials to be sent
cors_origins = [
    "http://localhost:3000",  # Common React/Next.js dev server
    "http://localhost:5173",  # Vite default dev server
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

extra_origins = os.getenv("CORS_ORIGINS", "")
cors_origins.extend(origin.strip() for origin in extra_origins.split(",") if origin.strip())

logger.info(f"CORS: allowing {len(cors_origins)} origins")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log each request with its status code"""
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


# Include all routers
app.include_router(api_router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize all clients and services on startup"""
    initialize_services(os.getenv("CONFIG_PATH", "config.yaml"))


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Application shutting down")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
