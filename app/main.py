from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config.logging_config import setup_logging
from app.core.config import settings
from app.exceptions.handlers import register_exception_handlers
from app.routers import root_routes
from app.routers.router import router

# Set up logging first
setup_logging()

# Initialize FastAPI application
app = FastAPI(
    title="Link Canvas Metadata Server",
    description="Link preview metadata API",
    version="1.0.0"
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

register_exception_handlers(app)

app.include_router(root_routes.router, tags=["root"])
# Include the centralized router
app.include_router(router, prefix="/api")
