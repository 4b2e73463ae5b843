"""
FastAPI application for auditing the badge definition catalog.
Detects duplicate badge rules and taxonomy drift; never modifies the store.
"""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from badge_audit.api.routes import health, audit
from badge_audit.core.logging import setup_logging
from badge_audit.core.exceptions import http_exception_handler, validation_exception_handler
from badge_audit.core.middleware import RequestIDMiddleware

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Badge Catalog Audit",
    description="API for checking badge definitions for duplicates and criteria taxonomy drift",
    version="1.0.0"
)

# Middleware
app.add_middleware(RequestIDMiddleware)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(health.router)
app.include_router(audit.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, workers=1)
