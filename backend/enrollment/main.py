"""
Student Enrollment Registry - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Maps record engine errors to HTTP responses
5. Registers all API route handlers and the health check

The application follows a modular architecture:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: Business logic (validation, lifecycle, search, repository, audit)
- auth.py: Administrator allow-list
- errors.py: Error taxonomy
- logging_config.py: Structured logging configuration
- database.py: Database connection management
"""

import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from enrollment.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, actor_var, generate_request_id
)
from enrollment.errors import EnrollmentError, ValidationError
from enrollment.routes import students, search, audit_logs, login
from enrollment.database import DATABASE_URL, create_tables

# Import all models so they are registered with Base.metadata
from enrollment.models.student import Student
from enrollment.models.audit_log import AuditLogEntry

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")

# Auto-create tables for SQLite local development
if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite, creating tables directly")
    create_tables()

# ──────────────────────────────────────────────────────────────
# Create FastAPI application
# ──────────────────────────────────────────────────────────────
app = FastAPI(
    title="Student Enrollment Registry",
    description=(
        "Tracks student enrollment records through their activity lifecycle, "
        "automatically inactivates students on their scheduled date, supports "
        "public lookup by phone number, and keeps an audit trail of "
        "administrative changes."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# ──────────────────────────────────────────────────────────────
# CORS Middleware
#
# Allows the browser dashboard to call the API from another origin.
# In production, restrict origins to the actual frontend domain.
# ──────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
#
# Generates a UUID per request, stores it in a context variable so every
# log entry carries it, returns it in X-Request-ID and logs latency.
# ──────────────────────────────────────────────────────────────
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    req_id = generate_request_id()
    request_id_var.set(req_id)
    actor_var.set("")

    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
            "query_params": dict(request.query_params)
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


# ──────────────────────────────────────────────────────────────
# Error handlers
#
# ValidationError → 422 with field-level messages
# NotFoundError   → 404
# InputFormatError → 400
# ──────────────────────────────────────────────────────────────
@app.exception_handler(EnrollmentError)
async def enrollment_error_handler(request: Request, exc: EnrollmentError):
    body = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors

    log_with_context(logger, "WARNING",
        f"{type(exc).__name__}: {request.method} {request.url.path}",
        extra_data={"status_code": exc.status_code, **body})
    return JSONResponse(status_code=exc.status_code, content=body)


# ──────────────────────────────────────────────────────────────
# Register API routes
# ──────────────────────────────────────────────────────────────
app.include_router(login.router, tags=["Auth"])
app.include_router(students.router, tags=["Students"])
app.include_router(search.router, tags=["Search"])
app.include_router(audit_logs.router, tags=["Audit"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for Docker health checks and monitoring."""
    return {"status": "healthy", "service": "enrollment-registry", "version": "1.0.0"}


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "Student Enrollment Registry",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "login": "POST /api/login",
            "students_list": "GET /api/students",
            "student_detail": "GET /api/students/{id}",
            "student_add": "POST /api/students",
            "student_edit": "PUT /api/students/{id}",
            "search": "GET /api/search?phone=",
            "audit_logs": "GET /api/audit-logs"
        }
    }
