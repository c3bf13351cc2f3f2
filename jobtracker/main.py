import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

# Import models so every table is registered with Base before create_all
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, API_PREFIX, LOG_LEVEL
from .database import Base, engine
from .domain.billing.router import router as billing_router
from .domain.customers.router import router as customers_router
from .domain.jobs.router import router as jobs_router
from .domain.scheduling.router import router as scheduling_router
from .domain.technicians.router import router as technicians_router
from .shared.errors import JobTrackerError, StoreError

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        # Another worker may have created the tables between our check and create
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Job Tracker API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(JobTrackerError)
async def domain_exception_handler(request: Request, exc: JobTrackerError):
    """Render domain failures (validation, not found, conflict, precondition) as JSON"""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    """Unclassified persistence failures surface as internal errors"""
    logger.error(f"❌ Store failure on {request.method} {request.url.path}: {exc}")
    error = StoreError("Internal storage error", {"type": type(exc).__name__})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors()), "error": "validation_error"},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} ({duration_ms:.1f}ms)")
    return response


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(customers_router, prefix=API_PREFIX)
app.include_router(technicians_router, prefix=API_PREFIX)
app.include_router(jobs_router, prefix=API_PREFIX)
app.include_router(scheduling_router, prefix=API_PREFIX)
app.include_router(billing_router, prefix=API_PREFIX)


@app.get("/")
def root():
    return {
        "message": "Job Tracker API is running",
        "status": "running",
        "endpoints": {
            "customers": f"{API_PREFIX}/customers",
            "technicians": f"{API_PREFIX}/technicians",
            "jobs": f"{API_PREFIX}/jobs",
            "appointments": f"{API_PREFIX}/jobs/{{id}}/appointments",
            "invoices": f"{API_PREFIX}/jobs/{{id}}/invoice",
            "payments": f"{API_PREFIX}/invoices/{{id}}/payments",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
