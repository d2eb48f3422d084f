import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.appointments.router import router as appointments_router
from .domain.billing.router import invoices_router, quotes_router
from .domain.customers.router import router as customers_router
from .domain.finances.router import router as finances_router
from .domain.materials.router import router as materials_router
from .domain.notes.router import router as notes_router
from .domain.phone.router import phone_router, twilio_router, vapi_router
from .domain.tenants.router import router as profile_router
from .domain.time_entries.router import router as time_entries_router
from .errors import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("twilio.http_client").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="ZIMMR API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(profile_router)
app.include_router(customers_router)
app.include_router(appointments_router)
app.include_router(quotes_router)
app.include_router(invoices_router)
app.include_router(materials_router)
app.include_router(notes_router)
app.include_router(time_entries_router)
app.include_router(finances_router)
app.include_router(vapi_router)
app.include_router(twilio_router)
app.include_router(phone_router)


@app.get("/")
def root():
    return {"message": "ZIMMR API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
