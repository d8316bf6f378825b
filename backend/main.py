# backend/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from config import settings
from database import init_db
from utils.auth import AuthGateMiddleware
from utils.errors import register_exception_handlers
from utils.logging_setup import configure_logging
from utils.middleware import PreflightMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware

# Routers
from routes.root import router as root_router
from routes.enquiries import router as enquiries_router
from routes.auth import router as auth_router
from routes.users import router as users_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting RGP Backend Enquiry API v%s (env=%s)", settings.APP_VERSION, settings.APP_ENV)
    init_db()
    yield
    logger.info("Shutting down RGP Backend Enquiry API")


app = FastAPI(title="RGP Backend Enquiry API", version=settings.APP_VERSION, lifespan=lifespan)

register_exception_handlers(app)

# Middleware: the last one added runs first.
# CORS -> request log -> security headers -> OPTIONS short-circuit -> auth gate -> routes
app.add_middleware(AuthGateMiddleware)
app.add_middleware(PreflightMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# Open to any origin unless a frontend URL is configured
origins = [settings.FRONTEND_URL] if settings.FRONTEND_URL else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    expose_headers=["Content-Length", "Content-Type"],
    max_age=86400,
)

# Router registration
app.include_router(root_router)
app.include_router(enquiries_router)
app.include_router(auth_router)
app.include_router(users_router)
