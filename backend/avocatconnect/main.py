# avocatconnect backend api
# fastapi app with async mongodb, jwt auth, client/lawyer messaging, and gemini helpers

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from avocatconnect.config import settings
from avocatconnect.errors import PortalError
from avocatconnect.services.db import db
from avocatconnect.routers import ai, appointments, auth, cases, clients, conversations, invoices, notifications

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb and ensure indexes. shutdown: close connection."""
    logger.info("Starting AvocatConnect backend...")
    await db.connect()
    await db.ensure_indexes()
    logger.info("AvocatConnect backend ready")
    yield
    logger.info("Shutting down AvocatConnect backend...")
    await db.close()


app = FastAPI(
    title="AvocatConnect API",
    description="Backend API for the AvocatConnect client portal: cases, messaging, appointments, invoices",
    version="0.1.0",
    lifespan=lifespan,
)

# cors, allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "errorCode": exc.error_code},
    )


# register routers
app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(cases.router)
app.include_router(conversations.router)
app.include_router(appointments.router)
app.include_router(invoices.router)
app.include_router(notifications.router)
app.include_router(ai.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "avocatconnect-api"}
