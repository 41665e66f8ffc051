from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from booking_mailer.config import settings
from booking_mailer.routers import booking, confirmation, health
from booking_mailer.services.email_sender import EmailDispatcher
from booking_mailer.services.mail_transport import build_transport


@asynccontextmanager
async def lifespan(app: FastAPI):
    transport = build_transport(settings)
    app.state.dispatcher = EmailDispatcher(transport, settings.from_email, settings.from_name)
    logger.info("Wafa Dental Clinic booking API started (mail transport: {})", transport.name)
    try:
        yield
    finally:
        await transport.aclose()
        logger.info("Mail transport closed")


app = FastAPI(
    title="Wafa Dental Clinic — Booking Confirmations",
    description="Booking confirmation emails with PDF receipts, and booking sheet proxy",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow the static website to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health.router)
app.include_router(confirmation.router)
app.include_router(booking.router)
