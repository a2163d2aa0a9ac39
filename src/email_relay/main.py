"""Contact-form email relay service."""

import logging
from typing import Optional
from fastapi import Body, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .mailer import MailDeliveryError, SMTPMailer
from .models import ContactForm

logger = logging.getLogger(__name__)


def get_mailer(request: Request) -> SMTPMailer:
    return request.app.state.mailer


def create_app(settings: Optional[Settings] = None, mailer: Optional[SMTPMailer] = None) -> FastAPI:
    """Build the relay application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Contact Form Email Relay",
        description="Relays contact-form submissions via SMTP",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.mailer = mailer if mailer is not None else SMTPMailer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/send-email")
    async def send_email(
        form: Optional[ContactForm] = Body(None),
        mailer: SMTPMailer = Depends(get_mailer),
    ):
        """Send the notification and confirmation emails for a submission."""
        if form is None or not form.is_complete():
            logger.error(f"Missing required fields: {form.model_dump() if form else None}")
            return JSONResponse(status_code=400, content={"error": "Missing required fields"})

        try:
            await mailer.relay_contact_form(form)
        except MailDeliveryError as e:
            logger.error(f"Error sending emails: {e}")
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to send emails", "details": str(e)},
            )
        return {"message": "Emails sent successfully"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": settings.service_name}

    return app


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("email_relay.main:app", host=settings.host, port=settings.port)
