"""SMTP delivery for contact-form messages."""

import html
import logging
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from .config import Settings
from .models import ContactForm

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """The SMTP relay refused or failed to deliver a message."""


class SMTPMailer:
    """Sends multipart (plain text + HTML) messages through an SMTP relay."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def sender(self) -> str:
        from_email = self.settings.from_email or self.settings.smtp_username or ""
        return f'"{self.settings.from_name}" <{from_email}>'

    def build_message(self, to: str, subject: str, text_content: str, html_content: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text_content, charset="utf-8")
        msg.add_alternative(html_content, subtype="html", charset="utf-8")
        return msg

    async def send(self, message: EmailMessage) -> None:
        """Deliver one message.

        Raises:
            MailDeliveryError: Connection, authentication or send failure
        """
        try:
            async with aiosmtplib.SMTP(
                hostname=self.settings.smtp_host,
                port=self.settings.smtp_port,
                start_tls=self.settings.smtp_use_tls,
                timeout=self.settings.smtp_timeout,
            ) as smtp:
                if self.settings.smtp_username and self.settings.smtp_password:
                    await smtp.login(self.settings.smtp_username, self.settings.smtp_password)
                errors, response = await smtp.send_message(message)
        except aiosmtplib.SMTPException as e:
            logger.error(f"SMTP error sending to {message['To']}: {e}", exc_info=True)
            raise MailDeliveryError(str(e)) from e

        if errors:
            details = "; ".join(f"{addr}: {error}" for addr, error in errors.items())
            logger.error(f"SMTP partial send failure to {message['To']}: {details}")
            raise MailDeliveryError(f"Partial send failure: {details}")
        logger.debug(f"SMTP server response: {response}")

    def notification_message(self, form: ContactForm, to: Optional[str] = None) -> EmailMessage:
        """The submitted form contents, for whoever handles enquiries."""
        name, email, message = (html.escape(v) for v in (form.name, form.email, form.message))
        return self.build_message(
            to=to or form.email,
            subject=f"Contact Form Submission from {form.name}",
            text_content=f"Name: {form.name}\nEmail: {form.email}\nMessage: {form.message}",
            html_content=(
                f"<p><strong>Name:</strong> {name}</p>"
                f"<p><strong>Email:</strong> {email}</p>"
                f"<p><strong>Message:</strong> {message}</p>"
            ),
        )

    def confirmation_message(self, form: ContactForm) -> EmailMessage:
        """Acknowledgement sent back to the submitter."""
        org = self.settings.from_name
        return self.build_message(
            to=form.email,
            subject=f"Thank You for Contacting {org}",
            text_content=(
                f"Dear {form.name},\n\nThank you for reaching out to us! "
                f"Our team will contact you within 24 hours.\n\nBest regards,\n{org} Team"
            ),
            html_content=(
                f"<p>Dear {html.escape(form.name)},</p>"
                "<p>Thank you for reaching out to us! Our team will contact you within 24 hours.</p>"
                f"<p>Best regards,<br>{html.escape(org)} Team</p>"
            ),
        )

    async def relay_contact_form(self, form: ContactForm) -> None:
        """Send the notification, then the confirmation."""
        await self.send(self.notification_message(form, to=self.settings.notify_email))
        await self.send(self.confirmation_message(form))
        logger.info(f"Emails sent successfully to: {form.email}")
