# Platform-wide transactional email
import logging
from typing import Dict, List, Optional

import resend

logger = logging.getLogger(__name__)


class EmailService:
    """
    Centralized email service using Resend
    """

    def __init__(self, app=None):
        self.disabled = True
        self.api_key = None
        self.from_email = "BarbersBuddies <bookings@barbersbuddies.com>"
        self.reminder_email = "BarbersBuddies <reminders@barbersbuddies.com>"
        self.noreply_email = "BarbersBuddies <noreply@barbersbuddies.com>"
        self.frontend_url = "http://localhost:3000"
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Read the Resend key and sender addresses from the app config"""
        self.api_key = app.config.get("RESEND_API_KEY")
        self.from_email = app.config.get("MAIL_FROM_BOOKINGS", self.from_email)
        self.reminder_email = app.config.get("MAIL_FROM_REMINDERS", self.reminder_email)
        self.noreply_email = app.config.get("MAIL_FROM_NOREPLY", self.noreply_email)
        self.frontend_url = app.config.get("FRONTEND_URL", self.frontend_url)

        if not self.api_key:
            self.disabled = True
            print("⚠️ EmailService running without RESEND_API_KEY, emails are only logged")
        else:
            self.disabled = False
            resend.api_key = self.api_key

        app.extensions["email_service"] = self

    def build_params(
        self, to: str, subject: str, html: str, sender: Optional[str] = None
    ) -> Dict:
        recipients: List[str] = [to] if isinstance(to, str) else list(to)
        return {
            "from": sender or self.from_email,
            "to": recipients,
            "subject": subject,
            "html": html,
        }

    def send(self, params: Dict) -> Optional[str]:
        """
        Send one email through Resend.

        Returns the provider's email id. Errors are raised to the caller so
        that the outbox can schedule a retry.
        """
        if self.disabled:
            logger.info(
                "Email disabled, skipping '%s' to %s", params.get("subject"), params.get("to")
            )
            return None

        email_response = resend.Emails.send(params)
        email_id = email_response.get("id") if isinstance(email_response, dict) else None
        logger.info("Email '%s' sent to %s (id=%s)", params.get("subject"), params.get("to"), email_id)
        return email_id


email_service = EmailService()
