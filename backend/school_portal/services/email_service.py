"""Outgoing email through the Resend HTTP API."""
from typing import List
import requests
from markupsafe import escape
from flask import current_app
from school_portal.utils.exceptions import DependencyError

class EmailService:
    """Thin client for the transactional email provider."""

    @staticmethod
    def send(to: List[str], subject: str, html: str) -> None:
        """Send one email; raises DependencyError when the provider fails."""
        config = current_app.config
        if not config.get('EMAIL_ENABLED'):
            current_app.logger.info(f"Email disabled, not sending '{subject}' to {', '.join(to)}")
            return
        if not config.get('RESEND_API_KEY'):
            raise DependencyError("Email provider is not configured")

        try:
            response = requests.post(
                config['RESEND_API_URL'],
                headers={
                    'Authorization': f"Bearer {config['RESEND_API_KEY']}",
                    'Content-Type': 'application/json'
                },
                json={
                    'from': config['RESEND_FROM_EMAIL'],
                    'to': to,
                    'subject': subject,
                    'html': html
                },
                timeout=config.get('EMAIL_TIMEOUT_SECONDS', 10)
            )
        except requests.RequestException as e:
            raise DependencyError(f"Email request failed: {str(e)}")

        if not response.ok:
            raise DependencyError(f"Email API error: {response.status_code} {response.text}")

    @staticmethod
    def send_quietly(to: List[str], subject: str, html: str) -> bool:
        """Fire-and-forget send: failures are logged, never raised."""
        try:
            EmailService.send(to, subject, html)
            return True
        except DependencyError as e:
            current_app.logger.warning(f"Failed to send email to {', '.join(to)}: {e.message}")
            return False

    @staticmethod
    def send_verification_email(email: str, name: str, token: str) -> bool:
        link = f"{current_app.config['FRONTEND_URL']}/verify?token={token}"
        html = (
            f"<h2>Welcome {escape(name or 'User')}!</h2>"
            "<p>Please verify your email address to get started with the School Management Portal.</p>"
            f"<p><a href=\"{link}\">Verify Email Address</a></p>"
            f"<p>This link will expire in {current_app.config['VERIFICATION_TOKEN_TTL_HOURS']} hours.</p>"
        )
        return EmailService.send_quietly([email], "Verify Your Email - School Management Portal", html)

    @staticmethod
    def send_login_code(email: str, code: str) -> bool:
        html = (
            "<p>Your sign-in code is:</p>"
            f"<h2 style=\"letter-spacing: 4px;\">{code}</h2>"
            f"<p>The code expires in {current_app.config['LOGIN_CODE_TTL_MINUTES']} minutes.</p>"
        )
        return EmailService.send_quietly([email], "Your sign-in code", html)
