import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional
from urllib.parse import urlencode

from src.app.services.notification_service import INotificationService
from src.domain.entities import User

logger = logging.getLogger(__name__)

VERIFY_EMAIL_TEXT = """Hello {name},

Please confirm your email address by opening the link below:

{url}

The link expires in {expire_minutes} minutes. If you did not create an
account, no further action is required.
"""

VERIFY_EMAIL_HTML = """<p>Hello {name},</p>
<p>Please confirm your email address by clicking the button below.</p>
<p><a href="{url}">Verify Email Address</a></p>
<p>The link expires in {expire_minutes} minutes. If you did not create an account,
no further action is required.</p>
"""

PASSWORD_RESET_TEXT = """Hello {name},

You are receiving this email because we received a password reset request
for your account. Use the link below to choose a new password:

{url}

The link expires in {expire_minutes} minutes. If you did not request a
password reset, no further action is required.
"""

PASSWORD_RESET_HTML = """<p>Hello {name},</p>
<p>You are receiving this email because we received a password reset request for your account.</p>
<p><a href="{url}">Reset Password</a></p>
<p>The link expires in {expire_minutes} minutes. If you did not request a password reset,
no further action is required.</p>
"""


class EmailNotificationService(INotificationService):
    """
    SMTP delivery of account emails.

    Falls back to logging the message when SMTP_HOST is not configured
    (development mode).
    """

    def __init__(
        self,
        *,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_use_tls: bool = True,
        from_email: Optional[str] = None,
        from_name: str = "Account Service",
        password_reset_url: str = "http://localhost:3000/reset-password",
        verification_expire_minutes: int = 60,
        password_reset_expire_minutes: int = 60,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.from_email = from_email or smtp_user
        self.from_name = from_name
        self.password_reset_url = password_reset_url
        self.verification_expire_minutes = verification_expire_minutes
        self.password_reset_expire_minutes = password_reset_expire_minutes

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.from_email)

    @staticmethod
    def _redact_email(email: str) -> str:
        if "@" not in email:
            return "redacted"
        local, domain = email.split("@", 1)
        return f"{local[:2]}***@{domain}"

    async def send_verification_link(self, user: User, url: str) -> bool:
        data = {
            "name": user.full_name or user.email,
            "url": url,
            "expire_minutes": self.verification_expire_minutes,
        }
        return await self._send(
            user.email,
            "Verify Email Address",
            VERIFY_EMAIL_HTML.format(**data),
            VERIFY_EMAIL_TEXT.format(**data),
        )

    async def send_password_reset(self, user: User, token: str) -> bool:
        data = {
            "name": user.full_name or user.email,
            "url": f"{self.password_reset_url}?{urlencode({'token': token, 'email': user.email})}",
            "expire_minutes": self.password_reset_expire_minutes,
        }
        return await self._send(
            user.email,
            "Reset Password Notification",
            PASSWORD_RESET_HTML.format(**data),
            PASSWORD_RESET_TEXT.format(**data),
        )

    async def _send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        if not self.is_configured:
            logger.info(
                f"Email not configured - would send '{subject}' to "
                f"{self._redact_email(to_email)}"
            )
            return True

        try:
            await asyncio.to_thread(self._deliver, to_email, subject, html_body, text_body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {self._redact_email(to_email)}: {e}")
            return False

        logger.info(f"Email sent to {self._redact_email(to_email)}: {subject}")
        return True

    def _deliver(self, to_email: str, subject: str, html_body: str, text_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        context = ssl.create_default_context()
        if self.smtp_use_tls:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                server.starttls(context=context)
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, to_email, msg.as_string())
        else:
            with smtplib.SMTP_SSL(
                self.smtp_host, self.smtp_port, context=context, timeout=30
            ) as server:
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.sendmail(self.from_email, to_email, msg.as_string())
