"""
SMTP mail gateway for OTP delivery.

One MailGateway is built at application startup (see jobboard.main.lifespan),
kept on app.state and handed to routes through get_mailer(). Sends run as
background tasks after the response is written; a delivery failure is logged
and never undoes the registration or login that triggered it.
"""
import logging
import smtplib
import threading
from email.message import EmailMessage
from typing import Optional

from fastapi import Request

from jobboard.core import config

logger = logging.getLogger(__name__)


class MailGateway:
    def __init__(
        self,
        host: Optional[str],
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender: Optional[str],
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout
        self._smtp: Optional[smtplib.SMTP] = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def open(self) -> None:
        """Connect eagerly so misconfiguration shows up in the startup log."""
        if not self.enabled:
            logger.warning("SMTP_HOST not set; verification emails will not be delivered")
            return
        with self._lock:
            try:
                self._connect()
                logger.info(f"SMTP is ready to send emails ({self.host}:{self.port})")
            except Exception as e:
                logger.error(f"SMTP connection error: {e}")

    def close(self) -> None:
        with self._lock:
            if self._smtp is not None:
                try:
                    self._smtp.quit()
                except Exception as e:
                    logger.debug(f"SMTP quit failed: {e}")
                self._smtp = None

    def _connect(self) -> None:
        if self.port == 465:
            smtp = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
        if self.username and self.password:
            smtp.login(self.username, self.password)
        self._smtp = smtp

    def _send(self, message: EmailMessage) -> None:
        with self._lock:
            if self._smtp is None:
                self._connect()
            try:
                self._smtp.send_message(message)
            except smtplib.SMTPServerDisconnected:
                # Idle connections get dropped by most servers; reconnect once
                self._connect()
                self._smtp.send_message(message)

    def send_otp(self, email: str, code: str) -> None:
        """Deliver a verification code. Never raises."""
        if not self.enabled:
            logger.warning(f"Mail delivery disabled; verification email to {email} not sent")
            return

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = email
        message["Subject"] = "Email Verification Code"
        message.set_content(f"Hello, Your verification code is: {code}")
        message.add_alternative(
            f"<p>Hello, Your verification code is: <strong>{code}</strong></p>",
            subtype="html",
        )

        try:
            self._send(message)
            logger.info(f"Verification email sent to {email}")
        except Exception as e:
            logger.error(f"Error sending verification email to {email}: {e}", exc_info=True)


def build_mail_gateway() -> MailGateway:
    return MailGateway(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        username=config.SMTP_USER,
        password=config.SMTP_PASS,
        sender=config.SMTP_FROM,
    )


def get_mailer(request: Request) -> MailGateway:
    """Dependency returning the process-wide gateway created at startup."""
    mailer = getattr(request.app.state, "mailer", None)
    if mailer is None:
        # App served without its lifespan (e.g. a bare TestClient)
        mailer = build_mail_gateway()
        request.app.state.mailer = mailer
    return mailer
