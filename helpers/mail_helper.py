# helpers/mail_helper.py

import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from pathlib import Path

from config.settings import settings
from utils.exceptions import DeliveryError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
OTP_SUBJECT = "Chat App OTP"


def render_template(template_name: str, **kwargs) -> str:
    template_path = TEMPLATE_DIR / template_name
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    html = template_path.read_text(encoding="utf-8")

    for key, value in kwargs.items():
        html = html.replace(f"{{{{ {key} }}}}", str(value))

    return html


def build_message(to_email: str, to_name: str, subject: str, body: str, html: bool = False) -> MIMEMultipart:
    msg = MIMEMultipart()
    msg["From"] = formataddr((settings.EMAIL_NAME, settings.EMAIL_FROM))
    msg["To"] = formataddr((to_name, to_email)) if to_name else to_email
    msg["Subject"] = subject

    if html:
        msg.attach(MIMEText(body, "html"))   # send as HTML
    else:
        msg.attach(MIMEText(body, "plain"))  # fallback to plain text
    return msg


def send_email(to_email: str, subject: str, body: str, html: bool = False, to_name: str = ""):
    """
    Send a message through the configured SMTP relay.
    Raises DeliveryError when credentials are missing or the relay fails.
    """
    if not settings.EMAIL_USER or not settings.EMAIL_PASSWORD:
        raise DeliveryError(detail="SMTP credentials are not configured")

    msg = build_message(to_email, to_name, subject, body, html=html)
    try:
        with smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=settings.EMAIL_TIMEOUT) as server:
            if settings.EMAIL_USE_TLS:
                server.starttls()
            server.login(settings.EMAIL_USER, settings.EMAIL_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise DeliveryError(detail=f"Error sending email: {e}") from e


def send_otp_email(to_email: str, full_name: str, otp: str):
    try:
        html_body = render_template(
            "emails/otp_login.html",
            otp=otp,
            minutes=settings.OTP_EXPIRE_MINUTES
        )
    except FileNotFoundError as e:
        raise DeliveryError(detail=str(e)) from e
    send_email(to_email, OTP_SUBJECT, html_body, html=True, to_name=full_name)


class EmailNotifier:
    """Delivers one-time codes by email"""

    def send_otp(self, code: str, email: str, full_name: str) -> None:
        send_otp_email(email, full_name, code)
        logger.info("Sent login code email")
