import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from app.core.config import settings

logger = logging.getLogger(__name__)


def smtp_configured() -> bool:
    return all([
        settings.smtp_host,
        settings.smtp_port,
        settings.smtp_user,
        settings.smtp_password,
        settings.smtp_from_email,
    ])


async def send_mail(to: str, subject: str, text: str, html: str) -> None:
    """
    Send a multipart (plain text + HTML) email.

    Raises:
        ValueError: If SMTP settings are incomplete.
        aiosmtplib.SMTPException: If the server refuses the message.
    """
    if not smtp_configured():
        logger.warning("SMTP not configured - cannot send %r to %s", subject, to)
        raise ValueError("SMTP is not configured. Please configure SMTP settings in .env file.")

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.smtp_from_email
    message["To"] = to
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))

    send_kwargs = {
        "hostname": settings.smtp_host,
        "port": settings.smtp_port,
        "username": settings.smtp_user,
        "password": settings.smtp_password,
    }

    # Port 465 uses direct TLS, anything else STARTTLS
    if settings.smtp_use_tls:
        if settings.smtp_port == 465:
            send_kwargs["use_tls"] = True
        else:
            send_kwargs["start_tls"] = True

    await aiosmtplib.send(message, **send_kwargs)


async def send_password_reset_email(email: str, username: str, reset_url: str) -> None:
    """
    Send the forgot-password email.

    Args:
        email: Recipient address
        username: Shown in the greeting
        reset_url: Callback URL already carrying the ``token`` query parameter
    """
    product = settings.mail_product_name
    minutes = settings.password_reset_token_expire_minutes
    subject = f"{product}: Reset your password"

    text = f"""
Hello {username},

You requested a password reset for your {product} account.

Please click the following link to reset your password:
{reset_url}

This link will expire in {minutes} minutes.

If you did not request this, please ignore this email.
    """
    html = f"""
<html>
  <body>
    <p>Hello {username},</p>
    <p>You requested a password reset for your {product} account.</p>
    <p>Please click the following link to reset your password:</p>
    <p><a href="{reset_url}">{reset_url}</a></p>
    <p>This link will expire in {minutes} minutes.</p>
    <p>If you did not request this, please ignore this email.</p>
  </body>
</html>
    """

    await send_mail(email, subject, text, html)
