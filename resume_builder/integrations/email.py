from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage

from resume_builder.core.config import settings

logger = logging.getLogger(__name__)


def smtp_ready() -> bool:
    return bool(settings.smtp_host)


def _smtp_password() -> str | None:
    if not settings.smtp_password:
        return None
    # Gmail app passwords are often copied with spaces every 4 chars.
    return settings.smtp_password.replace(" ", "")


def _smtp_login_if_needed(server: smtplib.SMTP) -> None:
    if settings.smtp_user and _smtp_password():
        server.login(settings.smtp_user, _smtp_password())


def _send_via_smtp_with(host: str, port: int, use_tls: bool, msg: EmailMessage, context: ssl.SSLContext) -> None:
    if use_tls:
        with smtplib.SMTP(host, port, timeout=15) as server:
            server.starttls(context=context)
            _smtp_login_if_needed(server)
            server.send_message(msg)
        return

    with smtplib.SMTP_SSL(host, port, context=context, timeout=15) as server:
        _smtp_login_if_needed(server)
        server.send_message(msg)


def _otp_message(recipient: str, otp: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = "Verify your email address"
    msg["From"] = settings.smtp_from or settings.smtp_user or "no-reply@localhost"
    msg["To"] = recipient
    msg.set_content(
        "\n".join(
            [
                "Welcome to Resume Builder!",
                "",
                f"Your verification code is: {otp}",
                f"This code expires in {settings.otp_ttl_minutes} minutes.",
                "",
                "If you did not create an account, you can ignore this email.",
            ]
        )
    )
    return msg


def send_otp_email(recipient: str, otp: str) -> bool:
    """Deliver a verification code. Returns False only when a configured SMTP server fails."""
    if not smtp_ready():
        logger.info("otp_email_not_configured recipient=%s otp=%s", recipient, otp)
        return True

    msg = _otp_message(recipient, otp)
    context = ssl.create_default_context()
    primary_mode = "STARTTLS" if settings.smtp_use_tls else "SSL"
    try:
        _send_via_smtp_with(
            host=settings.smtp_host or "",
            port=settings.smtp_port,
            use_tls=settings.smtp_use_tls,
            msg=msg,
            context=context,
        )
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception(
            "OTP email via SMTP failed (host=%s port=%s mode=%s): %s",
            settings.smtp_host,
            settings.smtp_port,
            primary_mode,
            exc,
        )

    if not settings.smtp_fallback_ssl:
        return False

    fallback_host = settings.smtp_host or ""
    fallback_port = 465 if settings.smtp_use_tls else 587
    fallback_tls = not settings.smtp_use_tls
    fallback_mode = "STARTTLS" if fallback_tls else "SSL"
    try:
        _send_via_smtp_with(
            host=fallback_host,
            port=fallback_port,
            use_tls=fallback_tls,
            msg=msg,
            context=context,
        )
        logger.info(
            "OTP email sent with SMTP fallback (host=%s port=%s mode=%s).",
            fallback_host,
            fallback_port,
            fallback_mode,
        )
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception(
            "OTP email SMTP fallback failed (host=%s port=%s mode=%s): %s",
            fallback_host,
            fallback_port,
            fallback_mode,
            exc,
        )
        return False
