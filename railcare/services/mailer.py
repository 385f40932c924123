"""Alert e-mails over SMTP: high-priority issue alerts, overdue alerts and test mails."""

import html
import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import TYPE_CHECKING

import aiosmtplib

if TYPE_CHECKING:
    from railcare.core.config import Settings
    from railcare.models import Issue, Station

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")


@dataclass
class MailResult:
    """Outcome of one send. Failures are reported here, never raised."""

    success: bool
    message_id: str | None = None
    error: str | None = None


def is_mail_configured(settings: "Settings") -> bool:
    return bool(settings.SMTP_HOST and settings.SMTP_FROM)


def html_to_text(body: str) -> str:
    """Plain-text alternative: strip tags and collapse blank lines."""
    text = _TAG_RE.sub("", body)
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def build_message(
    to: str | list[str],
    subject: str,
    html_body: str,
    settings: "Settings",
    text_body: str | None = None,
) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["From"] = settings.SMTP_FROM
    message["To"] = ", ".join(to) if isinstance(to, list) else to
    message["Subject"] = subject
    message["Message-ID"] = make_msgid(domain=settings.SMTP_FROM.rpartition("@")[2] or None)
    message.attach(MIMEText(text_body or html_to_text(html_body), "plain"))
    message.attach(MIMEText(html_body, "html"))
    return message


async def send_email(
    to: str | list[str],
    subject: str,
    html_body: str,
    settings: "Settings",
    text_body: str | None = None,
) -> MailResult:
    """Send one e-mail. Returns a failed MailResult when SMTP is not configured or errors."""
    if not is_mail_configured(settings):
        logger.warning("SMTP is not configured; skipping e-mail", extra={"subject": subject})
        return MailResult(success=False, error="SMTP is not configured")

    message = build_message(to, subject, html_body, settings, text_body)
    password = (
        settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else None
    )
    try:
        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER or None,
            password=password,
            start_tls=settings.SMTP_START_TLS,
            timeout=settings.SMTP_TIMEOUT_SEC,
        )
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error(
            "E-mail sending failed",
            extra={"subject": subject, "reason": str(e)[:500]},
        )
        return MailResult(success=False, error=str(e) or type(e).__name__)

    message_id = message["Message-ID"]
    logger.info("E-mail sent", extra={"subject": subject, "message_id": message_id})
    return MailResult(success=True, message_id=message_id)


def _issue_rows(issue: "Issue", station: "Station") -> list[tuple[str, str]]:
    return [
        ("Station", station.name),
        ("Priority", issue.priority.upper()),
        ("Description", issue.description),
        ("Reported At", issue.reported_at.isoformat(sep=" ", timespec="minutes")),
        ("Status", issue.status),
    ]


def _render(title: str, rows: list[tuple[str, str]]) -> str:
    body = "\n".join(
        f"<p><strong>{html.escape(label)}:</strong> {html.escape(str(value))}</p>"
        for label, value in rows
    )
    return f"<h2>{html.escape(title)}</h2>\n{body}"


async def send_issue_alert(issue: "Issue", station: "Station", settings: "Settings") -> MailResult:
    """Alert the operations mailbox about a newly reported high-priority issue."""
    rows = _issue_rows(issue, station)
    if issue.photos:
        rows.append(("Photos", f"{len(issue.photos)} attached"))
    return await send_email(
        settings.alert_recipient,
        f"High Priority Issue Alert - {station.name}",
        _render("High Priority Issue Alert", rows),
        settings,
    )


async def send_overdue_issue_alert(
    issue: "Issue",
    station: "Station",
    hours_overdue: int,
    settings: "Settings",
) -> MailResult:
    """Alert the operations mailbox about an issue left open past the overdue threshold."""
    rows = _issue_rows(issue, station)
    rows.insert(1, ("Issue ID", str(issue.id)))
    rows.insert(-1, ("Hours Overdue", str(hours_overdue)))
    return await send_email(
        settings.alert_recipient,
        f"Overdue Issue Alert - {station.name}",
        _render("Overdue Issue Alert", rows),
        settings,
    )


async def send_test_email(settings: "Settings") -> MailResult:
    timestamp = datetime.now(UTC).isoformat(timespec="seconds")
    body = (
        "<h2>Test Email</h2>\n"
        "<p>This is a test email from the Railway Amenities System.</p>\n"
        "<p>If you receive this email, the email system is working correctly.</p>\n"
        f"<p>Timestamp: {timestamp}</p>"
    )
    return await send_email(
        settings.alert_recipient,
        "Test Email - Railway Amenities System",
        body,
        settings,
    )
