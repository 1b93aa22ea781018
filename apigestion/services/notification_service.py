# apigestion/services/notification_service.py
"""
Email notifications for urgent alerts.

EmailService is the transport: one POST to the Resend HTTP API per message.
It never raises; False means the message was not accepted.

AlertNotifier is the best-effort contract the alert engine uses. It resolves
the owner's address, renders the HTML body and reports a NotificationResult
the caller logs. Failures here must never block alert persistence.
"""

import enum
from typing import Optional
import httpx
from sqlalchemy.orm import Session
from apigestion.config import settings
from apigestion.models.alert import Alert
from apigestion.models.user import User
from apigestion.templates.alert_email import render_alert_email
from apigestion.utils.logger import get_logger

logger = get_logger(__name__)


class NotificationResult(str, enum.Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


class EmailService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.sender = sender or settings.EMAIL_FROM
        self.api_url = api_url or settings.RESEND_API_URL
        self.timeout = timeout or settings.EMAIL_TIMEOUT_SECONDS
        self._transport = transport

    async def send_email(self, to: str, subject: str, html: str) -> bool:
        """Send one HTML email. Returns True when the provider accepted it."""
        if not self.api_key:
            logger.warning(f"[EMAIL] No RESEND_API_KEY configured: email to {to} not sent")
            return False

        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
            if response.is_success:
                logger.info(f"[EMAIL] Sent to {to}: {subject}")
                return True
            logger.error(f"[EMAIL] Provider returned HTTP {response.status_code} for {to}: {response.text}")
            return False
        except httpx.TimeoutException:
            logger.error(f"[EMAIL] Timeout sending to {to}")
            return False
        except Exception as e:
            logger.error(f"[EMAIL] Failed sending to {to}: {e}")
            return False


class AlertNotifier:
    def __init__(self, email_service: EmailService, frontend_url: Optional[str] = None):
        self.email_service = email_service
        self.frontend_url = (frontend_url or settings.FRONTEND_URL).rstrip("/")

    async def notify(self, db: Session, alert: Alert) -> NotificationResult:
        try:
            user = db.query(User).filter(User.id == alert.owner_id).first()
            if not user or not user.email:
                logger.warning(f"[NOTIFY] User {alert.owner_id} has no email: alert {alert.id} not emailed")
                return NotificationResult.SKIPPED

            created = alert.created_at.strftime("%d/%m/%Y %H:%M") if alert.created_at else ""
            html = render_alert_email(
                alert_type=_value(alert.kind),
                message=alert.message,
                priority=_value(alert.priority),
                timestamp=created,
                details=(f"Título: {alert.title}\nTipo: {_value(alert.kind)}\n"
                         f"Prioridad: {_value(alert.priority)}\nFecha: {created}"),
                dashboard_url=f"{self.frontend_url}/dashboard",
                alerts_url=f"{self.frontend_url}/alerts",
            )
            sent = await self.email_service.send_email(
                to=user.email, subject=f"🚨 Alerta Crítica: {alert.title}", html=html,
            )
            return NotificationResult.SENT if sent else NotificationResult.FAILED
        except Exception as e:
            logger.error(f"[NOTIFY] Could not notify alert {alert.id}: {e}", exc_info=True)
            return NotificationResult.FAILED


def _value(member) -> str:
    return member.value if isinstance(member, enum.Enum) else str(member)
