# apigestion/templates/alert_email.py
"""HTML body for alert notification emails."""

from html import escape
from typing import Optional

_ALERT_COLORS = {
    "critical": "#dc3545",
    "high": "#fd7e14",
    "medium": "#ffc107",
    "low": "#17a2b8",
}

_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Alerta del Sistema Apícola</title>
    <style>
      body {{ font-family: Arial, sans-serif; margin: 0; padding: 20px; background-color: #f4f4f4; }}
      .container {{ max-width: 600px; margin: 0 auto; background-color: white; padding: 20px; border-radius: 8px; }}
      .header {{ background-color: {color}; color: white; padding: 15px; border-radius: 8px 8px 0 0; text-align: center; }}
      .content {{ padding: 20px; }}
      .alert-type {{ font-size: 18px; font-weight: bold; margin-bottom: 10px; }}
      .message {{ font-size: 16px; line-height: 1.5; margin-bottom: 20px; }}
      .details {{ background-color: #f8f9fa; padding: 15px; border-radius: 4px; border-left: 4px solid {color}; white-space: pre-line; }}
      .footer {{ margin-top: 20px; padding-top: 20px; border-top: 1px solid #eee; font-size: 12px; color: #666; text-align: center; }}
    </style>
  </head>
  <body>
    <div class="container">
      <div class="header"><h1>🚨 Alerta del Sistema Apícola</h1></div>
      <div class="content">
        <div class="alert-type">Tipo: {alert_type}</div>
        <div class="message">{message}</div>
        {details_block}
        <p><a href="{dashboard_url}">Ir al panel</a> · <a href="{alerts_url}">Ver alertas</a></p>
      </div>
      <div class="footer">
        Este es un mensaje automático del Sistema de Gestión Apícola.<br>
        Generado el {timestamp}. Por favor, no responda a este correo.
      </div>
    </div>
  </body>
</html>
"""


def render_alert_email(
    alert_type: str,
    message: str,
    priority: str,
    timestamp: str,
    details: Optional[str] = None,
    dashboard_url: str = "#",
    alerts_url: str = "#",
) -> str:
    details_block = (
        f'<div class="details"><strong>Detalles:</strong><br>{escape(details)}</div>' if details else ""
    )
    return _TEMPLATE.format(
        color=_ALERT_COLORS.get(priority, "#6c757d"),
        alert_type=escape(alert_type),
        message=escape(message),
        details_block=details_block,
        dashboard_url=escape(dashboard_url, quote=True),
        alerts_url=escape(alerts_url, quote=True),
        timestamp=escape(timestamp),
    )
