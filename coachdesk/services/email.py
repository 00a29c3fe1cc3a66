"""
Outbound email through the SendGrid v3 HTTP API.

``send_email`` never raises: a missing API key or a failed call is logged and
reported as ``False`` so callers can fire and forget.
"""
import logging
from email.utils import parseaddr
from html import escape

import requests
from flask import current_app

logger = logging.getLogger(__name__)

BRAND_COLOR = "#f97316"


def send_email(to, subject, html):
    api_key = current_app.config.get('SENDGRID_API_KEY')
    if not api_key:
        logger.warning("SENDGRID_API_KEY not set, skipping email")
        return False

    from_name, from_email = parseaddr(current_app.config['EMAIL_FROM'])
    payload = {
        "personalizations": [{"to": [{"email": to}]}],
        "from": {"email": from_email, "name": from_name} if from_name else {"email": from_email},
        "subject": subject,
        "content": [{"type": "text/html", "value": html}],
    }

    try:
        response = requests.post(
            current_app.config['SENDGRID_API_URL'],
            json=payload,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=current_app.config.get('EMAIL_TIMEOUT_SECONDS', 10),
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to send \"{subject}\" to {to}: {e}")
        return False

    logger.info(f"Sent \"{subject}\" to {to}")
    return True


def branded_email_html(body):
    return f"""
    <div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; max-width: 600px; margin: 0 auto;">
      <div style="background-color: {BRAND_COLOR}; padding: 24px; text-align: center;">
        <h1 style="color: white; margin: 0; font-size: 24px;">Cannoli Trainer</h1>
      </div>
      <div style="padding: 32px 24px;">
        {body}
      </div>
      <div style="background-color: #f3f4f6; padding: 16px 24px; text-align: center;">
        <p style="font-size: 12px; color: #9ca3af; margin: 0;">Cannoli Trainer &mdash; Cannoli Strength</p>
      </div>
    </div>
    """


def email_cta_button(label, url):
    return f"""
    <div style="text-align: center; margin: 32px 0;">
      <a href="{escape(url, quote=True)}" style="background-color: {BRAND_COLOR}; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; font-size: 16px; font-weight: 600; display: inline-block;">
        {escape(label)}
      </a>
    </div>
    """


def paragraph(text, muted=False):
    color = "#6b7280" if muted else "#1f2937"
    size = 14 if muted else 16
    return f'<p style="font-size: {size}px; color: {color};">{text}</p>'
