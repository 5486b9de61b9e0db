"""
Email Service using Resend

Transactional email for the account recovery flow. Senders never raise:
they return True on delivery and False on any failure, so callers can treat
delivery as best-effort.
"""

import asyncio
import logging
import os
from html import escape

import resend

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = os.getenv("RESEND_API_KEY")

# Configurations
EMAIL_FROM = os.getenv("EMAIL_FROM", "MahaDigital School <noreply@mahadigital.school>")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if the provider accepted the message, False otherwise
    """
    if not resend.api_key:
        logger.warning(f"RESEND_API_KEY not set - email to {to_email} not sent")
        return False

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_temp_password(
    to_email: str,
    temp_password: str,
    expiry_minutes: int,
) -> bool:
    """Send a temporary login password."""
    safe_password = escape(temp_password)
    login_url = f"{FRONTEND_URL}/login"

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1a365d; margin-bottom: 24px; }}
            .password {{ font-size: 18px; font-weight: bold; background-color: #f3f4f6; padding: 12px 16px; border-radius: 8px; display: inline-block; }}
            .warning {{ background-color: #fef3c7; border: 1px solid #f59e0b; padding: 12px 16px; border-radius: 8px; margin: 16px 0; font-size: 14px; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h2 class="header">MahaDigital School</h2>

            <p>Your temporary password is:</p>

            <p class="password"><code>{safe_password}</code></p>

            <p>This password is valid for <strong>{expiry_minutes} minutes</strong>.</p>

            <div class="warning">
                Please <a href="{login_url}">log in</a> and change your password right away.
            </div>

            <div class="footer">
                <p>If you did not request a password reset, you can ignore this email.
                Your current password still works.</p>
                <p>MahaDigital School</p>
            </div>
        </div>
    </body>
    </html>
    """

    return await send_email(
        to_email=to_email,
        subject="MahaDigital School - Temporary login password",
        html_content=html_content,
    )
