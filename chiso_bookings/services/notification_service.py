import html
from datetime import datetime
from typing import List, Optional, Tuple

import requests
from pydantic import BaseModel

from chiso_bookings.core.config import settings
from chiso_bookings.core.config_loader import load_restaurant_config
from chiso_bookings.core.logger import logger
from chiso_bookings.models.booking import StoredBooking

NOT_CONFIGURED_ERROR = (
    "Email service not configured. Please contact Chef Chiso directly "
    "to receive your confirmation email."
)


class EmailResult(BaseModel):
    sent: bool
    error: Optional[str] = None


def format_long_date(value: str) -> str:
    """'2025-03-07' -> 'Friday, March 7, 2025'"""
    try:
        d = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return value
    return f"{d:%A, %B} {d.day}, {d.year}"


def _menu_lines(booking: StoredBooking) -> List[Tuple[str, str]]:
    prefs = booking.preferences
    lines = []
    if prefs.pancake_type:
        lines.append(("Pancakes", prefs.pancake_type))
    if prefs.egg_style and prefs.egg_style != "none":
        lines.append(("Eggs", prefs.egg_style))
    if prefs.meat and prefs.meat != "none":
        lines.append(("Meat", prefs.meat))
    if prefs.sides:
        lines.append(("Sides", ", ".join(prefs.sides)))
    if prefs.additions:
        lines.append(("Additions", ", ".join(prefs.additions)))
    return lines


def render_text_body(booking: StoredBooking, restaurant_name: str) -> str:
    menu = "\n".join(f"- {label}: {value}" for label, value in _menu_lines(booking)) or "- No selections"
    return (
        f"Dear {booking.name},\n\n"
        f"Thank you for booking with {restaurant_name}! Here are your booking details:\n\n"
        f"Date: {format_long_date(booking.date)}\n"
        f"Time: {booking.time}\n"
        f"Party Size: {booking.party_size}\n\n"
        f"Menu Selections:\n{menu}\n\n"
        f"Confirmation ID: {booking.id}\n\n"
        "Please keep this confirmation ID for your records. If you need to make any "
        "changes to your booking, please contact us with this ID.\n\n"
        f"Best regards,\n{restaurant_name}"
    )


def render_html_body(booking: StoredBooking, restaurant_name: str) -> str:
    e = html.escape
    item = '<li style="margin: 10px 0;"><strong>{label}:</strong> {value}</li>'
    details = "".join([
        item.format(label="Date", value=e(format_long_date(booking.date))),
        item.format(label="Time", value=e(booking.time)),
        item.format(label="Number of Guests", value=booking.party_size),
    ])
    menu = "".join(item.format(label=e(label), value=e(value)) for label, value in _menu_lines(booking))

    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #2d3748; border-bottom: 2px solid #4a5568; padding-bottom: 10px;">Booking Confirmation</h1>
  <p style="color: #4a5568;">Dear {e(booking.name)},</p>
  <p style="color: #4a5568;">Your booking has been confirmed! Here are your booking details:</p>
  <div style="background-color: #f7fafc; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h2 style="color: #2d3748; margin-top: 0;">Booking Details</h2>
    <ul style="list-style: none; padding: 0;">{details}</ul>
    <h3 style="color: #2d3748; margin-top: 20px;">Menu Selections</h3>
    <ul style="list-style: none; padding: 0;">{menu}</ul>
  </div>
  <p style="color: #4a5568;"><strong>Booking ID:</strong> {e(booking.id)}</p>
  <p style="color: #4a5568;">Thank you for choosing {e(restaurant_name)}! We're looking forward to serving you.</p>
</div>
"""


def send_confirmation_email(booking: StoredBooking) -> EmailResult:
    """
    Sends the booking confirmation through the Resend HTTP API.
    Never raises: every failure comes back as EmailResult(sent=False, error=...).
    """
    if not settings.RESEND_API_KEY:
        logger.warning("⚠️ RESEND_API_KEY missing, confirmation email skipped.")
        return EmailResult(sent=False, error=NOT_CONFIGURED_ERROR)

    restaurant_name = load_restaurant_config().restaurant_name
    payload = {
        "from": settings.EMAIL_FROM,
        "reply_to": settings.EMAIL_REPLY_TO,
        "to": booking.email,
        "subject": f"Booking Confirmation - {restaurant_name}",
        "html": render_html_body(booking, restaurant_name),
        "text": render_text_body(booking, restaurant_name),
    }
    headers = {
        "Authorization": f"Bearer {settings.RESEND_API_KEY}",
        "Content-Type": "application/json",
    }

    try:
        logger.info(f"📤 Sending confirmation for {booking.id} to {booking.email}...")
        response = requests.post(settings.RESEND_API_URL, json=payload, headers=headers, timeout=settings.EMAIL_TIMEOUT)

        if 200 <= response.status_code < 300:
            logger.info(f"✅ Confirmation email sent to {booking.email}.")
            return EmailResult(sent=True)

        logger.error(f"❌ Resend Error {response.status_code}: {response.text}")
        return EmailResult(sent=False, error=f"Failed to send confirmation email ({response.status_code})")

    except requests.RequestException as e:
        logger.error(f"❌ Exception sending confirmation email: {e}")
        return EmailResult(sent=False, error=f"Failed to send confirmation email: {e}")
