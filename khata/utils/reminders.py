# khata/utils/reminders.py
import re
from urllib.parse import quote

from khata.utils.decimal_utils import to_decimal


def format_rupees(amount) -> str:
    value = to_decimal(amount)
    text = f"{value:,.2f}"
    return text[:-3] if text.endswith(".00") else text


def build_reminder_message(name: str, pending) -> str:
    return (
        f"Dear {name}, your payment of ₹{format_rupees(pending)} is pending. "
        "Kindly pay at the earliest. Thank you!"
    )


def whatsapp_link(phone: str, message: str) -> str | None:
    """wa.me deep link; None when the customer has no usable phone number."""
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        return None
    return f"https://wa.me/{digits}?text={quote(message)}"
