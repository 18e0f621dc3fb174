import smtplib
from email.message import EmailMessage

from config import GMAIL_USER, GMAIL_PASS, MAIL_FROM, SMTP_HOST, SMTP_PORT
from utils.logger import setup_api_logger

logger = setup_api_logger()


def build_trip_creation_email(user_email: str, user_name: str, trip_description: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = MAIL_FROM
    msg["To"] = user_email
    msg["Subject"] = "Trip Created Successfully"
    msg.set_content(
        f"Trip has been created for {user_name},\n\n"
        f"Description & Safety Tips: {trip_description}\n\n"
        "Thank you for using our service!"
    )
    return msg


def send_trip_creation_email(user_email: str, user_name: str, trip_description: str) -> bool:
    """Send the trip creation notice. Returns False instead of raising."""
    if not GMAIL_USER or not GMAIL_PASS:
        logger.info("Mail credentials not configured; skipping trip email to %s", user_email)
        return False

    msg = build_trip_creation_email(user_email, user_name, trip_description)
    try:
        with smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, timeout=10) as smtp:
            smtp.login(GMAIL_USER, GMAIL_PASS)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Error sending trip email to %s: %s", user_email, e)
        return False

    logger.info("Trip creation email sent to %s", user_email)
    return True
