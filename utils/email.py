# utils/email.py
import requests
import os

BREVO_URL = "https://api.brevo.com/v3/smtp/email"


class EmailDeliveryError(RuntimeError):
     pass


def send_notification_email(to_email: str, subject: str, message: str):
     brevo_key = os.getenv("BREVO_API_KEY")
     if not brevo_key:
          raise EmailDeliveryError("BREVO_API_KEY is not set")

     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": brevo_key,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": "eRents", "email": "noreply@erents.app"},
               "to": [{"email": to_email}],
               "subject": subject,
               "htmlContent": f"""
                    <h2>{subject}</h2>
                    <p>{message}</p>
               """,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise EmailDeliveryError(f"Brevo error: {response.text}")
