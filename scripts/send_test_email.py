"""
Send one email through Mailgun to check MAILGUN_* settings before enabling signups.
Usage: python scripts/send_test_email.py <to_email> [--otp]
With --otp the real verification-code template is sent (code 123456).
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import get_settings
from app.models.otp import OtpType
from app.services.email import mailgun_configured, send_email, send_otp_email


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    to_email = (args[0] if args else "").strip()
    if not to_email:
        print("Usage: python scripts/send_test_email.py <to_email> [--otp]")
        sys.exit(1)

    settings = get_settings()
    if not mailgun_configured():
        print("Mailgun is not configured. Set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env")
        print(f"  MAILGUN_API_KEY: {'(set)' if settings.mailgun_api_key else '(missing)'}")
        print(f"  MAILGUN_DOMAIN: {settings.mailgun_domain or '(missing)'}")
        sys.exit(1)

    print(f"Sending to {to_email} from {settings.mailgun_from_name} <{settings.mailgun_from_email}>")
    if "--otp" in sys.argv:
        ok = send_otp_email(to_email, "123456", OtpType.signup, settings.otp_expire_minutes)
    else:
        ok = send_email(
            to_email,
            "[EstateHub] Test email",
            "<p>This is a <strong>test email</strong> from EstateHub. Mailgun is configured correctly.</p>",
            text_content="This is a test email from EstateHub. Mailgun is configured correctly.",
        )
    if ok:
        print("Sent. Check the inbox (and spam).")
    else:
        print("Failed. Check the API key, MAILGUN_BASE_URL (EU accounts) and the sender domain.")
        sys.exit(1)


if __name__ == "__main__":
    main()
