"""Outbound email via the Mailgun HTTP API.

Every sender returns True only when Mailgun accepted the message. Missing
credentials are a failure (logged), never a silent skip; callers decide whether
that is fatal.
"""
import logging
from html import escape

import httpx

from app.config import get_settings
from app.models.otp import OtpType

log = logging.getLogger("uvicorn.error")

MAILGUN_US_BASE = "https://api.mailgun.net"
MAILGUN_EU_BASE = "https://api.eu.mailgun.net"
MAILGUN_TIMEOUT_SECONDS = 10.0


def mailgun_configured() -> bool:
    s = get_settings()
    return bool(s.mailgun_api_key and s.mailgun_domain)


def send_email(to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
    settings = get_settings()
    if not mailgun_configured():
        log.warning(
            "[Email] NOT SENT: to=%s subject=%s. MAILGUN_API_KEY=%s MAILGUN_DOMAIN=%s",
            to_email,
            subject,
            "set" if settings.mailgun_api_key else "MISSING",
            "set" if settings.mailgun_domain else "MISSING",
        )
        return False

    base = (settings.mailgun_base_url or MAILGUN_US_BASE).rstrip("/")
    domain = settings.mailgun_domain.lower()
    from_addr = settings.mailgun_from_email
    from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
    if from_domain != domain:
        # Mailgun drops mail whose sender domain differs from the sending domain
        from_addr = f"noreply@{domain}"
    data = {
        "from": f"{settings.mailgun_from_name} <{from_addr}>",
        "to": to_email,
        "subject": subject,
        "text": text_content or "",
        "html": html_content or "",
    }
    auth = ("api", settings.mailgun_api_key)
    try:
        with httpx.Client(timeout=MAILGUN_TIMEOUT_SECONDS) as client:
            r = client.post(f"{base}/v3/{domain}/messages", auth=auth, data=data)
            if r.status_code == 401 and base == MAILGUN_US_BASE:
                log.info("[Mailgun] 401 with US endpoint, retrying EU endpoint")
                r = client.post(f"{MAILGUN_EU_BASE}/v3/{domain}/messages", auth=auth, data=data)
    except httpx.HTTPError as e:
        log.warning("[Mailgun] Request error: to=%s error=%s: %s", to_email, type(e).__name__, e)
        return False
    if 200 <= r.status_code < 300:
        log.info("[Mailgun] Sent: to=%s subject=%s", to_email, subject)
        return True
    log.warning("[Mailgun] API failed: status=%s to=%s body=%s", r.status_code, to_email, r.text[:500])
    return False


def send_otp_email(to_email: str, code: str, otp_type: OtpType, expires_minutes: int) -> bool:
    if otp_type == OtpType.password_reset:
        subject = "[EstateHub] Your password reset code"
        purpose = "reset your password"
    else:
        subject = "[EstateHub] Your verification code"
        purpose = "verify your email address"
    text = f"Use code {code} to {purpose}. It expires in {expires_minutes} minutes."
    html = f"""
    <p>Hello,</p>
    <p>Use this code to {purpose}: <strong style="font-size:1.2em;letter-spacing:0.2em;">{code}</strong></p>
    <p>This code expires in {expires_minutes} minutes. If you did not request it, you can ignore this email.</p>
    <p>— EstateHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_welcome_email(to_email: str, name: str | None = None) -> bool:
    name = escape((name or "").strip() or "there")
    subject = "[EstateHub] Welcome – your account is verified"
    text = f"Hi {name}, welcome to EstateHub. Your email is verified and you can now sign in."
    html = f"""
    <p>Hi {name},</p>
    <p>Welcome to <strong>EstateHub</strong>. Your email is verified and you can now sign in to your dashboard.</p>
    <p>— EstateHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_account_approval_email(to_email: str, name: str, role: str, rera_id: str) -> bool:
    """Vendor/broker application approved; the account exists from now on."""
    name = escape((name or "").strip() or "there")
    role_label = role.capitalize()
    subject = f"[EstateHub] Your {role_label} account has been approved"
    text = (
        f"Hi {name}, your {role_label} application (RERA ID {rera_id}) has been approved. "
        "You can now sign in with the email and password you registered with."
    )
    html = f"""
    <p>Hi {name},</p>
    <p>Your <strong>{role_label}</strong> application has been reviewed and <strong>approved</strong>.</p>
    <p><strong>RERA ID:</strong> {escape(rera_id)}</p>
    <p>You can now sign in with the email and password you registered with.</p>
    <p>— EstateHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)


def send_account_rejection_email(to_email: str, name: str, role: str, rera_id: str, reason: str) -> bool:
    name = escape((name or "").strip() or "there")
    role_label = role.capitalize()
    subject = f"[EstateHub] Update on your {role_label} application"
    text = (
        f"Hi {name}, your {role_label} application (RERA ID {rera_id}) was not approved. "
        f"Reason: {reason}"
    )
    html = f"""
    <p>Hi {name},</p>
    <p>Your <strong>{role_label}</strong> application (RERA ID {escape(rera_id)}) was <strong>not approved</strong>.</p>
    <p><strong>Reason:</strong> {escape(reason)}</p>
    <p>You may submit a new application once the issue above is resolved.</p>
    <p>— EstateHub</p>
    """
    return send_email(to_email, subject, html, text_content=text)
