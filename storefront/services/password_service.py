import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.exceptions import EmailDeliveryError, NotFoundError, ValidationError
from storefront.core.security import generate_reset_token, get_password_hash, hash_reset_token
from storefront.models.user import User
from storefront.services.email_service import EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)

RESET_EMAIL_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1>Password Reset Request</h1>
  <p>You have requested to reset your password. Use the link below to set a new password:</p>
  <p><a href="{url}">Reset Password</a></p>
  <p>{url}</p>
  <p>This link is valid for {minutes} minutes only.</p>
  <p>If you did not request this password reset, please ignore this email.</p>
</div>
"""


def build_reset_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password/{token}"


def request_password_reset(db: Session, email: str, sender: EmailSender) -> None:
    """Issue a reset token for ``email`` and mail the reset link.

    Only the sha256 of the token is stored. If the email cannot be delivered
    the stored token is cleared again and EmailDeliveryError propagates.
    """
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundError("User", email)

    token, token_hash = generate_reset_token()
    user.reset_password_token = token_hash
    user.reset_password_expire = datetime.utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    url = build_reset_url(token)
    try:
        sender.send(
            OutgoingEmail(
                to=user.email,
                subject="Password Reset Request",
                html=RESET_EMAIL_TEMPLATE.format(url=url, minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
            )
        )
    except EmailDeliveryError:
        logger.exception("Reset email to user %s failed; clearing token", user.id)
        user.reset_password_token = None
        user.reset_password_expire = None
        db.commit()
        raise

    logger.info("Password reset email sent to user %s", user.id)


def reset_password(db: Session, token: str, password: str) -> User:
    if not password:
        raise ValidationError("Password is required", details={"field": "password"})
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
            details={"field": "password"},
        )

    user = (
        db.query(User)
        .filter(
            User.reset_password_token == hash_reset_token(token),
            User.reset_password_expire > datetime.utcnow(),
        )
        .first()
    )
    if not user:
        raise ValidationError("Invalid or expired token. Please request a new password reset.")

    user.hashed_password = get_password_hash(password)
    user.reset_password_token = None
    user.reset_password_expire = None
    db.commit()
    db.refresh(user)
    logger.info("Password reset for user %s", user.id)
    return user
