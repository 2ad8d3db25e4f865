from datetime import datetime, timedelta

import pytest

from storefront.core.exceptions import EmailDeliveryError, NotFoundError, ValidationError
from storefront.core.security import get_password_hash, hash_reset_token, verify_password
from storefront.models.user import User
from storefront.services.password_service import request_password_reset, reset_password


@pytest.fixture()
def member(db):
    user = User(username="member", email="member@example.com", hashed_password=get_password_hash("old-pass"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _token_from(email):
    # reset link is ".../reset-password/<token>"
    marker = "/reset-password/"
    start = email.html.index(marker) + len(marker)
    end = email.html.index('"', start)
    return email.html[start:end]


def test_forgot_password_stores_hash_and_mails_link(db, member, email_sender):
    request_password_reset(db, "member@example.com", email_sender)

    assert len(email_sender.sent) == 1
    sent = email_sender.sent[0]
    assert sent.to == "member@example.com"

    token = _token_from(sent)
    assert len(token) == 64
    db.refresh(member)
    assert member.reset_password_token == hash_reset_token(token)
    assert member.reset_password_token != token
    assert member.reset_password_expire > datetime.utcnow() + timedelta(minutes=14)


def test_forgot_password_unknown_email(db, email_sender):
    with pytest.raises(NotFoundError):
        request_password_reset(db, "nobody@example.com", email_sender)
    assert email_sender.sent == []


def test_failed_email_clears_token(db, member, email_sender):
    email_sender.fail_with = EmailDeliveryError("smtp down")

    with pytest.raises(EmailDeliveryError):
        request_password_reset(db, "member@example.com", email_sender)

    db.refresh(member)
    assert member.reset_password_token is None
    assert member.reset_password_expire is None


def test_reset_password_with_valid_token(db, member, email_sender):
    request_password_reset(db, "member@example.com", email_sender)
    token = _token_from(email_sender.sent[0])

    user = reset_password(db, token, "new-secret")

    assert verify_password("new-secret", user.hashed_password)
    assert user.reset_password_token is None
    # token is single use
    with pytest.raises(ValidationError):
        reset_password(db, token, "another-one")


def test_reset_password_rejects_short_password(db, member, email_sender):
    request_password_reset(db, "member@example.com", email_sender)
    token = _token_from(email_sender.sent[0])

    with pytest.raises(ValidationError):
        reset_password(db, token, "12345")


def test_reset_password_rejects_expired_token(db, member):
    member.reset_password_token = hash_reset_token("stale")
    member.reset_password_expire = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    with pytest.raises(ValidationError):
        reset_password(db, "stale", "long-enough")
