from datetime import datetime, timedelta, timezone

import aiosmtplib
import pytest
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import verify_password
from app.db.models.password_reset_token import PasswordResetToken as PasswordResetTokenModel
from app.repositories.user import get_user_by_id

RESET_URL = "https://frontend.example.com/reset"
STATIC_TOKEN = "tokentokentokentokentoke"


@pytest.fixture(scope="function")
def smtp_outbox(monkeypatch) -> list:
    """Configure SMTP and capture outgoing messages instead of sending them."""
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_port", 587)
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "secret")
    monkeypatch.setattr(settings, "smtp_from_email", "no-reply@roleplay.com")

    outbox = []

    async def fake_send(message, **kwargs):
        outbox.append((message, kwargs))

    monkeypatch.setattr("app.services.email.aiosmtplib.send", fake_send)
    return outbox


def _add_token(db: Session, user_id: int, token: str = STATIC_TOKEN, age: timedelta = timedelta(0)):
    row = PasswordResetTokenModel(
        user_id=user_id,
        token=token,
        created_at=datetime.now(timezone.utc) - age,
    )
    db.add(row)
    db.commit()
    return row


def _plain_body(message) -> str:
    plain = message.get_payload()[0]
    return plain.get_payload(decode=True).decode()


# ============================================================================
# FORGOT PASSWORD TESTS
# ============================================================================


def test_forgot_password_sends_email(client, user_dict: dict, smtp_outbox: list):
    response = client.post(
        "/api/v1/forgot-password",
        json={"email": user_dict["email"], "reset_password_url": RESET_URL},
    )
    assert response.status_code == 204

    assert len(smtp_outbox) == 1
    message, kwargs = smtp_outbox[0]
    assert message["Subject"] == "Roleplay: Reset your password"
    assert message["To"] == user_dict["email"]
    assert message["From"] == "no-reply@roleplay.com"
    assert kwargs["start_tls"] is True
    body = _plain_body(message)
    assert user_dict["username"] in body
    assert f"{RESET_URL}?token=" in body


def test_forgot_password_creates_token(client, db: Session, user_dict: dict):
    response = client.post(
        "/api/v1/forgot-password",
        json={"email": user_dict["email"], "reset_password_url": RESET_URL},
    )
    assert response.status_code == 204

    rows = db.query(PasswordResetTokenModel).filter_by(user_id=user_dict["id"]).all()
    assert len(rows) == 1
    assert len(rows[0].token) == 48
    int(rows[0].token, 16)


def test_forgot_password_link_carries_stored_token(
    client, db: Session, user_dict: dict, smtp_outbox: list
):
    client.post(
        "/api/v1/forgot-password",
        json={"email": user_dict["email"], "reset_password_url": RESET_URL},
    )
    row = db.query(PasswordResetTokenModel).filter_by(user_id=user_dict["id"]).one()
    assert f"{RESET_URL}?token={row.token}" in _plain_body(smtp_outbox[0][0])


def test_forgot_password_twice_keeps_only_latest_token(client, db: Session, user_dict: dict):
    payload = {"email": user_dict["email"], "reset_password_url": RESET_URL}

    client.post("/api/v1/forgot-password", json=payload)
    first = db.query(PasswordResetTokenModel).filter_by(user_id=user_dict["id"]).one().token

    client.post("/api/v1/forgot-password", json=payload)
    db.expire_all()
    rows = db.query(PasswordResetTokenModel).filter_by(user_id=user_dict["id"]).all()
    assert len(rows) == 1
    second = rows[0].token
    assert second != first

    stale = client.post("/api/v1/reset-password", json={"token": first, "password": "new-password"})
    assert stale.status_code == 404

    fresh = client.post("/api/v1/reset-password", json={"token": second, "password": "new-password"})
    assert fresh.status_code == 204


def test_forgot_password_unknown_email(client):
    response = client.post(
        "/api/v1/forgot-password",
        json={"email": "nobody@example.com", "reset_password_url": RESET_URL},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_forgot_password_missing_data(client):
    response = client.post("/api/v1/forgot-password", json={})
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["status"] == 422


def test_forgot_password_succeeds_without_smtp(client, db: Session, user_dict: dict):
    """SMTP is unconfigured in tests: the failure is logged, the request still succeeds."""
    response = client.post(
        "/api/v1/forgot-password",
        json={"email": user_dict["email"], "reset_password_url": RESET_URL},
    )
    assert response.status_code == 204
    assert db.query(PasswordResetTokenModel).filter_by(user_id=user_dict["id"]).count() == 1


def test_forgot_password_succeeds_when_smtp_fails(
    client, monkeypatch, user_dict: dict, smtp_outbox: list
):
    async def failing_send(message, **kwargs):
        raise aiosmtplib.SMTPException("connection refused")

    monkeypatch.setattr("app.services.email.aiosmtplib.send", failing_send)

    response = client.post(
        "/api/v1/forgot-password",
        json={"email": user_dict["email"], "reset_password_url": RESET_URL},
    )
    assert response.status_code == 204


# ============================================================================
# RESET PASSWORD TESTS
# ============================================================================


def test_reset_password_success(client, db: Session, user_dict: dict):
    _add_token(db, user_dict["id"])

    response = client.post(
        "/api/v1/reset-password", json={"token": STATIC_TOKEN, "password": "new-password"}
    )
    assert response.status_code == 204

    user = get_user_by_id(db, user_dict["id"])
    db.refresh(user)
    assert verify_password("new-password", user.password_hash)
    assert db.query(PasswordResetTokenModel).count() == 0


def test_reset_password_new_password_works_for_login(client, db: Session, user_dict: dict):
    _add_token(db, user_dict["id"])
    client.post("/api/v1/reset-password", json={"token": STATIC_TOKEN, "password": "new-password"})

    old = client.post(
        "/api/v1/sessions", json={"email": user_dict["email"], "password": user_dict["password"]}
    )
    new = client.post(
        "/api/v1/sessions", json={"email": user_dict["email"], "password": "new-password"}
    )
    assert old.status_code == 400
    assert new.status_code == 201


def test_reset_password_same_token_twice(client, db: Session, user_dict: dict):
    _add_token(db, user_dict["id"])
    payload = {"token": STATIC_TOKEN, "password": "new-password"}

    assert client.post("/api/v1/reset-password", json=payload).status_code == 204

    response = client.post("/api/v1/reset-password", json=payload)
    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "NOT_FOUND"
    assert body["status"] == 404


def test_reset_password_unknown_token(client):
    response = client.post(
        "/api/v1/reset-password", json={"token": "does-not-exist", "password": "new-password"}
    )
    assert response.status_code == 404


def test_reset_password_expired_token(client, db: Session, user_dict: dict):
    """A token older than two hours is gone (410), not missing (404), and is kept."""
    _add_token(db, user_dict["id"], age=timedelta(hours=2, minutes=1))
    payload = {"token": STATIC_TOKEN, "password": "new-password"}

    response = client.post("/api/v1/reset-password", json=payload)
    assert response.status_code == 410
    body = response.json()
    assert body["code"] == "TOKEN_EXPIRED"
    assert body["status"] == 410
    assert body["detail"] == "token has expired"

    assert db.query(PasswordResetTokenModel).count() == 1
    again = client.post("/api/v1/reset-password", json=payload)
    assert again.status_code == 410

    user = get_user_by_id(db, user_dict["id"])
    db.refresh(user)
    assert verify_password(user_dict["password"], user.password_hash)


def test_reset_password_token_just_inside_window(client, db: Session, user_dict: dict):
    _add_token(db, user_dict["id"], age=timedelta(hours=1, minutes=59))
    response = client.post(
        "/api/v1/reset-password", json={"token": STATIC_TOKEN, "password": "new-password"}
    )
    assert response.status_code == 204


def test_reset_password_missing_data(client):
    response = client.post("/api/v1/reset-password", json={})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_reset_password_short_password(client, db: Session, user_dict: dict):
    _add_token(db, user_dict["id"])
    response = client.post(
        "/api/v1/reset-password", json={"token": STATIC_TOKEN, "password": "123"}
    )
    assert response.status_code == 422
    assert db.query(PasswordResetTokenModel).count() == 1
