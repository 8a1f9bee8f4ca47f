"""
Tests for in-app notifications and the optional Brevo email delivery.
"""
import pytest
import requests

from models import Notification
from services.exceptions import NotFoundError, UnauthorizedError
from services.notification_service import NotificationService
from tests.conftest import as_current
from utils import email as email_module
from utils.email import EmailDeliveryError, send_notification_email


class FakeResponse:
    def __init__(self, status_code=201, text=""):
        self.status_code = status_code
        self.text = text


class TestNotificationService:
    def test_create_and_list(self, db, tenant_user):
        NotificationService.create_notification(db, tenant_user.id, "Hello", "First", "info")
        second = NotificationService.create_notification(db, tenant_user.id, "Hello", "Second", "info", 7)

        notifications = NotificationService.list_for_user(db, as_current(tenant_user))

        assert len(notifications) == 2
        assert second.reference_id == 7
        assert all(not n.is_read for n in notifications)

    def test_mark_as_read(self, db, tenant_user):
        notification = NotificationService.create_notification(db, tenant_user.id, "Hi", "Msg", "info")

        NotificationService.mark_as_read(db, notification.id, as_current(tenant_user))

        assert notification.is_read is True
        assert NotificationService.list_for_user(db, as_current(tenant_user), unread_only=True) == []

    def test_cannot_read_someone_elses(self, db, tenant_user, other_user):
        notification = NotificationService.create_notification(db, tenant_user.id, "Hi", "Msg", "info")

        with pytest.raises(UnauthorizedError):
            NotificationService.mark_as_read(db, notification.id, as_current(other_user))

    def test_missing_notification(self, db, tenant_user):
        with pytest.raises(NotFoundError):
            NotificationService.mark_as_read(db, 999, as_current(tenant_user))


class TestEmailDelivery:
    def test_emails_sent_when_enabled(self, db, tenant_user, monkeypatch):
        sent = []

        def fake_post(url, headers=None, json=None, timeout=None):
            sent.append(json)
            return FakeResponse(201)

        monkeypatch.setenv("NOTIFICATION_EMAILS_ENABLED", "true")
        monkeypatch.setenv("BREVO_API_KEY", "key")
        monkeypatch.setattr(email_module.requests, "post", fake_post)

        NotificationService.create_notification(db, tenant_user.id, "Approved", "Your request", "info")

        assert len(sent) == 1
        assert sent[0]["to"] == [{"email": "tenant@example.com"}]
        assert sent[0]["subject"] == "Approved"

    def test_email_failure_keeps_notification(self, db, tenant_user, monkeypatch):
        def failing_post(*args, **kwargs):
            raise requests.ConnectionError("down")

        monkeypatch.setenv("NOTIFICATION_EMAILS_ENABLED", "true")
        monkeypatch.setenv("BREVO_API_KEY", "key")
        monkeypatch.setattr(email_module.requests, "post", failing_post)

        NotificationService.create_notification(db, tenant_user.id, "Approved", "Your request", "info")

        assert db.query(Notification).filter(Notification.user_id == tenant_user.id).count() == 1

    def test_no_email_when_disabled(self, db, tenant_user, monkeypatch):
        def unexpected_post(*args, **kwargs):
            raise AssertionError("email should not be sent")

        monkeypatch.setattr(email_module.requests, "post", unexpected_post)

        NotificationService.create_notification(db, tenant_user.id, "Approved", "Your request", "info")

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("BREVO_API_KEY", raising=False)

        with pytest.raises(EmailDeliveryError):
            send_notification_email("a@example.com", "Subject", "Body")

    def test_provider_error(self, monkeypatch):
        monkeypatch.setenv("BREVO_API_KEY", "key")
        monkeypatch.setattr(email_module.requests, "post", lambda *a, **kw: FakeResponse(400, "bad sender"))

        with pytest.raises(EmailDeliveryError, match="bad sender"):
            send_notification_email("a@example.com", "Subject", "Body")
