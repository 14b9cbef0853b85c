from __future__ import annotations

import pytest

from src.hr_backoffice.hr_backoffice.common.otp_cache import ExpiringCodeCache
from src.hr_backoffice.hr_backoffice.core.enums import RequestKind, Role
from src.hr_backoffice.hr_backoffice.core.exceptions import AuthenticationError, NotFoundError
from src.hr_backoffice.hr_backoffice.notifications.service import NotificationService
from src.hr_backoffice.hr_backoffice.users.service import AuthService
from tests.fakes import ADMIN, EMPLOYEE, HR, HR_2, INACTIVE, InMemoryNotifications


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_auth_login_by_email_mobile_or_emp_id(identities):
    auth = AuthService(identities)

    assert auth.authenticate("emp@example.com", "emp12345").identity_id == EMPLOYEE
    assert auth.authenticate("EMP-001", "emp12345").role == Role.EMPLOYEE
    assert auth.authenticate("9000000001", "admin123").identity_id == ADMIN


def test_auth_wrong_password_raises(identities):
    auth = AuthService(identities)

    with pytest.raises(AuthenticationError):
        auth.authenticate("emp@example.com", "wrong")


def test_auth_identity_without_password_cannot_login(identities):
    with pytest.raises(AuthenticationError):
        AuthService(identities).authenticate("hr2@example.com", "")


def test_admin_otp_required_and_single_use(identities):
    auth = AuthService(identities, otp_required=True, code_generator=lambda: "123456")

    with pytest.raises(AuthenticationError):
        auth.authenticate("admin@example.com", "admin123")

    code = auth.send_admin_otp("9000000001")
    assert code == "123456"
    assert auth.authenticate("admin@example.com", "admin123", otp=code).identity_id == ADMIN

    with pytest.raises(AuthenticationError):
        auth.authenticate("admin@example.com", "admin123", otp=code)


def test_otp_does_not_apply_to_other_roles(identities):
    auth = AuthService(identities, otp_required=True)

    assert auth.authenticate("hr@example.com", "hr12345").identity_id == HR


def test_send_otp_only_for_admins(identities):
    with pytest.raises(NotFoundError):
        AuthService(identities).send_admin_otp("emp@example.com")


def test_code_cache_expires():
    clock = FakeClock()
    cache = ExpiringCodeCache(clock=clock)
    cache.set("1", "4242", ttl=300)

    clock.now += 301

    assert cache.verify_and_consume("1", "4242") is False


def test_code_cache_wrong_code_does_not_consume():
    cache = ExpiringCodeCache(clock=FakeClock())
    cache.set("1", "4242", ttl=300)

    assert cache.verify_and_consume("1", "0000") is False
    assert cache.verify_and_consume("1", "4242") is True
    assert cache.verify_and_consume("1", "4242") is False


def test_notify_role_fans_out_to_active_identities(identities):
    repo = InMemoryNotifications()
    svc = NotificationService(repo, identities)

    created = svc.notify_role(role=Role.HR, kind=RequestKind.LEAVE, message="new", related_request_id=7)

    assert sorted(n.recipient_id for n in created) == [HR, HR_2]


def test_notifications_only_marked_by_recipient(identities):
    repo = InMemoryNotifications()
    svc = NotificationService(repo, identities)
    n = svc.notify(recipient_id=EMPLOYEE, kind=RequestKind.ADVANCE, message="approved", related_request_id=3)

    with pytest.raises(NotFoundError):
        svc.mark_seen(notification_id=n.notification_id, recipient_id=INACTIVE)

    svc.mark_seen(notification_id=n.notification_id, recipient_id=EMPLOYEE)
    assert svc.list_unseen(recipient_id=EMPLOYEE) == []


def test_retire_marks_request_notifications_seen(identities):
    repo = InMemoryNotifications()
    svc = NotificationService(repo, identities)
    svc.notify(recipient_id=EMPLOYEE, kind=RequestKind.LEAVE, message="a", related_request_id=1)
    svc.notify(recipient_id=HR, kind=RequestKind.LEAVE, message="b", related_request_id=1)
    svc.notify(recipient_id=HR, kind=RequestKind.ADVANCE, message="c", related_request_id=1)

    assert svc.retire_for_request(kind=RequestKind.LEAVE, related_request_id=1) == 2
    assert [n.message for n in svc.list_unseen(recipient_id=HR)] == ["c"]
