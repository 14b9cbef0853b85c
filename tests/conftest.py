from __future__ import annotations

from datetime import datetime

import pytest

from src.hr_backoffice.hr_backoffice.container import assemble
from tests.fakes import (
    InMemoryAttendance,
    InMemoryIdentities,
    InMemoryNotifications,
    InMemoryRequests,
    standard_roster,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 9, 6, 0)


@pytest.fixture
def identities() -> InMemoryIdentities:
    return InMemoryIdentities(standard_roster())


@pytest.fixture
def attendance_repo(identities) -> InMemoryAttendance:
    return InMemoryAttendance(identities)


@pytest.fixture
def requests_repo(identities) -> InMemoryRequests:
    return InMemoryRequests(identities)


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def container(identities, attendance_repo, requests_repo, notifications_repo):
    return assemble(
        identities_repo=identities,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
    )
