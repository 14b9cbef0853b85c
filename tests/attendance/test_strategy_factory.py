from datetime import time

from src.hr_backoffice.hr_backoffice.attendance.factory import AttendanceStrategyFactory
from src.hr_backoffice.hr_backoffice.attendance.strategies.absent_strategy import AbsentStrategy
from src.hr_backoffice.hr_backoffice.attendance.strategies.late_strategy import LateStrategy
from src.hr_backoffice.hr_backoffice.attendance.strategies.normal_strategy import NormalStrategy
from src.hr_backoffice.hr_backoffice.core.enums import AttendanceStatus


def _pick(status, time_in, shift_start=time(9, 0), grace=5):
    return AttendanceStrategyFactory().for_mark(
        status=status,
        time_in=time_in,
        shift_start=shift_start,
        grace_minutes=grace,
    )


def test_factory_present_within_grace_is_normal():
    assert isinstance(_pick(AttendanceStatus.PRESENT, time(9, 4)), NormalStrategy)


def test_factory_present_exactly_at_grace_is_normal():
    assert isinstance(_pick(AttendanceStatus.PRESENT, time(9, 5)), NormalStrategy)


def test_factory_present_after_grace_is_late():
    assert isinstance(_pick(AttendanceStatus.PRESENT, time(9, 6)), LateStrategy)


def test_factory_zero_grace_late_from_first_minute():
    assert isinstance(_pick(AttendanceStatus.PRESENT, time(9, 1), grace=0), LateStrategy)


def test_factory_no_shift_start_is_never_late():
    assert isinstance(_pick(AttendanceStatus.PRESENT, time(23, 59), shift_start=None), NormalStrategy)


def test_factory_absent_and_halfday_use_absent_strategy():
    assert isinstance(_pick(AttendanceStatus.ABSENT, time(11, 0)), AbsentStrategy)
    assert isinstance(_pick(AttendanceStatus.HALFDAY, time(11, 0)), AbsentStrategy)


def test_absent_strategy_drops_time_in_and_lateness():
    decision = AbsentStrategy().decide(status=AttendanceStatus.HALFDAY, time_in=time(11, 0))

    assert decision.status == AttendanceStatus.HALFDAY
    assert decision.time_in is None
    assert decision.is_late is False


def test_late_strategy_keeps_time_in():
    decision = LateStrategy().decide(status=AttendanceStatus.PRESENT, time_in=time(9, 30))

    assert decision.time_in == time(9, 30)
    assert decision.is_late is True
