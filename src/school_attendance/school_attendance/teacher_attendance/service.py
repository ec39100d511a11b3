from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Optional

from ..attendance.policy import require_staff
from ..common.datetime_utils import Clock, now_local
from ..common.pagination import Pagination
from ..common.qr import school_checkin_token
from ..core.constants import DEFAULT_TEACHER_CHECKIN_CUTOFF, DEFAULT_TEACHER_PAGE_LIMIT
from ..core.enums import Role, TeacherAttendanceStatus
from ..core.exceptions import AuthorizationError, ConflictError, DuplicateRecordError, NotFoundError, ValidationError
from ..users.model import Actor
from ..users.repository import UserRepository
from .factory import CheckinStrategyFactory
from .model import ScanResult, TeacherAttendanceRecord
from .repository import TeacherAttendanceRepository

logger = logging.getLogger(__name__)

ALREADY_DONE_MESSAGE = "Already checked in and out today."
NO_RECORDS_MESSAGE = "No attendance records found for today."


def require_admin(actor: Actor) -> int:
    if actor.role != Role.ADMIN or actor.school_id is None:
        raise AuthorizationError()
    return int(actor.school_id)


class TeacherAttendanceService:
    """Teacher check-in/check-out by scanning the school's QR code, plus admin views.

    The first scan of a day checks in (present up to the cutoff, late after),
    the second checks out, a third is rejected.
    """

    def __init__(
        self,
        records: TeacherAttendanceRepository,
        users: UserRepository,
        *,
        qr_token: str,
        checkin_cutoff: time = DEFAULT_TEACHER_CHECKIN_CUTOFF,
        strategy_factory: Optional[CheckinStrategyFactory] = None,
        clock: Clock = now_local,
    ):
        self._records = records
        self._users = users
        self._qr_token = qr_token
        self._cutoff = checkin_cutoff
        self._factory = strategy_factory or CheckinStrategyFactory()
        self._clock = clock

    def checkin_token(self, actor: Actor) -> str:
        return school_checkin_token(self._qr_token, require_admin(actor))

    def scan(self, actor: Actor, scanned_code: Optional[str]) -> ScanResult:
        school_id = require_staff(actor)

        code = (scanned_code or "").strip()
        if not code:
            raise ValidationError("QR code is required", field="qr_code")
        if code != school_checkin_token(self._qr_token, school_id):
            raise ValidationError("Invalid QR code", field="qr_code")

        user = self._users.get_by_id(actor.user_id)
        if not user or user.is_deleted or user.school_id is None or int(user.school_id) != school_id:
            raise NotFoundError("User not found")

        now = self._clock()
        today = now.date()

        record = self._records.get_for_user_and_date(user.user_id, today)
        if record is None:
            decision = self._factory.for_checkin(now=now, cutoff=self._cutoff).decide_checkin(now=now, cutoff=self._cutoff)
            try:
                record_id = self._records.create_checkin(
                    user_id=user.user_id,
                    school_id=school_id,
                    work_date=today,
                    check_in_time=now,
                    status=decision.status,
                    name=user.name,
                )
            except DuplicateRecordError:
                logger.warning("Concurrent check-in for teacher %s on %s", user.user_id, today)
                raise ConflictError("Check-in was recorded concurrently, please scan again")
            logger.info("Teacher %s checked in on %s (%s)", user.user_id, today, decision.status.value)
            record = TeacherAttendanceRecord(
                record_id=record_id,
                user_id=user.user_id,
                school_id=school_id,
                work_date=today,
                check_in_time=now,
                check_out_time=None,
                status=decision.status,
                name=user.name,
                created_at=now,
            )
            return ScanResult(kind="checkin", record=record)

        if record.check_out_time is not None:
            raise ValidationError(ALREADY_DONE_MESSAGE)

        if not self._records.update_checkout(record_id=record.record_id, check_out_time=now):
            raise ConflictError("Attendance was changed concurrently, please retry")

        logger.info("Teacher %s checked out on %s", user.user_id, today)
        return ScanResult(kind="checkout", record=replace(record, check_out_time=now))

    def list_records(
        self,
        actor: Actor,
        *,
        name: Optional[str] = None,
        work_date: Optional[date] = None,
        page: int = 1,
        limit: int = DEFAULT_TEACHER_PAGE_LIMIT,
    ) -> dict:
        school_id = require_admin(actor)
        name = (name or "").strip() or None

        total = self._records.count_for_school(school_id=school_id, name=name, work_date=work_date)
        pagination = Pagination(page=page, limit=limit, total=total)
        records = self._records.list_for_school(
            school_id=school_id,
            name=name,
            work_date=work_date,
            offset=pagination.offset,
            limit=limit,
        )
        return {"total": total, "page": page, "limit": limit, "records": [r.to_dict() for r in records]}

    def notifications(self, actor: Actor, *, page: int = 1, limit: int = DEFAULT_TEACHER_PAGE_LIMIT) -> dict:
        school_id = require_admin(actor)
        today = self._clock().date()

        records = list(self._records.list_for_school_on(school_id=school_id, work_date=today))
        pagination = Pagination(page=page, limit=limit, total=len(records))
        page_records = pagination.slice(records)

        messages = [
            f"{r.name or 'Unknown'} had late check-in at {_clock_time(r)}"
            for r in page_records
            if r.status == TeacherAttendanceStatus.LATE
        ]
        messages += [
            f"{r.name or 'Unknown'} missed checkout"
            for r in page_records
            if r.check_in_time is not None and r.check_out_time is None
        ]
        if not page_records:
            messages.append(NO_RECORDS_MESSAGE)

        return {"notifications": messages, "totalRecords": len(records), "page": page, "limit": limit}


def _clock_time(record: TeacherAttendanceRecord) -> str:
    if record.check_in_time is None:
        return "unknown time"
    return record.check_in_time.strftime("%I:%M %p")
