"""
Assignment engine.

Binds a guest to a room and drives the stay through
CREATED -> CHECKED_IN -> CHECKED_OUT.

Every precondition is checked by the same statement that writes:
- the room claim is ``UPDATE rooms SET is_occupied = true WHERE id = ?
  AND is_occupied = false``, committed together with the assignment
  insert (the partial unique index on active assignments is the second
  line of defence);
- check-in and check-out are conditional updates on the flags.

Check-in and check-out commit their primary transition first. Pass
issuance, room release and pass revocation run afterwards; a failure in
any of them is attached to the successful result as a warning so the
operator can retry just that step.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings
from guesthouse.core.exceptions import EntityAlreadyExistsError, ErrorCode
from guesthouse.models.booking.room_assignment import RoomAssignment
from guesthouse.repositories.booking.room_assignment_repository import RoomAssignmentRepository
from guesthouse.repositories.booking.room_request_repository import RoomRequestRepository
from guesthouse.repositories.room.room_repository import RoomRepository
from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.services.mess.food_pass_service import FoodPassService
from guesthouse.services.room.room_service import RoomService
from guesthouse.utils.datetime_utils import Clock, ensure_utc


class RoomAssignmentService(BaseService[RoomAssignmentRepository]):
    """
    Room assignment lifecycle.
    """

    def __init__(
        self,
        db_session: Session,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        food_pass_service: Optional[FoodPassService] = None,
        room_service: Optional[RoomService] = None,
    ):
        super().__init__(RoomAssignmentRepository(db_session), db_session, settings, clock)
        self.room_repository = RoomRepository(db_session)
        self.request_repository = RoomRequestRepository(db_session)
        self.food_pass_service = food_pass_service or FoodPassService(db_session, self.settings, self.clock)
        self.room_service = room_service or RoomService(db_session, self.settings, self.clock)

    # -------------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------------

    def stage_assignment(
        self,
        room_id: str,
        user_id: str,
        request_id: Optional[str],
        check_in_date: datetime,
        check_out_date: datetime,
        guest_names: Optional[Sequence[str]],
        dining_hall_preference: str,
        assigned_by: str,
    ) -> Tuple[Optional[RoomAssignment], Optional[ServiceResult]]:
        """
        Claim the room and insert the assignment inside the caller's open
        transaction. Nothing is committed here.

        Returns:
            (assignment, None) on success, (None, failure) when the room is
            missing or already occupied. The caller must roll back on failure.
        """
        room = self.room_repository.find_by_id(room_id)
        if room is None:
            return None, ServiceResult.not_found("Room", room_id)

        if not self.room_repository.claim(room_id):
            return None, ServiceResult.conflict(
                "Room is already occupied",
                details={"room_id": room_id},
                code=ErrorCode.ROOM_OCCUPIED,
            )

        names = [name.strip() for name in (guest_names or []) if name and name.strip()]
        assignment = RoomAssignment(
            room_id=room_id,
            user_id=user_id,
            request_id=request_id,
            guest_names=names or [self.settings.DEFAULT_GUEST_NAME],
            dining_hall_preference=dining_hall_preference or "",
            check_in_date=ensure_utc(check_in_date),
            check_out_date=ensure_utc(check_out_date),
            assigned_by=assigned_by,
            assigned_at=self.clock.now(),
            checked_in=False,
            checked_out=False,
        )
        try:
            self.repository.create(assignment)
        except EntityAlreadyExistsError:
            # An active assignment exists although the flag was clear
            return None, ServiceResult.conflict(
                "Room already has an active assignment",
                details={"room_id": room_id},
                code=ErrorCode.ROOM_OCCUPIED,
            )
        return assignment, None

    def assign(
        self,
        room_id: str,
        user_id: str,
        check_in_date: datetime,
        check_out_date: datetime,
        assigned_by: str,
        request_id: Optional[str] = None,
        guest_names: Optional[Sequence[str]] = None,
        dining_hall_preference: str = "",
    ) -> ServiceResult[RoomAssignment]:
        """
        Assign an unoccupied room to a guest.

        Of any number of concurrent calls for the same free room exactly
        one succeeds; the others get ROOM_OCCUPIED (409).
        """
        if ensure_utc(check_out_date) < ensure_utc(check_in_date):
            return ServiceResult.validation_failure(
                "check_out_date must not be before check_in_date", field="check_out_date"
            )

        try:
            if request_id is not None and self.request_repository.find_by_id(request_id) is None:
                return ServiceResult.not_found("Room request", request_id)

            assignment, failure = self.stage_assignment(
                room_id,
                user_id,
                request_id,
                check_in_date,
                check_out_date,
                guest_names,
                dining_hall_preference,
                assigned_by,
            )
            if failure is not None:
                self._rollback()
                return failure
            self._commit()
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "assign room", room_id)

        self._log_operation(
            "assign room",
            assignment.id,
            {"room_id": room_id, "user_id": user_id, "request_id": request_id, "staff_id": assigned_by},
        )
        return ServiceResult.success(assignment, message="Room assigned successfully")

    # -------------------------------------------------------------------------
    # Check-in
    # -------------------------------------------------------------------------

    def check_in(self, assignment_id: str, staff_id: str) -> ServiceResult[Dict[str, Any]]:
        """
        CREATED -> CHECKED_IN, then issue meal passes for the stay.

        Returns:
            success with {"assignment", "passes_issued"}; a
            PASS_ISSUANCE_FAILED warning if issuance failed after the
            check-in was committed.
        """
        try:
            assignment = self.repository.find_by_id(assignment_id)
            if assignment is None:
                return ServiceResult.not_found("Room assignment", assignment_id)

            with self.transaction():
                checked_in = self.repository.mark_checked_in(assignment_id, self.clock.now())

            assignment = self.repository.find_by_id(assignment_id, refresh=True)
            if not checked_in:
                if assignment.checked_out:
                    return ServiceResult.conflict(
                        "Assignment is already checked out",
                        details={"assignment_id": assignment_id},
                        code=ErrorCode.INVALID_STATE,
                    )
                return ServiceResult.conflict(
                    "Guest is already checked in",
                    details={"assignment_id": assignment_id},
                    code=ErrorCode.ALREADY_CHECKED_IN,
                )
        except Exception as e:
            return self._handle_exception(e, "check in", assignment_id)

        self._log_operation("check in", assignment_id, {"room_id": assignment.room_id, "staff_id": staff_id})

        issuance = self._issue_for(assignment, staff_id)
        result = ServiceResult.success(
            {"assignment": assignment, "passes_issued": issuance.data if issuance.is_success else 0},
            message="Checked in successfully",
        )
        if not issuance.is_success:
            self._logger.warning(
                "Food pass issuance failed after check-in",
                extra={"assignment_id": assignment_id, "error_code": issuance.error.code.value},
            )
            result.add_warning(
                ErrorCode.PASS_ISSUANCE_FAILED,
                "Check-in completed but food passes could not be issued; retry issuance for this assignment",
                details={"assignment_id": assignment_id, "cause": issuance.error.code.value},
            )
        return result

    def reissue_passes(self, assignment_id: str, staff_id: str) -> ServiceResult[int]:
        """
        Re-run issuance for a checked-in stay. Existing passes are kept,
        so only the missing ones are created.
        """
        try:
            assignment = self.repository.find_by_id(assignment_id, refresh=True)
        except Exception as e:
            return self._handle_exception(e, "reissue food passes", assignment_id)
        if assignment is None:
            return ServiceResult.not_found("Room assignment", assignment_id)
        if not assignment.checked_in or assignment.checked_out:
            return ServiceResult.conflict(
                "Food passes can only be issued for a checked-in stay",
                details={"assignment_id": assignment_id, "state": assignment.state.value},
                code=ErrorCode.INVALID_STATE,
            )
        return self._issue_for(assignment, staff_id)

    def _issue_for(self, assignment: RoomAssignment, staff_id: str) -> ServiceResult[int]:
        start, end = self._stay_days(assignment)
        return self.food_pass_service.issue_batch(
            user_id=assignment.user_id,
            members=assignment.guest_names,
            start=start,
            end=end,
            dining_hall=assignment.dining_hall_preference,
            created_by=staff_id,
            assignment_id=assignment.id,
        )

    # -------------------------------------------------------------------------
    # Check-out
    # -------------------------------------------------------------------------

    def check_out(self, assignment_id: str, staff_id: str) -> ServiceResult[Dict[str, Any]]:
        """
        CHECKED_IN -> CHECKED_OUT, then release the room and revoke the
        guest's unused passes for the stay's dates. Passes a member also
        holds through another of the guest's open stays on the same day
        are kept.

        Returns:
            success with {"assignment", "passes_revoked", "room_released"};
            ROOM_RELEASE_FAILED / PASS_REVOCATION_FAILED warnings for
            follow-up steps that failed.
        """
        try:
            assignment = self.repository.find_by_id(assignment_id)
            if assignment is None:
                return ServiceResult.not_found("Room assignment", assignment_id)

            with self.transaction():
                checked_out = self.repository.mark_checked_out(assignment_id, self.clock.now())

            assignment = self.repository.find_by_id(assignment_id, refresh=True)
            if not checked_out:
                if not assignment.checked_in:
                    return ServiceResult.conflict(
                        "Guest has not checked in",
                        details={"assignment_id": assignment_id},
                        code=ErrorCode.NOT_CHECKED_IN,
                    )
                return ServiceResult.conflict(
                    "Assignment is already checked out",
                    details={"assignment_id": assignment_id},
                    code=ErrorCode.INVALID_STATE,
                )
        except Exception as e:
            return self._handle_exception(e, "check out", assignment_id)

        self._log_operation("check out", assignment_id, {"room_id": assignment.room_id, "staff_id": staff_id})

        data: Dict[str, Any] = {"assignment": assignment, "passes_revoked": 0, "room_released": False}
        result = ServiceResult.success(data, message="Checked out successfully")

        release = self.room_service.set_occupied(assignment.room_id, False)
        if release.is_success:
            data["room_released"] = True
        else:
            self._logger.warning(
                "Room release failed after check-out",
                extra={"assignment_id": assignment_id, "room_id": assignment.room_id},
            )
            result.add_warning(
                ErrorCode.ROOM_RELEASE_FAILED,
                "Check-out completed but the room is still flagged occupied",
                details={"room_id": assignment.room_id, "cause": release.error.code.value},
            )

        start, end = self._stay_days(assignment)
        try:
            keep = self._open_stay_spans(assignment)
        except Exception as e:
            revocation = self._handle_exception(e, "look up open stays", assignment_id)
        else:
            revocation = self.food_pass_service.revoke_unused(assignment.user_id, start, end, keep=keep)
        if revocation.is_success:
            data["passes_revoked"] = revocation.data
        else:
            self._logger.warning(
                "Food pass revocation failed after check-out",
                extra={"assignment_id": assignment_id, "user_id": assignment.user_id},
            )
            result.add_warning(
                ErrorCode.PASS_REVOCATION_FAILED,
                "Check-out completed but unused food passes were not revoked",
                details={"user_id": assignment.user_id, "cause": revocation.error.code.value},
            )
        return result

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, assignment_id: str) -> ServiceResult[RoomAssignment]:
        try:
            assignment = self.repository.find_by_id(assignment_id, refresh=True)
            if assignment is None:
                return ServiceResult.not_found("Room assignment", assignment_id)
            return ServiceResult.success(assignment)
        except Exception as e:
            return self._handle_exception(e, "get room assignment", assignment_id)

    def list_assignments(
        self,
        room_id: Optional[str] = None,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        active_only: bool = False,
    ) -> ServiceResult[List[RoomAssignment]]:
        try:
            assignments = self.repository.search(
                room_id=room_id,
                user_id=user_id,
                request_id=request_id,
                active_only=active_only,
            )
            return ServiceResult.success(assignments, metadata={"count": len(assignments)})
        except Exception as e:
            return self._handle_exception(e, "list room assignments")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _stay_days(self, assignment: RoomAssignment):
        """First and last local calendar day of the stay"""
        return (
            self.clock.local_date(assignment.check_in_date),
            self.clock.local_date(assignment.check_out_date),
        )

    def _open_stay_spans(self, assignment: RoomAssignment) -> List[Tuple[List[str], date, date]]:
        """(guest names, first day, last day) of the guest's other open stays"""
        spans = []
        for other in self.repository.find_other_active_for_user(assignment.user_id, assignment.id):
            first, last = self._stay_days(other)
            spans.append((list(other.guest_names), first, last))
        return spans
