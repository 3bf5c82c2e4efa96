"""
Stay request ledger.

Guests submit, edit and withdraw their own pending requests; staff
process each request exactly once. Owner edits and withdrawals are gated
by a single conditional statement on (owner, PENDING), and processing by
a conditional status write, so concurrent callers cannot both pass a gate.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from guesthouse.config.settings import Settings
from guesthouse.core.exceptions import ErrorCode
from guesthouse.core.security import Principal
from guesthouse.integrations.guest_directory import GuestDirectory, NullGuestDirectory
from guesthouse.models.base.enums import RequestStatus
from guesthouse.models.booking.room_request import RoomRequest
from guesthouse.repositories.booking.room_assignment_repository import RoomAssignmentRepository
from guesthouse.repositories.booking.room_request_repository import RoomRequestRepository
from guesthouse.repositories.room.room_repository import RoomRepository
from guesthouse.schemas.booking.room_assignment import RoomAssignmentResponse
from guesthouse.schemas.booking.room_request import (
    RoomRequestAdminUpdate,
    RoomRequestCreate,
    RoomRequestProcess,
    RoomRequestResponse,
    RoomRequestUpdate,
)
from guesthouse.schemas.room.room_response import RoomResponse
from guesthouse.services.base.base_service import BaseService
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.services.booking.room_assignment_service import RoomAssignmentService
from guesthouse.utils.datetime_utils import Clock, ensure_utc
from guesthouse.utils.id_generator import generate_public_id


class RoomRequestService(BaseService[RoomRequestRepository]):
    """
    Stay request operations.
    """

    def __init__(
        self,
        db_session: Session,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        guest_directory: Optional[GuestDirectory] = None,
        assignment_service: Optional[RoomAssignmentService] = None,
    ):
        super().__init__(RoomRequestRepository(db_session), db_session, settings, clock)
        self.guest_directory = guest_directory or NullGuestDirectory()
        self.assignment_service = assignment_service or RoomAssignmentService(
            db_session, self.settings, self.clock
        )
        self.assignment_repository = RoomAssignmentRepository(db_session)
        self.room_repository = RoomRepository(db_session)

    # -------------------------------------------------------------------------
    # Guest operations
    # -------------------------------------------------------------------------

    def submit(self, data: RoomRequestCreate, caller: Principal) -> ServiceResult[RoomRequestResponse]:
        """
        Submit a new PENDING request for the caller.

        The display name is copied from the guest directory when available.
        """
        profile = self._lookup_profile(caller.user_id)
        headcount = data.number_of_people
        request = RoomRequest(
            public_id=generate_public_id(self.settings.REQUEST_PUBLIC_ID_PREFIX, self.clock.today()),
            user_id=caller.user_id,
            name=(profile or {}).get("name") or "",
            form_name=data.form_name,
            place=data.place,
            purpose=data.purpose,
            special_requests=data.special_requests,
            reference=data.reference,
            check_in_date=ensure_utc(data.check_in_date),
            check_out_date=ensure_utc(data.check_out_date),
            male=headcount.male,
            female=headcount.female,
            children=headcount.children,
            total=RoomRequest.headcount_total(headcount.male, headcount.female, headcount.children),
            status=RequestStatus.PENDING,
        )
        try:
            with self.transaction():
                self.repository.create(request)
        except Exception as e:
            return self._handle_exception(e, "submit room request")

        self._log_operation(
            "submit room request",
            request.id,
            {"public_id": request.public_id, "user_id": caller.user_id, "people": request.total},
        )
        return ServiceResult.success(
            RoomRequestResponse.from_model(request, user=profile),
            message="Room request submitted successfully",
        )

    def edit(
        self,
        request_id: str,
        caller: Principal,
        patch: RoomRequestUpdate,
    ) -> ServiceResult[RoomRequestResponse]:
        """
        Owner edit of a PENDING request.

        Returns:
            NOT_FOUND if missing, INSUFFICIENT_PERMISSIONS for another
            owner's request, REQUEST_NOT_PENDING once processed.
        """
        changes = patch.changes()
        try:
            request = self.repository.find_by_id(request_id)
            if request is None:
                return ServiceResult.not_found("Room request", request_id)

            invalid = self._check_dates(request, changes)
            if invalid:
                return invalid

            if changes:
                with self.transaction():
                    updated = self.repository.update_if_owner_pending(request_id, caller.user_id, changes)
                if not updated:
                    return self._gate_failure(request_id, caller, "edit")

            request = self.repository.find_by_id(request_id, refresh=True)
            if not changes and (request.user_id != caller.user_id or not request.is_pending):
                return self._gate_failure(request_id, caller, "edit")
        except Exception as e:
            return self._handle_exception(e, "edit room request", request_id)

        self._log_operation("edit room request", request_id, {"fields": sorted(changes)})
        return ServiceResult.success(self._enrich(request), message="Room request updated successfully")

    def withdraw(self, request_id: str, caller: Principal) -> ServiceResult[bool]:
        """Delete the caller's own PENDING request."""
        try:
            with self.transaction():
                deleted = self.repository.delete_if_owner_pending(request_id, caller.user_id)
            if not deleted:
                return self._gate_failure(request_id, caller, "withdraw")
        except Exception as e:
            return self._handle_exception(e, "withdraw room request", request_id)

        self._log_operation("withdraw room request", request_id, {"user_id": caller.user_id})
        return ServiceResult.success(True, message="Room request deleted successfully")

    # -------------------------------------------------------------------------
    # Staff operations
    # -------------------------------------------------------------------------

    def admin_edit(self, request_id: str, patch: RoomRequestAdminUpdate) -> ServiceResult[RoomRequestResponse]:
        """Staff edit without the owner/status gate."""
        changes = patch.changes()
        try:
            request = self.repository.find_by_id(request_id)
            if request is None:
                return ServiceResult.not_found("Room request", request_id)

            invalid = self._check_dates(request, changes)
            if invalid:
                return invalid

            if changes:
                with self.transaction():
                    self.repository.update(request, changes)
        except Exception as e:
            return self._handle_exception(e, "edit room request", request_id)

        self._log_operation("admin edit room request", request_id, {"fields": sorted(changes)})
        return ServiceResult.success(self._enrich(request), message="Room request updated successfully")

    def process(
        self,
        request_id: str,
        decision: RoomRequestProcess,
        staff_id: str,
    ) -> ServiceResult[RoomRequestResponse]:
        """
        Approve or reject a PENDING request exactly once.

        When approving with a room, the status write, the room claim and the
        assignment insert commit together; if the room cannot be claimed the
        whole transaction is rolled back and the request stays PENDING.
        """
        assignment = None
        try:
            processed = self.repository.mark_processed(
                request_id, decision.status, staff_id, self.clock.now()
            )
            if not processed:
                self._rollback()
                if self.repository.find_by_id(request_id) is None:
                    return ServiceResult.not_found("Room request", request_id)
                return ServiceResult.conflict(
                    "Room request has already been processed",
                    details={"request_id": request_id},
                    code=ErrorCode.REQUEST_NOT_PENDING,
                )

            request = self.repository.find_by_id(request_id, refresh=True)
            if decision.status == RequestStatus.APPROVED and decision.room_id:
                assignment, failure = self.assignment_service.stage_assignment(
                    room_id=decision.room_id,
                    user_id=request.user_id,
                    request_id=request.id,
                    check_in_date=request.check_in_date,
                    check_out_date=request.check_out_date,
                    guest_names=decision.guest_names,
                    dining_hall_preference=decision.dining_hall_preference,
                    assigned_by=staff_id,
                )
                if failure is not None:
                    self._rollback()
                    self._logger.info(
                        "Room request approval rolled back",
                        extra={"request_id": request_id, "room_id": decision.room_id, "error_code": failure.error.code.value},
                    )
                    return failure

            self._commit()
        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "process room request", request_id)

        self._log_operation(
            "process room request",
            request_id,
            {
                "status": decision.status.value,
                "staff_id": staff_id,
                "room_id": decision.room_id,
                "assignment_id": assignment.id if assignment is not None else None,
            },
        )
        request = self.repository.find_by_id(request_id, refresh=True)
        return ServiceResult.success(
            self._enrich(request),
            message=f"Room request {decision.status.value.lower()} successfully",
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, request_id: str, caller: Principal) -> ServiceResult[RoomRequestResponse]:
        """Guests only see their own requests; others are reported missing."""
        try:
            request = self.repository.find_by_id(request_id, refresh=True)
        except Exception as e:
            return self._handle_exception(e, "get room request", request_id)
        if request is None or (not caller.is_staff and request.user_id != caller.user_id):
            return ServiceResult.not_found("Room request", request_id)
        return ServiceResult.success(self._enrich(request))

    def list_for(
        self,
        caller: Principal,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
    ) -> ServiceResult[List[RoomRequestResponse]]:
        """
        Newest first. A guest always gets exactly their own requests;
        the filters only apply to staff.
        """
        if not caller.is_staff:
            status, user_id = None, caller.user_id
        try:
            requests = self.repository.search(user_id=user_id, status=status)
        except Exception as e:
            return self._handle_exception(e, "list room requests")
        items = [self._enrich(request) for request in requests]
        return ServiceResult.success(items, metadata={"count": len(items)})

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _gate_failure(self, request_id: str, caller: Principal, action: str) -> ServiceResult:
        """Explain why the owner/PENDING gate rejected the caller."""
        request = self.repository.find_by_id(request_id, refresh=True)
        if request is None:
            return ServiceResult.not_found("Room request", request_id)
        if request.user_id != caller.user_id:
            return ServiceResult.forbidden(action, "this room request")
        return ServiceResult.conflict(
            "Only pending requests can be changed",
            details={"request_id": request_id, "status": request.status.value},
            code=ErrorCode.REQUEST_NOT_PENDING,
        )

    def _check_dates(self, request: RoomRequest, changes: Dict[str, Any]) -> Optional[ServiceResult]:
        check_in = ensure_utc(changes.get("check_in_date", request.check_in_date))
        check_out = ensure_utc(changes.get("check_out_date", request.check_out_date))
        if check_out < check_in:
            return ServiceResult.validation_failure(
                "check_out_date must not be before check_in_date", field="check_out_date"
            )
        for key in ("check_in_date", "check_out_date"):
            if key in changes:
                changes[key] = ensure_utc(changes[key])
        return None

    def _lookup_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.guest_directory.get_profile(user_id)
        except Exception as e:
            self._logger.warning(
                "Guest profile lookup failed",
                extra={"user_id": user_id, "exception_type": type(e).__name__},
            )
            return None

    def _enrich(self, request: RoomRequest) -> RoomRequestResponse:
        """
        Attach the guest profile, the latest assignment and its room.
        Each part is best-effort; a failed lookup leaves the field empty.
        """
        user = self._lookup_profile(request.user_id)
        assignment = room = None
        try:
            latest = self.assignment_repository.find_latest_for_request(request.id)
            if latest is not None:
                assignment = RoomAssignmentResponse.model_validate(latest).model_dump(mode="json")
                found = self.room_repository.find_by_id(latest.room_id)
                if found is not None:
                    room = RoomResponse.model_validate(found).model_dump(mode="json")
        except Exception as e:
            self._logger.warning(
                "Room request enrichment failed",
                extra={"request_id": request.id, "exception_type": type(e).__name__},
            )
        return RoomRequestResponse.from_model(request, user=user, assignment=assignment, room=room)
