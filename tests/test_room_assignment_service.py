"""
Assignment engine tests: exclusive room claims and the
CREATED -> CHECKED_IN -> CHECKED_OUT lifecycle with its pass side effects.
"""

from datetime import date
from unittest.mock import patch

import pytest

from guesthouse.core.exceptions import EntityAlreadyExistsError, ErrorCode
from guesthouse.core.security import Principal
from guesthouse.models.base.enums import AssignmentState, UserRole
from guesthouse.models.booking.room_assignment import RoomAssignment
from guesthouse.repositories.booking.room_assignment_repository import RoomAssignmentRepository
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.services.booking import RoomAssignmentService
from tests.conftest import local, new_uuid

STAFF = Principal(user_id=new_uuid(), role=UserRole.STAFF)


@pytest.fixture
def room(make_room):
    return make_room()


def assign(service, room_id, user_id, staff_id, names=("Asha", "Ravi"), check_in=None, check_out=None, **kwargs):
    return service.assign(
        room_id=room_id,
        user_id=user_id,
        check_in_date=check_in or local(2024, 6, 1, 12),
        check_out_date=check_out or local(2024, 6, 3, 10),
        assigned_by=staff_id,
        guest_names=list(names) if names is not None else None,
        **kwargs,
    )


class TestAssign:

    def test_assign_claims_room(self, assignment_service, room_service, room, guest_id, staff_id, clock):
        result = assign(assignment_service, room.id, guest_id, staff_id, dining_hall_preference="Main")

        assert result.is_success
        assignment = result.data
        assert assignment.state == AssignmentState.CREATED
        assert assignment.assigned_by == staff_id
        assert assignment.guest_names == ["Asha", "Ravi"]
        assert room_service.get(room.id, STAFF).data.is_occupied is True

    def test_default_guest_name(self, assignment_service, room, guest_id, staff_id, settings):
        result = assign(assignment_service, room.id, guest_id, staff_id, names=None)
        assert result.data.guest_names == [settings.DEFAULT_GUEST_NAME]

    def test_second_assignment_rejected(self, assignment_service, room, staff_id):
        assert assign(assignment_service, room.id, new_uuid(), staff_id).is_success

        second = assign(assignment_service, room.id, new_uuid(), staff_id)

        assert second.error.code == ErrorCode.ROOM_OCCUPIED
        assert len(assignment_service.list_assignments(room_id=room.id).data) == 1

    def test_stale_session_loses_race(self, session_factory, settings, clock, room, staff_id):
        first = RoomAssignmentService(session_factory(), settings, clock)
        second = RoomAssignmentService(session_factory(), settings, clock)
        # both sessions have seen the room as free
        assert first.room_repository.find_by_id(room.id).is_occupied is False
        assert second.room_repository.find_by_id(room.id).is_occupied is False

        winner = assign(first, room.id, new_uuid(), staff_id)
        loser = assign(second, room.id, new_uuid(), staff_id)

        assert winner.is_success
        assert loser.error.code == ErrorCode.ROOM_OCCUPIED
        assert len(first.list_assignments(room_id=room.id, active_only=True).data) == 1

    def test_missing_room(self, assignment_service, guest_id, staff_id):
        result = assign(assignment_service, new_uuid(), guest_id, staff_id)
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_unknown_request(self, assignment_service, room, guest_id, staff_id, room_service):
        result = assign(assignment_service, room.id, guest_id, staff_id, request_id=new_uuid())

        assert result.error.code == ErrorCode.NOT_FOUND
        assert room_service.get(room.id, STAFF).data.is_occupied is False

    def test_dates_out_of_order(self, assignment_service, room, guest_id, staff_id):
        result = assign(
            assignment_service, room.id, guest_id, staff_id,
            check_in=local(2024, 6, 3), check_out=local(2024, 6, 1),
        )
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    def test_store_rejects_second_active_assignment(self, db, room, staff_id, clock):
        repository = RoomAssignmentRepository(db)

        def row():
            return RoomAssignment(
                room_id=room.id,
                user_id=new_uuid(),
                guest_names=["X"],
                check_in_date=clock.now(),
                check_out_date=clock.now(),
                assigned_by=staff_id,
            )

        repository.create(row())
        with pytest.raises(EntityAlreadyExistsError):
            repository.create(row())
        db.rollback()

    def test_room_reusable_after_checkout(self, assignment_service, room, staff_id):
        first = assign(assignment_service, room.id, new_uuid(), staff_id).data
        assignment_service.check_in(first.id, staff_id)
        assignment_service.check_out(first.id, staff_id)

        assert assign(assignment_service, room.id, new_uuid(), staff_id).is_success


class TestCheckIn:

    def test_check_in_issues_passes_for_stay(self, assignment_service, food_pass_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data

        result = assignment_service.check_in(assignment.id, staff_id)

        assert result.is_success
        assert result.warnings == []
        assert result.data["passes_issued"] == 18
        assert result.data["assignment"].state == AssignmentState.CHECKED_IN
        assert result.data["assignment"].checked_in_at is not None
        passes = food_pass_service.list_for(guest_id).data
        assert {p.pass_date for p in passes} == {date(2024, 6, 1), date(2024, 6, 2), date(2024, 6, 3)}
        assert {p.assignment_id for p in passes} == {assignment.id}

    def test_stay_days_use_local_calendar(self, assignment_service, food_pass_service, room, guest_id, staff_id):
        # 01:00 local on June 2 is still June 1 in UTC
        assignment = assign(
            assignment_service, room.id, guest_id, staff_id, names=["Asha"],
            check_in=local(2024, 6, 1, 23), check_out=local(2024, 6, 2, 1),
        ).data

        assignment_service.check_in(assignment.id, staff_id)

        dates = {p.pass_date for p in food_pass_service.list_for(guest_id).data}
        assert dates == {date(2024, 6, 1), date(2024, 6, 2)}

    def test_double_check_in(self, assignment_service, food_pass_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        assignment_service.check_in(assignment.id, staff_id)

        again = assignment_service.check_in(assignment.id, staff_id)

        assert again.error.code == ErrorCode.ALREADY_CHECKED_IN
        assert len(food_pass_service.list_for(guest_id).data) == 18

    def test_check_in_missing(self, assignment_service, staff_id):
        assert assignment_service.check_in(new_uuid(), staff_id).error.code == ErrorCode.NOT_FOUND

    def test_check_in_after_check_out(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        assignment_service.check_in(assignment.id, staff_id)
        assignment_service.check_out(assignment.id, staff_id)

        result = assignment_service.check_in(assignment.id, staff_id)

        assert result.error.code == ErrorCode.INVALID_STATE

    def test_issuance_failure_is_a_warning(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        failure = ServiceResult.error_result(ErrorCode.DATABASE_ERROR, "Failed to issue food passes")

        with patch.object(assignment_service.food_pass_service, "issue_batch", return_value=failure):
            result = assignment_service.check_in(assignment.id, staff_id)

        assert result.is_success
        assert result.data["assignment"].checked_in is True
        assert [w.code for w in result.warnings] == [ErrorCode.PASS_ISSUANCE_FAILED]

    def test_reissue_after_failed_issuance(self, assignment_service, food_pass_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        failure = ServiceResult.error_result(ErrorCode.DATABASE_ERROR, "Failed to issue food passes")
        with patch.object(assignment_service.food_pass_service, "issue_batch", return_value=failure):
            assignment_service.check_in(assignment.id, staff_id)

        result = assignment_service.reissue_passes(assignment.id, staff_id)

        assert result.data == 18
        assert assignment_service.reissue_passes(assignment.id, staff_id).data == 0

    def test_reissue_requires_checked_in(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data

        result = assignment_service.reissue_passes(assignment.id, staff_id)

        assert result.error.code == ErrorCode.INVALID_STATE


class TestCheckOut:

    def test_full_stay(self, assignment_service, food_pass_service, room_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        assert assignment_service.check_in(assignment.id, staff_id).data["passes_issued"] == 18
        breakfast = food_pass_service.list_for(guest_id).data[0]
        assert food_pass_service.redeem(breakfast.id).is_success

        result = assignment_service.check_out(assignment.id, staff_id)

        assert result.is_success
        assert result.warnings == []
        assert result.data["passes_revoked"] == 17
        assert result.data["room_released"] is True
        assert result.data["assignment"].state == AssignmentState.CHECKED_OUT
        remaining = food_pass_service.list_for(guest_id).data
        assert [p.id for p in remaining] == [breakfast.id]
        assert room_service.get(room.id, STAFF).data.is_occupied is False

    def test_check_out_keeps_passes_outside_stay(self, assignment_service, food_pass_service, room, guest_id, staff_id):
        food_pass_service.issue_batch(guest_id, ["Asha"], date(2024, 7, 1), date(2024, 7, 1), "", staff_id)
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        assignment_service.check_in(assignment.id, staff_id)

        result = assignment_service.check_out(assignment.id, staff_id)

        assert result.data["passes_revoked"] == 18
        assert {p.pass_date for p in food_pass_service.list_for(guest_id).data} == {date(2024, 7, 1)}

    def test_check_out_keeps_days_shared_with_open_stay(
        self, assignment_service, food_pass_service, room, make_room, guest_id, staff_id
    ):
        first = assign(assignment_service, room.id, guest_id, staff_id, names=("Alice",)).data
        second = assign(
            assignment_service,
            make_room("102").id,
            guest_id,
            staff_id,
            names=("Alice",),
            check_in=local(2024, 6, 3, 12),
            check_out=local(2024, 6, 5, 10),
        ).data
        assert assignment_service.check_in(first.id, staff_id).data["passes_issued"] == 9
        assert assignment_service.check_in(second.id, staff_id).data["passes_issued"] == 6

        result = assignment_service.check_out(first.id, staff_id)

        assert result.data["passes_revoked"] == 6
        remaining = food_pass_service.list_for(guest_id).data
        assert len(remaining) == 9
        assert len([p for p in remaining if p.pass_date == date(2024, 6, 3)]) == 3
        assert {p.pass_date for p in remaining} == {date(2024, 6, 3), date(2024, 6, 4), date(2024, 6, 5)}

    def test_check_out_revokes_shared_day_for_other_members(
        self, assignment_service, food_pass_service, room, make_room, guest_id, staff_id
    ):
        first = assign(assignment_service, room.id, guest_id, staff_id, names=("Alice", "Bob")).data
        second = assign(
            assignment_service,
            make_room("102").id,
            guest_id,
            staff_id,
            names=("Alice",),
            check_in=local(2024, 6, 3, 12),
            check_out=local(2024, 6, 5, 10),
        ).data
        assignment_service.check_in(first.id, staff_id)
        assignment_service.check_in(second.id, staff_id)

        assignment_service.check_out(first.id, staff_id)

        june_3 = food_pass_service.list_for(guest_id, pass_date=date(2024, 6, 3)).data
        assert {p.member_name for p in june_3} == {"Alice"}

    def test_check_out_before_check_in(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data

        result = assignment_service.check_out(assignment.id, staff_id)

        assert result.error.code == ErrorCode.NOT_CHECKED_IN

    def test_double_check_out(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        assignment_service.check_in(assignment.id, staff_id)
        assignment_service.check_out(assignment.id, staff_id)

        result = assignment_service.check_out(assignment.id, staff_id)

        assert result.error.code == ErrorCode.INVALID_STATE

    def test_check_out_missing(self, assignment_service, staff_id):
        assert assignment_service.check_out(new_uuid(), staff_id).error.code == ErrorCode.NOT_FOUND

    def test_follow_up_failures_are_warnings(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data
        assignment_service.check_in(assignment.id, staff_id)
        release_failure = ServiceResult.error_result(ErrorCode.DATABASE_ERROR, "Failed to set room occupancy")
        revoke_failure = ServiceResult.error_result(ErrorCode.DATABASE_ERROR, "Failed to revoke food passes")

        with patch.object(assignment_service.room_service, "set_occupied", return_value=release_failure), \
                patch.object(assignment_service.food_pass_service, "revoke_unused", return_value=revoke_failure):
            result = assignment_service.check_out(assignment.id, staff_id)

        assert result.is_success
        assert result.data["assignment"].checked_out is True
        assert result.data["room_released"] is False
        assert [w.code for w in result.warnings] == [
            ErrorCode.ROOM_RELEASE_FAILED,
            ErrorCode.PASS_REVOCATION_FAILED,
        ]


class TestQueries:

    def test_list_filters(self, assignment_service, make_room, staff_id):
        first_room, second_room = make_room("1"), make_room("2")
        guest = new_uuid()
        done = assign(assignment_service, first_room.id, guest, staff_id).data
        assignment_service.check_in(done.id, staff_id)
        assignment_service.check_out(done.id, staff_id)
        assign(assignment_service, second_room.id, guest, staff_id)

        assert len(assignment_service.list_assignments(user_id=guest).data) == 2
        active = assignment_service.list_assignments(user_id=guest, active_only=True).data
        assert [a.room_id for a in active] == [second_room.id]

    def test_get(self, assignment_service, room, guest_id, staff_id):
        assignment = assign(assignment_service, room.id, guest_id, staff_id).data

        assert assignment_service.get(assignment.id).data.id == assignment.id
        assert assignment_service.get(new_uuid()).error.code == ErrorCode.NOT_FOUND
