"""
Stay request ledger tests: owner gates, single processing and the
approve-with-room transaction.
"""

import re

import pytest

from guesthouse.core.exceptions import ErrorCode
from guesthouse.core.security import Principal
from guesthouse.models.base.enums import AssignmentState, RequestStatus, UserRole
from guesthouse.schemas.booking import (
    Headcount,
    RoomRequestAdminUpdate,
    RoomRequestCreate,
    RoomRequestProcess,
    RoomRequestUpdate,
)
from tests.conftest import local, new_uuid

PUBLIC_ID = re.compile(r"^REQ-20240601-[A-Z0-9]{4}$")


@pytest.fixture
def guest(guest_id, directory):
    directory.add(guest_id, "Asha Patel")
    return Principal(user_id=guest_id, role=UserRole.USER)


@pytest.fixture
def staff(staff_id):
    return Principal(user_id=staff_id, role=UserRole.STAFF)


def request_payload(**overrides):
    data = {
        "check_in_date": local(2024, 6, 10),
        "check_out_date": local(2024, 6, 12),
        "number_of_people": Headcount(male=1, female=1, children=1, total=99),
        "place": "Ahmedabad",
        "purpose": "Festival",
    }
    data.update(overrides)
    return RoomRequestCreate(**data)


@pytest.fixture
def submitted(request_service, guest):
    result = request_service.submit(request_payload(), guest)
    assert result.is_success, result.error
    return result.data


class TestSubmit:

    def test_submit_creates_pending_request(self, submitted, guest):
        assert submitted.status == RequestStatus.PENDING
        assert submitted.user_id == guest.user_id
        assert submitted.number_of_people.total == 3
        assert PUBLIC_ID.match(submitted.public_id)

    def test_name_from_directory(self, submitted):
        assert submitted.name == "Asha Patel"
        assert submitted.user["name"] == "Asha Patel"

    def test_directory_outage_does_not_block_submit(self, request_service, guest, directory):
        directory.fail = True

        result = request_service.submit(request_payload(), guest)

        assert result.is_success
        assert result.data.name == ""

    def test_schema_rejects_bad_stays(self):
        with pytest.raises(ValueError):
            request_payload(check_in_date=local(2024, 6, 12), check_out_date=local(2024, 6, 10))
        with pytest.raises(ValueError):
            request_payload(number_of_people=Headcount())
        with pytest.raises(ValueError):
            Headcount(male=-1)


class TestOwnerGates:

    def test_owner_edits_pending_request(self, request_service, submitted, guest):
        result = request_service.edit(
            submitted.id,
            guest,
            RoomRequestUpdate(number_of_people=Headcount(male=2, female=2, children=0), place="Surat"),
        )

        assert result.is_success
        assert result.data.place == "Surat"
        assert result.data.number_of_people.total == 4

    def test_other_user_cannot_edit(self, request_service, submitted):
        stranger = Principal(user_id=new_uuid(), role=UserRole.USER)

        result = request_service.edit(submitted.id, stranger, RoomRequestUpdate(place="X"))

        assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_edit_missing_request(self, request_service, guest):
        result = request_service.edit(new_uuid(), guest, RoomRequestUpdate(place="X"))
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_edit_after_processing(self, request_service, submitted, guest, staff):
        request_service.process(submitted.id, RoomRequestProcess(status=RequestStatus.REJECTED), staff.user_id)

        result = request_service.edit(submitted.id, guest, RoomRequestUpdate(place="X"))

        assert result.error.code == ErrorCode.REQUEST_NOT_PENDING

    def test_edit_rejects_inverted_dates(self, request_service, submitted, guest):
        result = request_service.edit(submitted.id, guest, RoomRequestUpdate(check_out_date=local(2024, 6, 1)))
        assert result.error.code == ErrorCode.VALIDATION_ERROR

    def test_withdraw(self, request_service, submitted, guest):
        assert request_service.withdraw(submitted.id, guest).is_success
        assert request_service.get(submitted.id, guest).error.code == ErrorCode.NOT_FOUND

    def test_withdraw_gates(self, request_service, submitted, guest, staff):
        stranger = Principal(user_id=new_uuid(), role=UserRole.USER)
        assert request_service.withdraw(submitted.id, stranger).error.code == ErrorCode.INSUFFICIENT_PERMISSIONS

        request_service.process(submitted.id, RoomRequestProcess(status=RequestStatus.REJECTED), staff.user_id)
        assert request_service.withdraw(submitted.id, guest).error.code == ErrorCode.REQUEST_NOT_PENDING

    def test_admin_edit_ignores_gates(self, request_service, submitted, staff):
        request_service.process(submitted.id, RoomRequestProcess(status=RequestStatus.REJECTED), staff.user_id)

        result = request_service.admin_edit(submitted.id, RoomRequestAdminUpdate(name="A. Patel"))

        assert result.data.name == "A. Patel"


class TestProcess:

    def test_reject(self, request_service, submitted, staff, clock):
        result = request_service.process(
            submitted.id, RoomRequestProcess(status=RequestStatus.REJECTED), staff.user_id
        )

        assert result.data.status == RequestStatus.REJECTED
        assert result.data.processed_by == staff.user_id
        assert result.data.processed_at is not None
        assert result.data.assignment is None

    def test_processed_exactly_once(self, request_service, submitted, staff):
        approve = RoomRequestProcess(status=RequestStatus.APPROVED)
        reject = RoomRequestProcess(status=RequestStatus.REJECTED)

        first = request_service.process(submitted.id, approve, staff.user_id)
        second = request_service.process(submitted.id, reject, staff.user_id)

        assert first.is_success
        assert second.error.code == ErrorCode.REQUEST_NOT_PENDING
        assert request_service.get(submitted.id, staff).data.status == RequestStatus.APPROVED

    def test_process_missing(self, request_service, staff):
        result = request_service.process(
            new_uuid(), RoomRequestProcess(status=RequestStatus.REJECTED), staff.user_id
        )
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_pending_is_not_a_decision(self):
        with pytest.raises(ValueError):
            RoomRequestProcess(status=RequestStatus.PENDING)

    def test_approve_with_room_assigns_it(self, request_service, room_service, submitted, staff, make_room):
        room = make_room()

        result = request_service.process(
            submitted.id,
            RoomRequestProcess(status=RequestStatus.APPROVED, room_id=room.id, guest_names=["Asha", "Ravi"]),
            staff.user_id,
        )

        assert result.is_success
        assert result.data.status == RequestStatus.APPROVED
        assert result.data.assignment["room_id"] == room.id
        assert result.data.assignment["state"] == AssignmentState.CREATED.value
        assert result.data.assignment["guest_names"] == ["Asha", "Ravi"]
        assert result.data.room["room_number"] == room.room_number
        assert room_service.get(room.id, staff).data.is_occupied is True

    def test_occupied_room_rolls_back_approval(
        self, request_service, assignment_service, room_service, submitted, staff, make_room
    ):
        room = make_room()
        assignment_service.assign(
            room.id, new_uuid(), local(2024, 6, 1), local(2024, 6, 2), assigned_by=staff.user_id
        )

        result = request_service.process(
            submitted.id,
            RoomRequestProcess(status=RequestStatus.APPROVED, room_id=room.id),
            staff.user_id,
        )

        assert result.error.code == ErrorCode.ROOM_OCCUPIED
        current = request_service.get(submitted.id, staff).data
        assert current.status == RequestStatus.PENDING
        assert current.processed_by is None
        assert assignment_service.list_assignments(request_id=submitted.id).data == []

    def test_missing_room_rolls_back_approval(self, request_service, submitted, staff):
        result = request_service.process(
            submitted.id,
            RoomRequestProcess(status=RequestStatus.APPROVED, room_id=new_uuid()),
            staff.user_id,
        )

        assert result.error.code == ErrorCode.NOT_FOUND
        assert request_service.get(submitted.id, staff).data.status == RequestStatus.PENDING

    def test_room_only_when_approving(self):
        with pytest.raises(ValueError):
            RoomRequestProcess(status=RequestStatus.REJECTED, room_id=new_uuid())


class TestQueries:

    def test_guest_sees_only_own(self, request_service, submitted, guest, staff):
        other = Principal(user_id=new_uuid(), role=UserRole.USER)
        request_service.submit(request_payload(place="Rajkot"), other)

        mine = request_service.list_for(guest, user_id=other.user_id).data
        everyone = request_service.list_for(staff).data

        assert [r.id for r in mine] == [submitted.id]
        assert len(everyone) == 2
        assert request_service.get(submitted.id, other).error.code == ErrorCode.NOT_FOUND

    def test_staff_filters(self, request_service, submitted, guest, staff):
        second = request_service.submit(request_payload(place="Rajkot"), guest).data
        request_service.process(second.id, RoomRequestProcess(status=RequestStatus.REJECTED), staff.user_id)

        pending = request_service.list_for(staff, status=RequestStatus.PENDING).data

        assert [r.id for r in pending] == [submitted.id]

    def test_enrichment_failure_leaves_user_empty(self, request_service, submitted, staff, directory):
        directory.fail = True

        items = request_service.list_for(staff).data

        assert len(items) == 1
        assert items[0].user is None
