"""
Room registry and room category tests.
"""

import pytest
from pydantic import ValidationError

from guesthouse.core.exceptions import ErrorCode
from guesthouse.core.security import Principal
from guesthouse.models.base.enums import BedType, RoomType, UserRole
from guesthouse.schemas.room import Bed, RoomCategoryCreate, RoomCategoryUpdate, RoomCreate, RoomUpdate
from tests.conftest import local, new_uuid

STAFF = Principal(user_id=new_uuid(), role=UserRole.STAFF)
GUEST = Principal(user_id=new_uuid(), role=UserRole.USER)


class TestRoomRegistry:

    def test_create_room(self, make_room):
        room = make_room("12A", "North", has_sofa_set=True, sofa_set_quantity=2)

        assert room.id
        assert room.is_occupied is False
        assert room.needs_cleaning is False
        assert room.sofa_set_quantity == 2
        assert room.beds == [{"type": "DOUBLE", "quantity": 1}]

    def test_sofa_quantity_cleared_without_sofa(self, make_room):
        room = make_room(has_sofa_set=False, sofa_set_quantity=3)
        assert room.sofa_set_quantity == 0

    def test_duplicate_number_in_same_building(self, room_service, make_room):
        make_room("101", "A")

        result = room_service.create(
            RoomCreate(
                room_number="101",
                building="A",
                floor=2,
                room_type=RoomType.SARJU,
                beds=[Bed(type=BedType.SINGLE, quantity=2)],
            )
        )

        assert not result.is_success
        assert result.error.code == ErrorCode.ALREADY_EXISTS

    def test_same_number_in_other_building(self, make_room):
        make_room("101", "A")
        assert make_room("101", "B").building == "B"

    def test_unknown_category_rejected(self, room_service):
        result = room_service.create(
            RoomCreate(
                room_number="7",
                floor=0,
                room_type=RoomType.NEELKANTH,
                beds=[Bed(type=BedType.SINGLE, quantity=1)],
                room_category_id=new_uuid(),
            )
        )
        assert result.error.code == ErrorCode.INVALID_REFERENCE

    def test_update_rejects_collision(self, room_service, make_room):
        make_room("101", "A")
        other = make_room("102", "A")

        result = room_service.update(other.id, RoomUpdate(room_number="101"))

        assert result.error.code == ErrorCode.ALREADY_EXISTS

    def test_update_applies_patch(self, room_service, make_room):
        room = make_room()

        result = room_service.update(room.id, RoomUpdate(has_ac=True, needs_cleaning=True))

        assert result.is_success
        assert result.data.has_ac is True
        assert result.data.needs_cleaning is True

    def test_update_missing_room(self, room_service):
        result = room_service.update(new_uuid(), RoomUpdate(has_ac=True))
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_occupancy_not_patchable(self):
        with pytest.raises(ValidationError):
            RoomUpdate(is_occupied=True)

    def test_hidden_room_invisible_to_guest(self, room_service, make_room):
        room = make_room(is_visible=False)

        assert room_service.get(room.id, STAFF).is_success
        assert room_service.get(room.id, GUEST).error.code == ErrorCode.NOT_FOUND

    def test_guest_listing_forced_visible(self, room_service, make_room):
        make_room("1", is_visible=True)
        make_room("2", is_visible=False)

        guest_rooms = room_service.list_rooms(GUEST, is_visible=False).data
        staff_rooms = room_service.list_rooms(STAFF).data

        assert [r.room_number for r in guest_rooms] == ["1"]
        assert len(staff_rooms) == 2

    def test_list_filters(self, room_service, make_room):
        make_room("1", "A", floor=1, room_type=RoomType.SARJU)
        make_room("2", "A", floor=2, room_type=RoomType.SARJUPLUS)
        make_room("3", "B", floor=2, room_type=RoomType.SARJU)

        result = room_service.list_rooms(STAFF, floor=2, room_type=RoomType.SARJU)

        assert [r.room_number for r in result.data] == ["3"]

    def test_set_occupied_is_idempotent(self, room_service, make_room):
        room = make_room()

        assert room_service.set_occupied(room.id, False).is_success
        assert room_service.set_occupied(room.id, True).is_success
        assert room_service.set_occupied(room.id, True).is_success
        assert room_service.get(room.id, STAFF).data.is_occupied is True

    def test_stats(self, room_service, make_room):
        make_room("1")
        make_room("2")
        third = make_room("3")
        room_service.set_occupied(third.id, True)

        assert room_service.stats().data == {"total": 3, "occupied": 1, "available": 2}

    def test_assignment_claims_and_release_frees(self, room_service, assignment_service, make_room, staff_id):
        room = make_room()
        assignment = assignment_service.assign(
            room.id, new_uuid(), local(2024, 6, 1), local(2024, 6, 2), assigned_by=staff_id
        ).data

        assert room_service.get(room.id, STAFF).data.is_occupied is True
        assert room_service.stats().data["occupied"] == 1

        assignment_service.check_in(assignment.id, staff_id)
        assignment_service.check_out(assignment.id, staff_id)

        assert room_service.get(room.id, STAFF).data.is_occupied is False
        assert room_service.stats().data["occupied"] == 0

    def test_buildings_and_floors(self, room_service, make_room):
        make_room("1", "B", floor=3)
        make_room("2", "A", floor=1)
        make_room("3", "A", floor=2)
        make_room("4", "C", floor=1, is_visible=False)

        assert room_service.buildings().data == ["A", "B"]
        assert room_service.floors("A").data == [1, 2]
        assert room_service.floors("").error.code == ErrorCode.VALIDATION_ERROR

    def test_delete_blocked_while_occupied(self, room_service, assignment_service, make_room, staff_id):
        room = make_room()
        assignment_service.assign(
            room.id, new_uuid(), local(2024, 6, 1), local(2024, 6, 2), assigned_by=staff_id
        )

        result = room_service.delete(room.id)

        assert result.error.code == ErrorCode.ROOM_OCCUPIED

    def test_delete_free_room(self, room_service, make_room):
        room = make_room()

        assert room_service.delete(room.id).is_success
        assert room_service.get(room.id, STAFF).error.code == ErrorCode.NOT_FOUND


class TestRoomCategories:

    def test_create_stamps_image_upload_time(self, room_category_service, clock):
        result = room_category_service.create(
            RoomCategoryCreate(room_name="Deluxe", price="2500", images=[{"url": "https://img/1.jpg"}])
        )

        assert result.is_success
        assert result.data.images[0]["uploaded_at"] == clock.now().isoformat()

    def test_update_and_list(self, room_category_service):
        category = room_category_service.create(RoomCategoryCreate(room_name="Standard")).data

        room_category_service.update(category.id, RoomCategoryUpdate(price="1200"))

        categories = room_category_service.list_categories().data
        assert [(c.room_name, c.price) for c in categories] == [("Standard", "1200")]

    def test_delete_detaches_rooms(self, room_category_service, room_service, make_room):
        category = room_category_service.create(RoomCategoryCreate(room_name="Suite")).data
        room = make_room(room_category_id=category.id)

        assert room_category_service.delete(category.id).is_success
        assert room_service.get(room.id, STAFF).data.room_category_id is None
