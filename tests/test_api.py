"""
HTTP surface tests: authentication, role gates, error bodies and an
end-to-end stay through the API.
"""

from unittest.mock import patch

import jwt

from guesthouse.core.exceptions import ErrorCode
from guesthouse.models.base.enums import UserRole
from guesthouse.services.base.service_result import ServiceResult
from guesthouse.services.mess import PASS_NOT_REDEEMABLE_MESSAGE
from guesthouse.services.mess.food_pass_service import FoodPassService
from tests.conftest import TEST_SECRET, auth_header, make_token, new_uuid

API = "/api/v1"

ROOM_BODY = {
    "room_number": "101",
    "building": "A",
    "floor": 1,
    "room_type": "SARJU",
    "beds": [{"type": "DOUBLE", "quantity": 1}],
}

STAY_BODY = {
    "check_in_date": "2024-06-01T12:00:00+05:30",
    "check_out_date": "2024-06-03T10:00:00+05:30",
    "number_of_people": {"male": 1, "female": 1, "children": 0},
    "place": "Ahmedabad",
    "purpose": "Festival",
}


def create_room(client, headers, **overrides):
    body = dict(ROOM_BODY, **overrides)
    response = client.post(f"{API}/rooms", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAuthentication:

    def test_missing_token(self, client):
        response = client.get(f"{API}/rooms")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == ErrorCode.AUTHENTICATION_FAILED.value

    def test_garbage_token(self, client):
        response = client.get(f"{API}/rooms", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_signed_with_other_secret(self, client):
        token = make_token(new_uuid(), UserRole.STAFF, secret="another-secret")

        response = client.get(f"{API}/rooms", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_unknown_role(self, client):
        token = jwt.encode({"sub": new_uuid(), "role": "JANITOR"}, TEST_SECRET, algorithm="HS256")

        response = client.get(f"{API}/rooms", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_guest_on_staff_route(self, client, guest_headers):
        response = client.post(f"{API}/rooms", json=ROOM_BODY, headers=guest_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == ErrorCode.INSUFFICIENT_PERMISSIONS.value

    def test_categories_need_super_admin(self, client, staff_headers, admin_headers):
        body = {"room_name": "Deluxe", "price": "2500"}

        assert client.post(f"{API}/rooms/categories", json=body, headers=staff_headers).status_code == 403
        assert client.post(f"{API}/rooms/categories", json=body, headers=admin_headers).status_code == 201
        assert client.get(f"{API}/food-passes/categories", headers=staff_headers).status_code == 403


class TestErrorBodies:

    def test_malformed_id_is_400(self, client, staff_headers):
        response = client.get(f"{API}/rooms/not-a-uuid", headers=staff_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == ErrorCode.VALIDATION_ERROR.value

    def test_body_validation_is_400(self, client, staff_headers):
        response = client.post(f"{API}/rooms", json=dict(ROOM_BODY, beds=[]), headers=staff_headers)

        assert response.status_code == 400
        field_errors = response.json()["error"]["details"]["field_errors"]
        assert any("beds" in field for field in field_errors)

    def test_request_id_echoed(self, client, staff_headers):
        response = client.get(
            f"{API}/rooms/{new_uuid()}",
            headers=dict(staff_headers, **{"X-Request-ID": "trace-123"}),
        )

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"
        assert "X-Process-Time" in response.headers

    def test_conflict_is_409(self, client, staff_headers):
        create_room(client, staff_headers)

        response = client.post(f"{API}/rooms", json=ROOM_BODY, headers=staff_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == ErrorCode.ALREADY_EXISTS.value

    def test_service_validation_names_field(self, client, guest_headers):
        request_id = client.post(f"{API}/room-requests", json=STAY_BODY, headers=guest_headers).json()["data"]["id"]

        response = client.put(
            f"{API}/room-requests/{request_id}",
            json={"check_out_date": "2024-05-30T10:00:00+05:30"},
            headers=guest_headers,
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == ErrorCode.VALIDATION_ERROR.value
        assert error["details"] == {"field": "check_out_date"}

    def test_health(self, client, settings):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["version"] == settings.API_VERSION


class TestRooms:

    def test_guest_never_sees_hidden_rooms(self, client, staff_headers, guest_headers):
        create_room(client, staff_headers, room_number="1")
        hidden = create_room(client, staff_headers, room_number="2", is_visible=False)

        listed = client.get(f"{API}/rooms", params={"is_visible": "false"}, headers=guest_headers)
        single = client.get(f"{API}/rooms/{hidden['id']}", headers=guest_headers)

        assert [r["room_number"] for r in listed.json()["data"]] == ["1"]
        assert single.status_code == 404

    def test_static_routes_not_captured_by_id(self, client, staff_headers):
        create_room(client, staff_headers, room_number="1", floor=2)

        stats = client.get(f"{API}/rooms/stats", headers=staff_headers).json()["data"]
        buildings = client.get(f"{API}/rooms/buildings", headers=staff_headers).json()["data"]
        floors = client.get(f"{API}/rooms/floors", params={"building": "A"}, headers=staff_headers).json()["data"]

        assert stats == {"total": 1, "occupied": 0, "available": 1}
        assert buildings == ["A"]
        assert floors == [2]


class TestStayLifecycle:

    def test_request_approve_check_in_scan_check_out(
        self, client, staff_headers, guest_headers, guest_id, directory
    ):
        directory.add(guest_id, "Asha Patel")
        room = create_room(client, staff_headers)

        submitted = client.post(f"{API}/room-requests", json=STAY_BODY, headers=guest_headers)
        assert submitted.status_code == 201
        request_id = submitted.json()["data"]["id"]
        assert submitted.json()["data"]["name"] == "Asha Patel"

        processed = client.put(
            f"{API}/room-requests/{request_id}/process",
            json={"status": "APPROVED", "room_id": room["id"], "guest_names": ["Asha", "Ravi"]},
            headers=staff_headers,
        )
        assert processed.status_code == 200
        assignment_id = processed.json()["data"]["assignment"]["id"]

        checked_in = client.put(f"{API}/room-assignments/{assignment_id}/check-in", headers=staff_headers)
        assert checked_in.status_code == 200
        assert checked_in.json()["data"]["passes_issued"] == 18
        assert checked_in.json()["warnings"] == []

        passes = client.get(f"{API}/food-passes/user/{guest_id}", headers=guest_headers).json()["data"]
        assert len(passes) == 18

        scanned = client.post(f"{API}/food-passes/scan", json={"pass_id": passes[0]["id"]}, headers=staff_headers)
        again = client.post(f"{API}/food-passes/scan", json={"pass_id": passes[0]["id"]}, headers=staff_headers)
        assert scanned.status_code == 200
        assert again.status_code == 400
        assert again.json()["error"]["code"] == ErrorCode.PASS_NOT_REDEEMABLE.value
        assert again.json()["error"]["message"] == PASS_NOT_REDEEMABLE_MESSAGE

        checked_out = client.put(f"{API}/room-assignments/{assignment_id}/check-out", headers=staff_headers)
        assert checked_out.status_code == 200
        assert checked_out.json()["data"]["passes_revoked"] == 17
        assert checked_out.json()["data"]["room_released"] is True

        room_now = client.get(f"{API}/rooms/{room['id']}", headers=staff_headers).json()["data"]
        assert room_now["is_occupied"] is False

    def test_process_twice_is_409(self, client, staff_headers, guest_headers):
        request_id = client.post(f"{API}/room-requests", json=STAY_BODY, headers=guest_headers).json()["data"]["id"]
        url = f"{API}/room-requests/{request_id}/process"

        assert client.put(url, json={"status": "REJECTED"}, headers=staff_headers).status_code == 200
        second = client.put(url, json={"status": "APPROVED"}, headers=staff_headers)

        assert second.status_code == 409
        assert second.json()["error"]["code"] == ErrorCode.REQUEST_NOT_PENDING.value

    def test_check_in_warning_in_body(self, client, staff_headers, guest_id):
        room = create_room(client, staff_headers)
        assignment = client.post(
            f"{API}/room-assignments",
            json={
                "room_id": room["id"],
                "user_id": guest_id,
                "check_in_date": STAY_BODY["check_in_date"],
                "check_out_date": STAY_BODY["check_out_date"],
            },
            headers=staff_headers,
        ).json()["data"]
        failure = ServiceResult.error_result(ErrorCode.DATABASE_ERROR, "Failed to issue food passes")

        with patch.object(FoodPassService, "issue_batch", return_value=failure):
            response = client.put(f"{API}/room-assignments/{assignment['id']}/check-in", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["data"]["assignment"]["checked_in"] is True
        assert [w["code"] for w in response.json()["warnings"]] == [ErrorCode.PASS_ISSUANCE_FAILED.value]

        reissued = client.post(f"{API}/room-assignments/{assignment['id']}/food-passes", headers=staff_headers)
        assert reissued.json()["data"] == {"assignment_id": assignment["id"], "passes_issued": 9}


class TestFoodPassAccess:

    def test_guest_reads_only_own_passes(self, client, guest_headers, guest_id):
        own = client.get(f"{API}/food-passes/user/{guest_id}", headers=guest_headers)
        other = client.get(f"{API}/food-passes/user/{new_uuid()}", headers=guest_headers)

        assert own.status_code == 200
        assert own.json()["data"] == []
        assert other.status_code == 403

    def test_generate_and_filter_by_date(self, client, staff_headers, guest_id):
        response = client.post(
            f"{API}/food-passes/generate",
            json={
                "user_id": guest_id,
                "member_names": ["Asha"],
                "start_date": "2024-06-01",
                "end_date": "2024-06-02",
            },
            headers=staff_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"] == {"count": 6}

        listed = client.get(
            f"{API}/food-passes/user/{guest_id}",
            params={"date": "2024-06-02"},
            headers=auth_header(new_uuid(), UserRole.STAFF),
        )
        assert len(listed.json()["data"]) == 3
