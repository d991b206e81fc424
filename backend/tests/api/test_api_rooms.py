"""
房间 API 测试
覆盖 /api/rooms 与 /api/rooms/availability
"""
from fastapi.testclient import TestClient


class TestRooms:
    """房间列表"""

    def test_list_rooms(self, client: TestClient, sample_room, standard_room):
        """测试获取房间列表"""
        response = client.get("/api/rooms")

        assert response.status_code == 200
        data = response.json()
        assert [r["room_number"] for r in data] == ["101", "105"]
        assert data[0]["price"] == 100.0
        assert data[0]["features"] == ["King bed"]
        assert data[0]["current_status"] == "available"


class TestAvailability:
    """可用房查询"""

    def test_dates_required(self, client: TestClient):
        """测试缺少日期"""
        response = client.get("/api/rooms/availability", params={"check_in": "2024-07-10"})

        assert response.status_code == 400
        assert response.json()["error"] == "Check-in and check-out dates are required"

    def test_invalid_range(self, client: TestClient):
        """测试离店早于入住"""
        response = client.get("/api/rooms/availability",
                              params={"check_in": "2024-07-12", "check_out": "2024-07-10"})

        assert response.status_code == 400
        assert response.json()["errors"] == ["Check-out date must be after check-in date"]

    def test_booked_room_is_excluded(self, client: TestClient, sample_room, standard_room):
        """测试已预订房间不出现"""
        client.post("/api/book-room", json={
            "room_id": sample_room.id,
            "customer_name": "Jane Doe",
            "customer_email": "jane@example.com",
            "customer_phone": "0712345678",
            "id_number": "P1234567",
            "check_in": "2024-07-10",
            "check_out": "2024-07-12",
            "guests": 1,
            "payment_method": "cash",
        })

        overlapping = client.get("/api/rooms/availability",
                                 params={"check_in": "2024-07-11", "check_out": "2024-07-14"})
        adjacent = client.get("/api/rooms/availability",
                              params={"check_in": "2024-07-12", "check_out": "2024-07-14"})

        assert [r["room_number"] for r in overlapping.json()] == ["101"]
        assert [r["room_number"] for r in adjacent.json()] == ["101", "105"]

    def test_room_type_filter(self, client: TestClient, sample_room, standard_room):
        """测试房型过滤"""
        response = client.get("/api/rooms/availability", params={
            "check_in": "2024-07-10", "check_out": "2024-07-12", "room_type": "standard"
        })

        assert response.status_code == 200
        assert [r["room_type"] for r in response.json()] == ["standard"]
