from __future__ import annotations

import io
from datetime import timedelta

from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Role
from tests.fakes import make_staff, make_student


def test_login_sets_session_and_me_returns_actor(client, users):
    users.add(make_staff(1, role=Role.ADMIN, username="admin", password_hash=generate_password_hash("admin123")))

    resp = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"] == {"userId": 1, "role": "admin", "schoolId": 1, "name": "Admin 1"}

    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_bad_login_is_401(client, users):
    users.add(make_staff(1, username="t", password_hash=generate_password_hash("pw")))

    resp = client.post("/auth/login", json={"username": "t", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid username or password"}


def test_protected_endpoints_require_login(client):
    resp = client.get("/attendance/stats")

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Authentication required"}


def test_stats_endpoint(client, users, attendance_repo, fixed_now, login_as):
    teacher = users.add(make_staff(100))
    for i in (1, 2, 3):
        users.add(make_student(i, class_number=5))
    attendance_repo.seed(student_id=1, day=fixed_now.date(), teacher_id=teacher.user_id)
    attendance_repo.seed(student_id=2, day=fixed_now.date())
    login_as(teacher)

    resp = client.get("/attendance/stats?class=5")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["today"]["date"] == "2024-03-15"
    assert body["today"]["classWise"]["5"]["attendancePercentage"] == "66.67%"
    assert body["daily"] == [{"date": "2024-03-15", "totalPresent": 2, "totalAbsent": 0, "totalLate": 0}]


def test_stats_rejects_bad_parameters(client, users, login_as):
    login_as(users.add(make_staff(100)))

    bad_date = client.get("/attendance/stats?date=15-03-2024")
    bad_class = client.get("/attendance/stats?class=12")

    assert bad_date.status_code == 400
    assert bad_date.get_json()["field"] == "date"
    assert bad_class.status_code == 400
    assert bad_class.get_json()["field"] == "class"


def test_students_get_403_on_stats(client, users, login_as):
    login_as(users.add(make_student(1)))

    resp = client.get("/attendance/stats")

    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Access denied"}


def test_history_empty_payload(client, users, login_as):
    login_as(users.add(make_staff(100, role=Role.ADMIN)))

    resp = client.get("/attendance/history?startDate=2024-01-01&endDate=2024-01-01&class=5")

    assert resp.status_code == 200
    assert resp.get_json() == {
        "message": "Unique student attendance records retrieved successfully",
        "attendance": [],
        "pagination": {"page": 1, "limit": 50, "total": 0, "pages": 0},
    }


def test_manual_mark_creates_then_updates(client, users, attendance_repo, fixed_now, login_as):
    login_as(users.add(make_staff(100)))
    users.add(make_student(1))

    created = client.post("/attendance/manual", json={"studentId": 1, "status": "absent"})
    updated = client.post("/attendance/manual", json={"studentId": 1, "status": "present"})

    assert created.status_code == 201
    assert created.get_json()["message"] == "Attendance marked successfully"
    assert updated.status_code == 200
    assert updated.get_json()["message"] == "Attendance updated successfully"
    assert updated.get_json()["attendance"]["status"] == "present"
    assert len(attendance_repo.records) == 1
    assert attendance_repo.get_for_student_and_date(1, fixed_now.date()).status == AttendanceStatus.PRESENT


def test_manual_mark_cross_school_is_404(client, users, login_as):
    login_as(users.add(make_staff(100)))
    users.add(make_student(1, school_id=2))

    resp = client.post("/attendance/manual", json={"studentId": 1, "status": "present"})

    assert resp.status_code == 404


def test_mark_via_url_needs_no_login(client, users, attendance_repo, fixed_now):
    users.add(make_student(1))

    resp = client.get("/attendance/mark/1")

    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["method"] == "url"
    assert attendance_repo.get_for_student_and_date(1, fixed_now.date()) is not None


def test_student_qr_is_a_png(client, users, login_as):
    login_as(users.add(make_staff(100)))
    users.add(make_student(1))

    resp = client.get("/attendance/qr/1")

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_students_listing_and_percentage(client, users, attendance_repo, fixed_now, login_as):
    login_as(users.add(make_staff(100)))
    users.add(make_student(1))
    users.add(make_student(2))
    attendance_repo.seed(student_id=2, day=fixed_now.date())

    listing = client.get("/attendance/students?limit=1&page=2").get_json()
    pct = client.get("/attendance/percentage/today").get_json()

    assert [s["id"] for s in listing["students"]] == [2]
    assert listing["students"][0]["attendanceStatus"] == "present"
    assert listing["pagination"] == {"page": 2, "limit": 1, "total": 2, "pages": 2}
    assert pct["attendancePercentage"] == "50.00%"


def test_teacher_scan_endpoint(client, users, login_as):
    login_as(users.add(make_staff(10)))

    first = client.post("/teacher-attendance/scan", json={"qr_code": "TEST_CHECKIN:1"})
    second = client.post("/teacher-attendance/scan", json={"qr_code": "TEST_CHECKIN:1"})
    third = client.post("/teacher-attendance/scan", json={"qr_code": "TEST_CHECKIN:1"})

    assert first.get_json()["type"] == "checkin"
    assert second.get_json()["type"] == "checkout"
    assert third.status_code == 400
    assert third.get_json() == {"error": "Already checked in and out today."}


def test_teacher_views_are_admin_only(client, users, login_as):
    login_as(users.add(make_staff(10)))

    assert client.get("/teacher-attendance/today").status_code == 403
    assert client.get("/teacher-attendance/notifications").status_code == 403
    assert client.get("/teacher-attendance/qr").status_code == 403


def test_admin_notifications_endpoint(client, users, login_as):
    login_as(users.add(make_staff(1, role=Role.ADMIN)))

    resp = client.get("/teacher-attendance/notifications")

    assert resp.status_code == 200
    assert resp.get_json() == {
        "notifications": ["No attendance records found for today."],
        "totalRecords": 0,
        "page": 1,
        "limit": 10,
    }


def test_scan_with_unreadable_image_is_400(client, users, login_as):
    login_as(users.add(make_staff(10)))

    resp = client.post(
        "/teacher-attendance/scan",
        data={"image": (io.BytesIO(b"not an image"), "scan.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid image", "field": "image"}


def test_role_is_checked_before_parameters(client, users, login_as):
    login_as(users.add(make_student(1)))

    assert client.get("/attendance/stats?class=99").status_code == 403
    assert client.get("/attendance/stats?date=not-a-date").status_code == 403
    assert client.get("/attendance/students?page=0").status_code == 403
    assert client.get("/teacher-attendance/notifications?page=0").status_code == 403

    resp = client.post("/attendance/manual", json={"studentId": "x", "status": "bogus"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Access denied"}


def test_parents_are_denied_history_before_date_parsing(client, users, login_as):
    login_as(users.add(make_staff(50, role=Role.PARENT)))

    resp = client.get("/attendance/history?startDate=bad")

    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Access denied"}


def test_session_lifetime_is_configured_on_the_app(app):
    assert app.permanent_session_lifetime == timedelta(days=7)
