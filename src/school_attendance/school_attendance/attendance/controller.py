from __future__ import annotations

from flask import Flask, jsonify, request, send_file, url_for

from ..common.datetime_utils import parse_optional_date
from ..common.http import current_actor
from ..common.qr import render_qr_png
from ..common.validators import parse_bool, parse_class_filter, parse_limit, parse_page
from ..container import Container
from .policy import require_history_access, require_staff


def register(app: Flask, container: Container) -> None:
    def _mark_url(student_id: int) -> str:
        base = (app.config.get("PUBLIC_BASE_URL") or "").rstrip("/")
        if base:
            return f"{base}{url_for('attendance_mark_via_url', student_id=student_id)}"
        return url_for("attendance_mark_via_url", student_id=student_id, _external=True)

    @app.route("/attendance/students", methods=["GET"], endpoint="attendance_students")
    def attendance_students():
        actor = current_actor()
        require_staff(actor)
        args = request.args
        result = container.attendance_service.list_students(
            actor,
            search=args.get("search"),
            class_number=parse_class_filter(args.get("class")),
            descending=(args.get("sort") or "asc").strip().lower() == "desc",
            page=parse_page(args.get("page")),
            limit=parse_limit(args.get("limit"), default=int(app.config.get("STUDENT_PAGE_SIZE", 10))),
        )
        return jsonify(result), 200

    @app.route("/attendance/manual", methods=["POST"], endpoint="attendance_manual")
    def attendance_manual():
        actor = current_actor()
        require_staff(actor)
        data = request.get_json(silent=True) or request.form

        result = container.attendance_service.mark_manual(
            actor,
            student_id=data.get("studentId"),
            status=data.get("status"),
            subject=data.get("subject"),
            notes=data.get("notes"),
            attendance_by_nfc=parse_bool(data.get("attendanceByNFC")),
        )
        if result.created:
            return jsonify({"message": "Attendance marked successfully", "attendance": result.record.to_dict()}), 201
        return jsonify({"message": "Attendance updated successfully", "attendance": result.record.to_dict()}), 200

    @app.route("/attendance/mark/<int:student_id>", methods=["GET"], endpoint="attendance_mark_via_url")
    def attendance_mark_via_url(student_id: int):
        result = container.attendance_service.mark_via_url(student_id)
        message = "Attendance marked successfully" if result.created else "Attendance updated successfully"
        return jsonify({"message": message, "attendance": result.record.to_dict()}), 201 if result.created else 200

    @app.route("/attendance/qr/<int:student_id>", methods=["GET"], endpoint="attendance_student_qr")
    def attendance_student_qr(student_id: int):
        actor = current_actor()
        require_staff(actor)
        student = container.attendance_service.get_student(actor, student_id)
        return send_file(render_qr_png(_mark_url(student.user_id)), mimetype="image/png")

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    def attendance_history():
        actor = current_actor()
        require_history_access(actor)
        args = request.args
        result = container.attendance_history_service.history(
            actor,
            start_date=parse_optional_date(args.get("startDate"), "startDate"),
            end_date=parse_optional_date(args.get("endDate"), "endDate"),
            class_number=parse_class_filter(args.get("class")),
            search=args.get("search"),
            self_only=parse_bool(args.get("self")),
            page=parse_page(args.get("page")),
            limit=parse_limit(args.get("limit"), default=int(app.config.get("HISTORY_PAGE_SIZE", 50))),
        )
        payload = {"message": "Unique student attendance records retrieved successfully"}
        payload.update(result.to_dict())
        return jsonify(payload), 200

    @app.route("/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        actor = current_actor()
        require_staff(actor)
        result = container.attendance_stats_service.build_stats(
            actor,
            class_number=parse_class_filter(request.args.get("class")),
            day=parse_optional_date(request.args.get("date"), "date"),
        )
        return jsonify(result.to_dict()), 200

    @app.route("/attendance/percentage/today", methods=["GET"], endpoint="attendance_percentage_today")
    def attendance_percentage_today():
        actor = current_actor()
        require_staff(actor)
        return jsonify(container.attendance_stats_service.today_percentage(actor).to_dict()), 200
