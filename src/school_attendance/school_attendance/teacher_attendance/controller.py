from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..attendance.policy import require_staff
from ..common.datetime_utils import parse_optional_date
from ..common.http import current_actor
from ..common.qr import decode_qr_image, render_qr_png
from ..common.validators import parse_limit, parse_page
from ..container import Container
from ..core.constants import DEFAULT_TEACHER_PAGE_LIMIT
from ..core.exceptions import ValidationError
from .service import require_admin


def register(app: Flask, container: Container) -> None:
    def _scanned_code() -> str:
        upload = request.files.get("image")
        if upload is not None and upload.filename:
            code = decode_qr_image(upload.stream)
            if not code:
                raise ValidationError("No QR code found in image", field="image")
            return code

        data = request.get_json(silent=True) or request.form
        return (data.get("qr_code") or "").strip()

    @app.route("/teacher-attendance/scan", methods=["POST"], endpoint="teacher_attendance_scan")
    def teacher_attendance_scan():
        actor = current_actor()
        require_staff(actor)
        result = container.teacher_attendance_service.scan(actor, _scanned_code())
        return jsonify(result.to_dict()), 200

    @app.route("/teacher-attendance/qr", methods=["GET"], endpoint="teacher_attendance_qr")
    def teacher_attendance_qr():
        actor = current_actor()
        token = container.teacher_attendance_service.checkin_token(actor)
        return send_file(render_qr_png(token), mimetype="image/png")

    @app.route("/teacher-attendance/today", methods=["GET"], endpoint="teacher_attendance_today")
    def teacher_attendance_today():
        actor = current_actor()
        require_admin(actor)
        args = request.args
        result = container.teacher_attendance_service.list_records(
            actor,
            name=args.get("name"),
            work_date=parse_optional_date(args.get("date"), "date"),
            page=parse_page(args.get("page")),
            limit=parse_limit(args.get("limit"), default=DEFAULT_TEACHER_PAGE_LIMIT),
        )
        return jsonify(result), 200

    @app.route("/teacher-attendance/notifications", methods=["GET"], endpoint="teacher_attendance_notifications")
    def teacher_attendance_notifications():
        actor = current_actor()
        require_admin(actor)
        result = container.teacher_attendance_service.notifications(
            actor,
            page=parse_page(request.args.get("page")),
            limit=parse_limit(request.args.get("limit"), default=DEFAULT_TEACHER_PAGE_LIMIT),
        )
        return jsonify(result), 200
