from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.http import current_actor
from ..common.validators import parse_bool
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        identifier = data.get("username") or data.get("email") or ""
        password = data.get("password") or ""

        actor = container.auth_service.authenticate(identifier, password)

        session.clear()
        session.permanent = parse_bool(data.get("remember_me"))

        session["user_id"] = actor.user_id
        session["role"] = actor.role.value
        session["school_id"] = actor.school_id
        session["name"] = actor.name

        logger.info("User %s logged in (role=%s, school=%s)", actor.user_id, actor.role.value, actor.school_id)
        return jsonify({"message": "Login successful", "user": actor.to_dict()}), 200

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"}), 200

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    def me():
        return jsonify({"user": current_actor().to_dict()}), 200
