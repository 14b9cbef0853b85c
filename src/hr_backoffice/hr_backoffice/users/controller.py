from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(
            str(data.get("login") or data.get("email") or data.get("mobile") or ""),
            str(data.get("password") or ""),
            otp=data.get("otp"),
        )

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        app.permanent_session_lifetime = timedelta(days=7)
        session["user_id"] = s_user.identity_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        return ok(s_user.as_dict())

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/auth/send-otp", methods=["POST"], endpoint="send_otp")
    def send_otp():
        data = json_body()
        code = container.auth_service.send_admin_otp(str(data.get("mobile") or ""))
        # No SMS gateway here; debug builds hand the code back for manual testing.
        if app.config.get("DEBUG"):
            return ok(message="OTP sent", otp=code)
        return ok(message="OTP sent")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok({"id": session["user_id"], "name": session.get("name"), "role": session.get("role")})
