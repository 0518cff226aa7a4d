from __future__ import annotations

from flask import Flask, jsonify, session

from ..access.context import require_caller
from ..common.http import api_view, caller_from_session, json_body
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @api_view("log in")
    def login():
        body = json_body()
        user = container.auth_service.authenticate(str(body.get("email") or ""), str(body.get("password") or ""))

        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["email"] = user.email
        session["role"] = user.role.value
        session["school_id"] = user.school_id
        return jsonify({"success": True, "user": _user_dict(user)})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @api_view("fetch session")
    def me():
        caller = require_caller(caller_from_session())
        return jsonify(
            {
                "user": {
                    "id": caller.caller_id,
                    "name": caller.name,
                    "email": caller.email,
                    "role": caller.role.value,
                    "school_id": caller.school_id,
                }
            }
        )

    @app.route("/api/auth/signup", methods=["POST"], endpoint="signup")
    @api_view("create account")
    def signup():
        user = container.user_service.signup(json_body())
        message = (
            "Account created successfully. You are now the admin."
            if user.role == Role.ADMIN
            else "Account created successfully. Please login."
        )
        return jsonify({"success": True, "message": message, "user": _user_dict(user)}), 201

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @api_view("fetch users")
    def list_users():
        users = container.user_service.list_users(caller=caller_from_session())
        return jsonify({"users": [u.to_dict() for u in users]})

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @app.route("/api/users/create", methods=["POST"], endpoint="create_user_legacy")
    @api_view("create user")
    def create_user():
        caller = caller_from_session()
        user = container.user_service.create_user(caller=caller, payload=json_body() if caller else {})
        return jsonify({"success": True, "user": _user_dict(user)}), 201

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @api_view("update user")
    def update_user(user_id: int):
        caller = caller_from_session()
        user = container.user_service.update_user(
            caller=caller,
            user_id=user_id,
            payload=json_body() if caller else {},
        )
        return jsonify({"success": True, "user": _user_dict(user)})

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @api_view("delete user")
    def delete_user(user_id: int):
        container.user_service.delete_user(caller=caller_from_session(), user_id=user_id)
        return jsonify({"success": True, "message": "User deleted successfully"})

    @app.route("/api/admin/reset-password", methods=["POST"], endpoint="reset_password")
    @api_view("reset password")
    def reset_password():
        body = json_body()
        created = container.user_service.reset_password(
            email=body.get("email"),
            new_password=body.get("new_password"),
            secret_key=body.get("secret_key"),
        )
        message = "Admin user created and password set" if created else "Password updated successfully"
        return jsonify({"success": True, "message": message, "created": created})


def _user_dict(user) -> dict:
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "school_id": user.school_id,
    }
