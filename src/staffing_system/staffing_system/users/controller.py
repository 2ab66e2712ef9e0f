from __future__ import annotations

from flask import Flask, g

from ..common.api import auth_required, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    @app.route("/api/auth/register", methods=["POST"], endpoint="register_user")
    def register_user():
        body = json_body()
        user = container.user_service.register(
            name=body.get("name"),
            username=body.get("username"),
            email=body.get("email"),
            password=body.get("password"),
        )
        token = container.auth_service.issue_token(user)
        return ok(201, message="Account created", data=user.as_dict(), token=token)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        result = container.auth_service.login(body.get("username") or body.get("email") or "", body.get("password") or "")
        return ok(data=result.user.as_dict(), token=result.token)

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(data=g.current_user.as_dict())

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @login_required
    def list_users():
        users = container.user_service.list_users()
        return ok(count=len(users), data=[u.as_dict() for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @login_required
    def create_user():
        body = json_body()
        user = container.user_service.register(
            name=body.get("name"),
            username=body.get("username"),
            email=body.get("email"),
            password=body.get("password"),
        )
        data = user.as_dict()
        data["token"] = container.auth_service.issue_token(user)
        return ok(201, data=data)

    @app.route("/api/users/<user_id>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(user_id):
        return ok(data=container.user_service.get(user_id=user_id).as_dict())

    @app.route("/api/users/<user_id>", methods=["PUT"], endpoint="update_user")
    @login_required
    def update_user(user_id):
        body = json_body()
        user = container.user_service.update(
            user_id=user_id,
            name=body.get("name"),
            username=body.get("username"),
            email=body.get("email"),
            password=body.get("password"),
        )
        return ok(data=user.as_dict())

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @login_required
    def delete_user(user_id):
        container.user_service.delete(user_id=user_id)
        return ok(message="User removed")
