from __future__ import annotations

from flask import Flask

from ..common.http import fail_from, fail_unexpected, json_body, ok
from ..common.validators import parse_bool
from ..container import Container
from ..core.enums import Permission
from ..core.exceptions import DomainError
from .decorators import current_user, permission_required, token_required


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        try:
            data = json_body()
            result = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
            return ok(result.to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "logging in")

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @token_required(auth)
    def me():
        return ok(current_user().to_dict())

    @app.route("/api/roles", methods=["GET"], endpoint="api_roles")
    @permission_required(auth, Permission.ROLES_READ)
    def list_roles():
        try:
            return ok([r.to_dict() for r in container.user_service.list_roles()])
        except Exception as e:
            return fail_unexpected(e, "listing roles")

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @permission_required(auth, Permission.USERS_READ)
    def list_users():
        try:
            return ok([u.to_dict() for u in container.user_service.list_users()])
        except Exception as e:
            return fail_unexpected(e, "listing users")

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="api_user_detail")
    @permission_required(auth, Permission.USERS_READ)
    def get_user(user_id: int):
        try:
            return ok(container.user_service.get_user(user_id).to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "reading a user")

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @permission_required(auth, Permission.USERS_WRITE)
    def create_user():
        try:
            data = json_body()
            user_id = container.user_service.create_user(
                name=data.get("name", ""),
                username=data.get("username", ""),
                password=data.get("password", ""),
                role=data.get("role", ""),
                phone=data.get("phone"),
                is_active=parse_bool(data.get("isActive"), default=True),
            )
            return ok(container.user_service.get_user(user_id).to_dict(), 201)
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "creating a user")

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="api_users_update")
    @permission_required(auth, Permission.USERS_WRITE)
    def update_user(user_id: int):
        try:
            data = json_body()
            user = container.user_service.update_user(
                user_id=user_id,
                name=data.get("name"),
                username=data.get("username"),
                role=data.get("role"),
                phone=data.get("phone"),
                is_active=parse_bool(data["isActive"]) if "isActive" in data else None,
                password=data.get("password") or None,
            )
            return ok(user.to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "updating a user")

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_users_delete")
    @permission_required(auth, Permission.USERS_WRITE)
    def delete_user(user_id: int):
        try:
            container.user_service.delete_user(actor_user_id=current_user().user_id, user_id=user_id)
            return ok({"deleted": user_id})
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "deleting a user")
