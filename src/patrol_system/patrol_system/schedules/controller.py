from __future__ import annotations

from flask import Flask

from ..common.http import fail_from, fail_unexpected, json_body, ok
from ..container import Container
from ..core.enums import Permission
from ..core.exceptions import DomainError
from ..users.decorators import permission_required


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/settings/schedule", methods=["GET"], endpoint="api_schedule")
    @permission_required(auth, Permission.SETTINGS_READ)
    def get_schedule():
        try:
            return ok(container.schedule_service.get_schedule().to_dict())
        except Exception as e:
            return fail_unexpected(e, "reading the coverage schedule")

    @app.route("/api/settings/schedule", methods=["PUT"], endpoint="api_schedule_update")
    @permission_required(auth, Permission.SETTINGS_WRITE)
    def update_schedule():
        try:
            data = json_body()
            schedule = container.schedule_service.update(
                start_hour=data.get("startHour"),
                interval_hours=data.get("intervalHours"),
            )
            return ok(schedule.to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "updating the coverage schedule")
