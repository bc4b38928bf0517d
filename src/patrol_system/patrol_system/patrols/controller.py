from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import utc_now
from ..common.http import fail, fail_from, fail_unexpected, json_body, ok
from ..container import Container
from ..core.enums import Permission
from ..core.exceptions import DomainError
from ..users.decorators import current_user, permission_required


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @permission_required(auth, Permission.SCAN_CREATE)
    def scan():
        """Record one checkpoint scan; 400 with the measured distance when out of range."""
        try:
            data = json_body()
            outcome = container.patrol_service.scan(
                user_id=current_user().user_id,
                barcode_value=data.get("barcodeValue") or data.get("token") or "",
                lat=data.get("lat"),
                lng=data.get("lng"),
                note=data.get("note"),
            )
            payload = outcome.record.to_dict(utc_offset_hours=container.patrol_service.utc_offset_hours)
            payload["RadiusMeters"] = outcome.decision.radius_meters
            payload["message"] = outcome.message
            if outcome.accepted:
                return ok(payload)
            return fail(outcome.message, 400, data=payload)
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "recording a scan")

    @app.route("/api/logs", methods=["GET"], endpoint="api_logs")
    @permission_required(auth, Permission.LOGS_READ)
    def list_logs():
        try:
            records = container.patrol_service.list_for_month(request.args.get("month"), request.args.get("year"))
            offset = container.patrol_service.utc_offset_hours
            return ok([r.to_dict(utc_offset_hours=offset) for r in records])
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "listing attendance records")

    @app.route("/api/logs/<int:log_id>", methods=["DELETE"], endpoint="api_logs_delete")
    @permission_required(auth, Permission.LOGS_DELETE)
    def delete_log(log_id: int):
        try:
            container.patrol_service.delete(log_id)
            return ok({"deleted": log_id})
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "deleting an attendance record")

    @app.route("/api/logs/purge", methods=["POST"], endpoint="api_logs_purge")
    @permission_required(auth, Permission.LOGS_DELETE)
    def purge_logs():
        try:
            now = utc_now()
            cutoff = container.patrol_service.retention_cutoff(now)
            removed = container.patrol_service.purge_expired(now=now)
            return ok({"removed": removed, "cutoff": cutoff.isoformat()})
        except Exception as e:
            return fail_unexpected(e, "purging attendance records")
