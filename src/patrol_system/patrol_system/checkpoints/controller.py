from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.http import fail_from, fail_unexpected, json_body, ok
from ..common.validators import parse_bool
from ..container import Container
from ..core.enums import Permission
from ..core.exceptions import DomainError
from ..users.decorators import permission_required

# JSON body key -> service field
_FIELDS = {
    "name": "name",
    "barcodeValue": "barcode_value",
    "latitude": "latitude",
    "longitude": "longitude",
    "radiusMeters": "radius_meters",
}


def _fields_from(data: dict) -> dict:
    out = {field: data[key] for key, field in _FIELDS.items() if key in data}
    if "active" in data:
        out["active"] = parse_bool(data["active"])
    return out


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/checkpoints", methods=["GET"], endpoint="api_checkpoints")
    @permission_required(auth, Permission.CHECKPOINTS_READ)
    def list_checkpoints():
        try:
            return ok([cp.to_dict() for cp in container.checkpoint_service.list_checkpoints()])
        except Exception as e:
            return fail_unexpected(e, "listing checkpoints")

    @app.route("/api/checkpoints/<int:checkpoint_id>", methods=["GET"], endpoint="api_checkpoint_detail")
    @permission_required(auth, Permission.CHECKPOINTS_READ)
    def get_checkpoint(checkpoint_id: int):
        try:
            return ok(container.checkpoint_service.get(checkpoint_id).to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "reading a checkpoint")

    @app.route("/api/checkpoints", methods=["POST"], endpoint="api_checkpoints_create")
    @permission_required(auth, Permission.CHECKPOINTS_WRITE)
    def create_checkpoint():
        try:
            fields = _fields_from(json_body())
            fields.setdefault("name", None)
            fields.setdefault("barcode_value", None)
            cp = container.checkpoint_service.create(**fields)
            return ok(cp.to_dict(), 201)
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "creating a checkpoint")

    @app.route("/api/checkpoints/<int:checkpoint_id>", methods=["PUT"], endpoint="api_checkpoints_update")
    @permission_required(auth, Permission.CHECKPOINTS_WRITE)
    def update_checkpoint(checkpoint_id: int):
        try:
            data = json_body()
            cp = container.checkpoint_service.update(checkpoint_id, **_fields_from(data))
            return ok(cp.to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "updating a checkpoint")

    @app.route("/api/checkpoints/<int:checkpoint_id>", methods=["DELETE"], endpoint="api_checkpoints_delete")
    @permission_required(auth, Permission.CHECKPOINTS_WRITE)
    def delete_checkpoint(checkpoint_id: int):
        try:
            container.checkpoint_service.delete(checkpoint_id)
            return ok({"deleted": checkpoint_id})
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "deleting a checkpoint")

    @app.route("/api/checkpoints/<int:checkpoint_id>/qr", methods=["GET"], endpoint="api_checkpoint_qr")
    @permission_required(auth, Permission.CHECKPOINTS_READ)
    def checkpoint_qr(checkpoint_id: int):
        """Printable QR code carrying the checkpoint's scan token."""
        try:
            png = container.checkpoint_service.qr_png(checkpoint_id)
            return send_file(io.BytesIO(png), mimetype="image/png", download_name=f"checkpoint_{checkpoint_id}.png")
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "rendering a checkpoint QR code")
