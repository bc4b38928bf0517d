import pytest

from src.patrol_system.patrol_system.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_create_checkpoint_defaults_radius(container):
    cp = container.checkpoint_service.create(name="Parking", barcode_value="CP-PARK", latitude=-6.3, longitude=106.7)

    assert cp.radius_meters == 50
    assert cp.active
    assert cp.has_location


def test_create_checkpoint_without_location(container):
    cp = container.checkpoint_service.create(name="Roof", barcode_value="CP-ROOF", latitude="", longitude=None)

    assert cp.latitude is None and cp.longitude is None


@pytest.mark.parametrize(
    "fields",
    [
        dict(name="", barcode_value="X"),
        dict(name="X", barcode_value=" "),
        dict(name="X", barcode_value="X", latitude=1.0),
        dict(name="X", barcode_value="X", latitude=95, longitude=0),
        dict(name="X", barcode_value="X", latitude=0, longitude=-190),
        dict(name="X", barcode_value="X", radius_meters=0),
        dict(name="X", barcode_value="X", radius_meters="wide"),
    ],
)
def test_create_checkpoint_validation(fields, container):
    with pytest.raises(ValidationError):
        container.checkpoint_service.create(**fields)


def test_duplicate_scan_token_conflicts(container):
    with pytest.raises(ConflictError):
        container.checkpoint_service.create(name="Gate A copy", barcode_value="CP-GATE-A")
    with pytest.raises(ConflictError):
        container.checkpoint_service.update(2, barcode_value="CP-GATE-A")


def test_update_merges_with_current_values(container):
    cp = container.checkpoint_service.update(1, radius_meters=80, active=False)

    assert cp.name == "Gate A"
    assert cp.latitude == -6.2
    assert cp.radius_meters == 80
    assert not cp.active


def test_update_can_clear_location(container):
    cp = container.checkpoint_service.update(1, latitude=None, longitude=None)

    assert not cp.has_location


def test_resolve_for_scan_hides_inactive_checkpoints(container):
    assert container.checkpoint_service.resolve_for_scan(" CP-GATE-A ").name == "Gate A"
    with pytest.raises(NotFoundError):
        container.checkpoint_service.resolve_for_scan("CP-WH")


def test_delete_and_get_missing(container):
    container.checkpoint_service.delete(2)

    with pytest.raises(NotFoundError):
        container.checkpoint_service.get(2)
    with pytest.raises(NotFoundError):
        container.checkpoint_service.delete(2)


def test_qr_png_encodes_checkpoint(container):
    png = container.checkpoint_service.qr_png(1)

    assert png.startswith(b"\x89PNG")
