import pytest

from src.patrol_system.patrol_system.checkpoints.model import Checkpoint
from src.patrol_system.patrol_system.geofence.evaluator import effective_radius, evaluate, haversine_meters


def _gate(**overrides) -> Checkpoint:
    fields = dict(
        checkpoint_id=1,
        name="Gate A",
        barcode_value="CP-GATE-A",
        latitude=-6.2,
        longitude=106.816666,
        radius_meters=50.0,
    )
    fields.update(overrides)
    return Checkpoint(**fields)


def test_haversine_same_point_is_zero():
    assert haversine_meters(-6.2, 106.816666, -6.2, 106.816666) == 0


def test_haversine_one_millidegree_latitude():
    assert haversine_meters(0.0, 0.0, 0.001, 0.0) == pytest.approx(111.19, abs=0.01)


def test_haversine_is_symmetric():
    a = haversine_meters(-6.2, 106.8, -6.25, 106.9)
    b = haversine_meters(-6.25, 106.9, -6.2, 106.8)
    assert a == pytest.approx(b)


def test_haversine_antipodal_points_do_not_blow_up():
    d = haversine_meters(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(3.141592653589793 * 6371000, rel=1e-9)


def test_scan_inside_radius_is_accepted():
    decision = evaluate(-6.2004, 106.816666, _gate())

    assert decision.accepted
    assert decision.distance_meters == pytest.approx(44.48, abs=0.01)
    assert decision.reason is None


def test_scan_outside_radius_is_rejected_with_distance_and_limit():
    decision = evaluate(-6.201, 106.816666, _gate())

    assert not decision.accepted
    assert decision.distance_meters == pytest.approx(111.19, abs=0.01)
    assert decision.reason == "Out of range: 111 m from Gate A (limit 50 m)"


def test_checkpoint_without_location_is_accepted_without_distance():
    decision = evaluate(10.0, 10.0, _gate(latitude=None, longitude=None))

    assert decision.accepted
    assert decision.distance_meters is None
    assert not decision.location_checked


def test_missing_radius_uses_default():
    decision = evaluate(-6.2006, 106.816666, _gate(radius_meters=None), default_radius=100)

    assert decision.accepted
    assert decision.radius_meters == 100


def test_effective_radius_ignores_non_positive_values():
    assert effective_radius(None) == 50
    assert effective_radius(0) == 50
    assert effective_radius(-5, default=20) == 20
    assert effective_radius(75) == 75
