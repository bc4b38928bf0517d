from datetime import datetime

import pytest

from src.patrol_system.patrol_system.core.enums import ScanResult
from src.patrol_system.patrol_system.core.exceptions import AuthenticationError, NotFoundError, ValidationError


def test_scan_inside_radius_is_accepted_and_stored(container, logs_repo, fixed_now):
    outcome = container.patrol_service.scan(
        user_id=2, barcode_value="CP-GATE-A", lat=-6.2002, lng=106.816666, note=" gate locked ", now=fixed_now
    )

    assert outcome.accepted
    assert outcome.message == "Scan accepted at Gate A"
    stored = logs_repo.get_by_id(outcome.record.log_id)
    assert stored.result == ScanResult.ACCEPTED
    assert stored.username == "budi"
    assert stored.guard_name == "Budi Santoso"
    assert stored.scanned_at == fixed_now
    assert stored.notes == "gate locked"
    assert stored.distance_meters == pytest.approx(22.24, abs=0.01)


def test_scan_outside_radius_is_rejected_but_still_stored(container, logs_repo, fixed_now):
    outcome = container.patrol_service.scan(
        user_id=2, barcode_value="CP-GATE-A", lat=-6.201, lng=106.816666, now=fixed_now
    )

    assert not outcome.accepted
    assert outcome.message == "Out of range: 111 m from Gate A (limit 50 m)"
    assert [r.result for r in logs_repo.all()] == [ScanResult.REJECTED]


def test_scan_at_checkpoint_without_location_is_accepted(container, logs_repo):
    outcome = container.patrol_service.scan(user_id=2, barcode_value="CP-LOBBY", lat=1.0, lng=2.0)

    assert outcome.accepted
    assert outcome.record.distance_meters is None
    assert len(logs_repo.all()) == 1


@pytest.mark.parametrize("token", ["NOPE", "CP-WH"])
def test_unknown_or_inactive_checkpoint_is_not_found_and_nothing_is_stored(token, container, logs_repo):
    with pytest.raises(NotFoundError):
        container.patrol_service.scan(user_id=2, barcode_value=token, lat=-6.2, lng=106.8)

    assert logs_repo.all() == []


def test_empty_token_is_a_validation_error(container):
    with pytest.raises(ValidationError):
        container.patrol_service.scan(user_id=2, barcode_value="  ", lat=-6.2, lng=106.8)


@pytest.mark.parametrize("lat,lng", [(None, 1.0), ("x", 1.0), (91, 0), (0, 181), (True, 0)])
def test_bad_coordinates_are_rejected(lat, lng, container, logs_repo):
    with pytest.raises(ValidationError):
        container.patrol_service.scan(user_id=2, barcode_value="CP-GATE-A", lat=lat, lng=lng)

    assert logs_repo.all() == []


def test_inactive_guard_cannot_scan(container, logs_repo):
    with pytest.raises(AuthenticationError):
        container.patrol_service.scan(user_id=3, barcode_value="CP-GATE-A", lat=-6.2, lng=106.816666)

    assert logs_repo.all() == []


def test_list_for_month_uses_local_month(container, add_log):
    add_log(at=datetime(2024, 1, 31, 16, 59), username="budi", checkpoint_id=1)
    add_log(at=datetime(2024, 1, 31, 17, 0), username="budi", checkpoint_id=1)

    assert len(container.patrol_service.list_for_month("1", "2024")) == 1
    assert len(container.patrol_service.list_for_month("2", "2024")) == 1


def test_delete_missing_record_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.patrol_service.delete(999)


def test_purge_removes_records_older_than_three_months(container, logs_repo, add_log):
    now = datetime(2024, 5, 31, 12, 0)
    add_log(at=datetime(2024, 2, 28, 23, 59), username="budi", checkpoint_id=1)
    add_log(at=datetime(2024, 2, 29, 12, 0), username="budi", checkpoint_id=1)
    add_log(at=datetime(2024, 5, 1, 8, 0), username="budi", checkpoint_id=1)

    assert container.patrol_service.retention_cutoff(now) == datetime(2024, 2, 29, 12, 0)
    removed = container.patrol_service.purge_expired(now=now)

    assert removed == 1
    assert [r.scanned_at for r in logs_repo.all()] == [datetime(2024, 2, 29, 12, 0), datetime(2024, 5, 1, 8, 0)]
