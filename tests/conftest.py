from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.patrol_system.patrol_system.checkpoints.model import Checkpoint
from src.patrol_system.patrol_system.container import wire_services
from src.patrol_system.patrol_system.core.enums import ScanResult
from src.patrol_system.patrol_system.patrols.model import PatrolLog
from src.patrol_system.patrol_system.schedules.model import CoverageSchedule
from src.patrol_system.patrol_system.users.model import User
from src.patrol_system.patrol_system.users.role_model import Role

# Cheap hashing keeps the suite fast.
HASH_METHOD = "pbkdf2:sha256:1000"


def make_hash(password: str) -> str:
    return generate_password_hash(password, method=HASH_METHOD)


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id: dict[int, User] = {u.user_id: u for u in users}
        self._id = max(self._by_id, default=0)
        self.last_logins: dict[int, datetime] = {}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: u.name)

    def create_user(self, *, name, username, password_hash, role, is_active=True, phone=None) -> int:
        self._id += 1
        self._by_id[self._id] = User(
            user_id=self._id,
            name=name,
            username=username,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
            phone=phone,
        )
        return self._id

    def update_user(self, *, user_id, name, username, role, is_active, phone, password_hash=None) -> bool:
        current = self._by_id.get(user_id)
        if not current:
            return False
        self._by_id[user_id] = User(
            user_id=user_id,
            name=name,
            username=username,
            password_hash=password_hash or current.password_hash,
            role=role,
            is_active=is_active,
            phone=phone,
            created_at=current.created_at,
            last_login_at=current.last_login_at,
        )
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(user_id, None) is not None

    def touch_last_login(self, user_id: int, at: datetime) -> None:
        self.last_logins[user_id] = at


class InMemoryRoles:
    def __init__(self, roles=()):
        self._roles = {r.role: r for r in roles}

    def list_all(self):
        return sorted(self._roles.values(), key=lambda r: r.role)

    def get(self, role: str) -> Optional[Role]:
        return self._roles.get(role)


class InMemoryCheckpoints:
    def __init__(self, checkpoints=()):
        self._by_id: dict[int, Checkpoint] = {c.checkpoint_id: c for c in checkpoints}
        self._id = max(self._by_id, default=0)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda c: c.name)

    def get_by_id(self, checkpoint_id: int) -> Optional[Checkpoint]:
        return self._by_id.get(checkpoint_id)

    def get_by_barcode(self, barcode_value: str) -> Optional[Checkpoint]:
        return next((c for c in self._by_id.values() if c.barcode_value == barcode_value), None)

    def create(self, *, name, barcode_value, latitude, longitude, radius_meters, active=True) -> int:
        self._id += 1
        self._by_id[self._id] = Checkpoint(
            checkpoint_id=self._id,
            name=name,
            barcode_value=barcode_value,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            active=active,
        )
        return self._id

    def update(self, *, checkpoint_id, name, barcode_value, latitude, longitude, radius_meters, active) -> bool:
        if checkpoint_id not in self._by_id:
            return False
        self._by_id[checkpoint_id] = Checkpoint(
            checkpoint_id=checkpoint_id,
            name=name,
            barcode_value=barcode_value,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            active=active,
        )
        return True

    def delete_by_id(self, checkpoint_id: int) -> bool:
        return self._by_id.pop(checkpoint_id, None) is not None


class InMemoryPatrolLogs:
    def __init__(self, checkpoints: Optional[InMemoryCheckpoints] = None):
        self._checkpoints = checkpoints
        self._by_id: dict[int, PatrolLog] = {}
        self._id = 0

    def create(
        self,
        *,
        scanned_at,
        user_id,
        username,
        guard_name,
        checkpoint_id,
        barcode_value,
        scan_lat,
        scan_lng,
        distance_meters,
        result,
        notes=None,
    ) -> int:
        self._id += 1
        cp = self._checkpoints.get_by_id(checkpoint_id) if self._checkpoints and checkpoint_id else None
        self._by_id[self._id] = PatrolLog(
            log_id=self._id,
            scanned_at=scanned_at,
            user_id=user_id,
            username=username,
            guard_name=guard_name,
            checkpoint_id=checkpoint_id,
            barcode_value=barcode_value,
            scan_lat=scan_lat,
            scan_lng=scan_lng,
            distance_meters=distance_meters,
            result=ScanResult(result),
            notes=notes,
            checkpoint_name=cp.name if cp else None,
        )
        return self._id

    def get_by_id(self, log_id: int) -> Optional[PatrolLog]:
        return self._by_id.get(log_id)

    def list_between(self, *, start, end):
        items = [r for r in self._by_id.values() if start <= r.scanned_at < end]
        return sorted(items, key=lambda r: (r.scanned_at, r.log_id))

    def delete_by_id(self, log_id: int) -> bool:
        return self._by_id.pop(log_id, None) is not None

    def delete_older_than(self, cutoff) -> int:
        stale = [k for k, r in self._by_id.items() if r.scanned_at < cutoff]
        for k in stale:
            del self._by_id[k]
        return len(stale)

    def all(self):
        return sorted(self._by_id.values(), key=lambda r: r.log_id)


class InMemorySchedules:
    def __init__(self, schedule: Optional[CoverageSchedule] = None):
        self._schedule = schedule

    def get(self) -> Optional[CoverageSchedule]:
        return self._schedule

    def save(self, *, start_hour: int, interval_hours: int) -> None:
        self._schedule = CoverageSchedule(start_hour=start_hour, interval_hours=interval_hours)


def _add_log(repo: InMemoryPatrolLogs, *, at: datetime, username: str, checkpoint_id: int,
             result: ScanResult = ScanResult.ACCEPTED) -> int:
    return repo.create(
        scanned_at=at,
        user_id=None,
        username=username,
        guard_name=username.title(),
        checkpoint_id=checkpoint_id,
        barcode_value=f"CP-{checkpoint_id}",
        scan_lat=0.0,
        scan_lng=0.0,
        distance_meters=None,
        result=result,
    )


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 5, 8, 10, 0)


@pytest.fixture
def roles_repo():
    return InMemoryRoles(
        [
            Role(role="Admin", permissions=("all",)),
            Role(
                role="Supervisor",
                permissions=("reports.*", "logs.read", "checkpoints.read", "users.read", "settings.read"),
            ),
            Role(role="Guard", permissions=("scan.create",)),
        ]
    )


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            User(user_id=1, name="Super Admin", username="admin", password_hash=make_hash("admin123"), role="Admin"),
            User(user_id=2, name="Budi Santoso", username="budi", password_hash=make_hash("guard123"), role="Guard"),
            User(
                user_id=3,
                name="Old Guard",
                username="oldguard",
                password_hash=make_hash("guard123"),
                role="Guard",
                is_active=False,
            ),
            User(user_id=4, name="Sari Dewi", username="sari", password_hash=make_hash("super123"), role="Supervisor"),
        ]
    )


@pytest.fixture
def checkpoints_repo():
    return InMemoryCheckpoints(
        [
            Checkpoint(
                checkpoint_id=1,
                name="Gate A",
                barcode_value="CP-GATE-A",
                latitude=-6.2,
                longitude=106.816666,
                radius_meters=50.0,
            ),
            Checkpoint(checkpoint_id=2, name="Lobby", barcode_value="CP-LOBBY", latitude=None, longitude=None),
            Checkpoint(
                checkpoint_id=3,
                name="Warehouse",
                barcode_value="CP-WH",
                latitude=-6.201,
                longitude=106.817,
                radius_meters=30.0,
                active=False,
            ),
        ]
    )


@pytest.fixture
def logs_repo(checkpoints_repo):
    return InMemoryPatrolLogs(checkpoints_repo)


@pytest.fixture
def add_log(logs_repo):
    """Insert a log row directly, bypassing the scan use case."""

    def _add(*, at: datetime, username: str, checkpoint_id: int, result: ScanResult = ScanResult.ACCEPTED) -> int:
        return _add_log(logs_repo, at=at, username=username, checkpoint_id=checkpoint_id, result=result)

    return _add


@pytest.fixture
def schedules_repo():
    return InMemorySchedules(CoverageSchedule(start_hour=7, interval_hours=2))


@pytest.fixture
def container(users_repo, roles_repo, checkpoints_repo, logs_repo, schedules_repo):
    return wire_services(
        conn=None,
        users_repo=users_repo,
        roles_repo=roles_repo,
        checkpoints_repo=checkpoints_repo,
        patrol_logs_repo=logs_repo,
        schedules_repo=schedules_repo,
        jwt_secret="test-jwt-secret",
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.delenv("SETTINGS_MODULE", raising=False)
    monkeypatch.setenv("APP_ENV", "testing")
    from src.patrol_system.patrol_system.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(client):
    def _login(username: str, password: str) -> dict:
        res = client.post("/api/login", json={"username": username, "password": password})
        assert res.status_code == 200, res.get_json()
        return {"Authorization": f"Bearer {res.get_json()['data']['token']}"}

    return _login
