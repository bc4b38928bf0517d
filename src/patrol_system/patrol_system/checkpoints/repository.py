from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Checkpoint


class CheckpointRepository(Protocol):
    def list_all(self) -> Sequence[Checkpoint]:
        """All checkpoints (active or not), ordered by name."""

        raise NotImplementedError

    def get_by_id(self, checkpoint_id: int) -> Optional[Checkpoint]:
        raise NotImplementedError

    def get_by_barcode(self, barcode_value: str) -> Optional[Checkpoint]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        barcode_value: str,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_meters: float,
        active: bool = True,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        checkpoint_id: int,
        name: str,
        barcode_value: str,
        latitude: Optional[float],
        longitude: Optional[float],
        radius_meters: float,
        active: bool,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, checkpoint_id: int) -> bool:
        raise NotImplementedError
