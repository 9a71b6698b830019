"""
Farms component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from jaothui.domain.entities import Animal, Farm


class FarmRepoPort(Protocol):
    """Farm storage; also satisfies the domain FarmLookupPort."""

    def get_by_id(self, farm_id: UUID) -> Farm | None: ...
    def is_member(self, farm_id: UUID, profile_id: UUID) -> bool: ...
    def save(self, farm: Farm) -> Farm: ...
    def list_for_profile(self, profile_id: UUID) -> list[Farm]: ...


class FarmAnimalsPort(Protocol):
    def list_by_farm(self, farm_id: UUID) -> list[Animal]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
