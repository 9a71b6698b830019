from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from jaothui.domain.entities import Farm


class FarmLookupPort(Protocol):
    def get_by_id(self, farm_id: UUID) -> Farm | None: ...
    def is_member(self, farm_id: UUID, profile_id: UUID) -> bool: ...


@dataclass(frozen=True)
class FarmAccess:
    farm: Farm | None
    is_owner: bool = False
    is_member: bool = False

    @property
    def allowed(self) -> bool:
        return self.farm is not None and (self.is_owner or self.is_member)


def check_farm_access(farm_id: UUID, profile_id: UUID, farms: FarmLookupPort) -> FarmAccess:
    """
    Resolve a profile's access to a farm.

    Owners and members may act on the farm's animals and schedules.
    A missing farm yields FarmAccess(farm=None).
    """
    farm = farms.get_by_id(farm_id)
    if farm is None:
        return FarmAccess(farm=None)

    is_owner = farm.owner_id == profile_id
    is_member = False if is_owner else farms.is_member(farm_id, profile_id)
    return FarmAccess(farm=farm, is_owner=is_owner, is_member=is_member)
