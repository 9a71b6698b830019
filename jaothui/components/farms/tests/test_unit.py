"""
Farms component unit tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from jaothui.components.farms import (
    CreateFarmInput,
    FarmAnimalsOutput,
    FarmListOutput,
    FarmOutput,
    ListFarmAnimalsInput,
    ListFarmsInput,
    run,
    run_create_farm,
    run_list_farm_animals,
    run_list_farms,
)
from jaothui.domain.entities import Animal, Farm

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


# --- Mock Implementations ---


@dataclass
class MockTimePort:
    fixed_time: datetime = NOW

    def now_utc(self) -> datetime:
        return self.fixed_time


class MockFarmRepo:
    def __init__(self) -> None:
        self.farms: dict[UUID, Farm] = {}
        self.members: set[tuple[UUID, UUID]] = set()

    def get_by_id(self, farm_id: UUID) -> Farm | None:
        return self.farms.get(farm_id)

    def is_member(self, farm_id: UUID, profile_id: UUID) -> bool:
        return (farm_id, profile_id) in self.members

    def save(self, farm: Farm) -> Farm:
        self.farms[farm.id] = farm
        return farm

    def list_for_profile(self, profile_id: UUID) -> list[Farm]:
        return [
            f
            for f in self.farms.values()
            if f.owner_id == profile_id or (f.id, profile_id) in self.members
        ]


class MockAnimalRepo:
    def __init__(self) -> None:
        self.animals: list[Animal] = []

    def list_by_farm(self, farm_id: UUID) -> list[Animal]:
        return [a for a in self.animals if a.farm_id == farm_id]


@pytest.fixture
def repo() -> MockFarmRepo:
    return MockFarmRepo()


# --- Create ---


class TestCreateFarm:
    def test_creates_owned_farm(self, repo: MockFarmRepo) -> None:
        owner = uuid4()

        out = run_create_farm(
            CreateFarmInput(owner, "  ฟาร์มควายไทย ", "สุพรรณบุรี"),
            repo=repo,
            time_port=MockTimePort(),
        )

        assert out.success
        assert out.farm is not None
        assert out.farm.name == "ฟาร์มควายไทย"
        assert out.farm.owner_id == owner
        assert out.farm.created_at == NOW
        assert repo.get_by_id(out.farm.id) == out.farm

    def test_second_owned_farm_rejected(self, repo: MockFarmRepo) -> None:
        owner = uuid4()
        run_create_farm(CreateFarmInput(owner, "ฟาร์มแรก", "ชัยนาท"), repo=repo)

        out = run_create_farm(CreateFarmInput(owner, "ฟาร์มสอง", "ชัยนาท"), repo=repo)

        assert not out.success
        assert out.errors[0].code == "farm_already_owned"
        assert len(repo.farms) == 1

    def test_member_may_still_create_own_farm(self, repo: MockFarmRepo) -> None:
        other = run_create_farm(CreateFarmInput(uuid4(), "ฟาร์มเพื่อน", "อุทัยธานี"), repo=repo)
        assert other.farm is not None
        member = uuid4()
        repo.members.add((other.farm.id, member))

        out = run_create_farm(CreateFarmInput(member, "ฟาร์มของฉัน", "อุทัยธานี"), repo=repo)

        assert out.success

    def test_name_and_province_required(self, repo: MockFarmRepo) -> None:
        out = run_create_farm(CreateFarmInput(uuid4(), " ", ""), repo=repo)

        assert [e.field for e in out.errors] == ["name", "province"]
        assert repo.farms == {}

    def test_name_too_long(self, repo: MockFarmRepo) -> None:
        out = run_create_farm(CreateFarmInput(uuid4(), "ก" * 101, "ลพบุรี"), repo=repo)

        assert out.errors[0].field == "name"


# --- Listing ---


class TestListFarms:
    def test_owned_and_member_farms(self, repo: MockFarmRepo) -> None:
        me = uuid4()
        mine = run_create_farm(CreateFarmInput(me, "ฟาร์มฉัน", "สระบุรี"), repo=repo).farm
        theirs = run_create_farm(CreateFarmInput(uuid4(), "ฟาร์มเขา", "สระบุรี"), repo=repo).farm
        run_create_farm(CreateFarmInput(uuid4(), "ฟาร์มอื่น", "สระบุรี"), repo=repo)
        assert mine is not None and theirs is not None
        repo.members.add((theirs.id, me))

        out = run_list_farms(ListFarmsInput(me), repo=repo)

        assert {(s.farm.id, s.is_owner) for s in out.farms} == {
            (mine.id, True),
            (theirs.id, False),
        }


class TestListFarmAnimals:
    @pytest.fixture
    def farm(self, repo: MockFarmRepo) -> Farm:
        return repo.save(Farm(name="ฟาร์มควายไทย", owner_id=uuid4()))

    def test_lists_animals_for_owner(self, repo: MockFarmRepo, farm: Farm) -> None:
        animals = MockAnimalRepo()
        buffalo = Animal(
            name="ทองคำ", microchip="THREPO00000000001234", animal_type_id=uuid4(), farm_id=farm.id
        )
        animals.animals.append(buffalo)

        out = run_list_farm_animals(
            ListFarmAnimalsInput(farm.owner_id, farm.id), repo=repo, animals=animals
        )

        assert out.success
        assert out.farm == farm
        assert out.animals == (buffalo,)

    def test_stranger_denied(self, repo: MockFarmRepo, farm: Farm) -> None:
        out = run_list_farm_animals(
            ListFarmAnimalsInput(uuid4(), farm.id), repo=repo, animals=MockAnimalRepo()
        )

        assert out.errors[0].code == "farm_access_denied"

    def test_unknown_farm_denied(self, repo: MockFarmRepo) -> None:
        out = run_list_farm_animals(
            ListFarmAnimalsInput(uuid4(), uuid4()), repo=repo, animals=MockAnimalRepo()
        )

        assert out.errors[0].code == "farm_access_denied"


class TestRunDispatcher:
    def test_dispatches_by_input_type(self, repo: MockFarmRepo) -> None:
        owner = uuid4()
        created = run(CreateFarmInput(owner, "ฟาร์ม", "ชัยนาท"), repo=repo)
        assert isinstance(created, FarmOutput)
        assert created.farm is not None

        assert isinstance(run(ListFarmsInput(owner), repo=repo), FarmListOutput)
        assert isinstance(
            run(
                ListFarmAnimalsInput(owner, created.farm.id),
                repo=repo,
                animals=MockAnimalRepo(),
            ),
            FarmAnimalsOutput,
        )

    def test_unknown_input(self, repo: MockFarmRepo) -> None:
        with pytest.raises(ValueError):
            run("not an input", repo=repo)  # type: ignore[arg-type]
