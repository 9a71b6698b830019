from uuid import uuid4

from jaothui.adapters.sqlite.repos import SQLiteFarmRepo
from jaothui.domain.entities import FarmMember

BUFFALO_TYPE_ID = "6f1c2a10-0005-4000-8000-000000000005"


def _create_farm(client, **overrides):
    body = {"name": "ฟาร์มควายไทย", "province": "สุพรรณบุรี"}
    body.update(overrides)
    return client.post("/api/farms", json=body)


def test_new_user_creates_farm_and_registers_animal(client, login_as):
    login_as("0812345678")

    resp = _create_farm(client)
    assert resp.status_code == 201, resp.text
    farm = resp.json()
    assert farm["is_owner"] is True
    assert farm["province"] == "สุพรรณบุรี"

    resp = client.post(
        "/api/animals",
        json={"farm_id": farm["id"], "animal_type_id": BUFFALO_TYPE_ID, "name": "ทองคำ"},
    )
    assert resp.status_code == 201

    resp = client.get(f"/api/farms/{farm['id']}/animals")
    assert resp.status_code == 200
    assert [a["name"] for a in resp.json()] == ["ทองคำ"]


def test_second_farm_conflict(client, login_as):
    login_as("0812345678")
    _create_farm(client)

    resp = _create_farm(client, name="ฟาร์มที่สอง")

    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "farm_already_owned"


def test_missing_province(client, login_as):
    login_as("0812345678")

    resp = _create_farm(client, province=" ")

    assert resp.status_code == 400
    assert resp.json()["detail"]["details"][0]["field"] == "province"


def test_list_includes_member_farms(client, login_as, db_path):
    login_as("0898765432")
    owner_farm = _create_farm(client, name="ฟาร์มเพื่อนบ้าน").json()

    member = login_as("0812345678")
    SQLiteFarmRepo(db_path).add_member(
        FarmMember(farm_id=owner_farm["id"], profile_id=member["profile"]["id"])
    )
    own_farm = _create_farm(client).json()

    resp = client.get("/api/farms")

    assert resp.status_code == 200
    assert [(f["id"], f["is_owner"]) for f in resp.json()] == [
        (own_farm["id"], True),
        (owner_farm["id"], False),
    ]


def test_stranger_cannot_list_animals(client, farmer, login_as):
    _, farm_id = farmer
    login_as("0898765432")

    resp = client.get(f"/api/farms/{farm_id}/animals")

    assert resp.status_code == 403


def test_unknown_farm_forbidden(client, farmer):
    resp = client.get(f"/api/farms/{uuid4()}/animals")

    assert resp.status_code == 403


def test_requires_login(client):
    assert client.get("/api/farms").status_code == 401
