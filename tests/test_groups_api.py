import asyncio

BASE = "/api/v1/groups"


def _add_expense(client, auth, users, group_id, payer, amount, shares):
    body = {
        "amount": amount,
        "splits": [{"user_id": users[name].id, "share_amount": share} for name, share in shares.items()],
    }
    resp = client.post(f"{BASE}/{group_id}/expenses", json=body, headers=auth(payer))
    assert resp.status_code == 200
    return resp.json()


def test_create_and_list_groups(client, auth, users):
    resp = client.post(f"{BASE}/", json={"name": "Flat 4B"}, headers=auth("alice"))

    assert resp.status_code == 200
    group = resp.json()
    assert group["type"] == "group"
    assert group["member_ids"] == [users["alice"].id]

    mine = client.get(f"{BASE}/", headers=auth("alice")).json()
    assert [g["id"] for g in mine] == [group["id"]]
    assert client.get(f"{BASE}/", headers=auth("bob")).json() == []


def test_join_and_detail(client, auth, users, trip):
    resp = client.post(f"{BASE}/{trip.id}/join", headers=auth("dave"))
    assert resp.status_code == 200
    assert users["dave"].id in resp.json()["member_ids"]

    # Joining twice is a no-op
    again = client.post(f"{BASE}/{trip.id}/join", headers=auth("dave")).json()
    assert again["member_ids"].count(users["dave"].id) == 1

    detail = client.get(f"{BASE}/{trip.id}", headers=auth("dave")).json()
    assert detail["display_name"] == "Goa Trip"
    assert {m["name"] for m in detail["members"]} == {"Alice", "Bob", "Carol", "Dave"}


def test_direct_pair_is_reused(client, auth, users, stores):
    first = client.post(f"{BASE}/direct", json={"phone": "9123456789"}, headers=auth("alice"))
    assert first.status_code == 200
    assert first.json()["is_new"] is True

    placeholder = asyncio.run(stores.users.get_by_phone("+919123456789"))
    assert placeholder is not None
    assert placeholder.password_hash is None

    second = client.post(f"{BASE}/direct", json={"phone": "+919123456789"}, headers=auth("alice")).json()
    assert second["is_new"] is False
    assert second["group"]["id"] == first.json()["group"]["id"]

    group_id = second["group"]["id"]
    assert client.post(f"{BASE}/{group_id}/join", headers=auth("bob")).status_code == 400


def test_direct_pair_validation(client, auth, users):
    assert client.post(f"{BASE}/direct", json={"phone": "12"}, headers=auth("alice")).status_code == 400
    own = client.post(f"{BASE}/direct", json={"phone": users["alice"].phone}, headers=auth("alice"))
    assert own.status_code == 400


def test_balances_scenario(client, auth, users, trip):
    _add_expense(client, auth, users, trip.id, "alice", "900.00", {"alice": "300.00", "bob": "300.00", "carol": "300.00"})

    data = client.get(f"{BASE}/{trip.id}/balances", headers=auth("bob")).json()
    by_user = {b["user_id"]: b for b in data["balances"]}

    assert by_user[users["alice"].id]["balance"] == "600.00"
    assert by_user[users["bob"].id]["balance"] == "-300.00"
    assert by_user[users["carol"].id]["balance"] == "-300.00"
    assert data["current_user_balance"] == "-300.00"

    plan = {(t["from_user_id"], t["to_user_id"]): t["amount"] for t in data["settlement_plan"]}
    assert plan == {
        (users["bob"].id, users["alice"].id): "300.00",
        (users["carol"].id, users["alice"].id): "300.00",
    }
    assert data["settlement_plan"][0]["to_name"] == "Alice"


def test_untouched_member_shows_zero(client, auth, users, trip):
    client.post(f"{BASE}/{trip.id}/join", headers=auth("dave"))
    _add_expense(client, auth, users, trip.id, "alice", "20.00", {"alice": "10.00", "bob": "10.00"})

    data = client.get(f"{BASE}/{trip.id}/balances", headers=auth("dave")).json()
    by_user = {b["user_id"]: b for b in data["balances"]}

    assert float(by_user[users["dave"].id]["balance"]) == 0
    assert float(data["current_user_balance"]) == 0


def test_settlement_clears_debt(client, auth, users, trip):
    _add_expense(client, auth, users, trip.id, "alice", "100.00", {"alice": "50.00", "bob": "50.00"})

    resp = client.post(
        f"{BASE}/{trip.id}/settlements",
        json={"from_user_id": users["bob"].id, "to_user_id": users["alice"].id, "amount": "50.00", "method": "upi"},
        headers=auth("bob"),
    )
    assert resp.status_code == 200
    assert resp.json()["method"] == "upi"

    data = client.get(f"{BASE}/{trip.id}/balances", headers=auth("alice")).json()
    assert data["settlement_plan"] == []
    assert all(float(b["balance"]) == 0 for b in data["balances"])

    history = client.get(f"{BASE}/{trip.id}/settlements", headers=auth("carol")).json()
    assert len(history) == 1


def test_settlement_validation(client, auth, users, trip):
    url = f"{BASE}/{trip.id}/settlements"

    self_pay = {"from_user_id": users["bob"].id, "to_user_id": users["bob"].id, "amount": "5.00"}
    assert client.post(url, json=self_pay, headers=auth("bob")).status_code == 400

    outsider = {"from_user_id": users["bob"].id, "to_user_id": users["dave"].id, "amount": "5.00"}
    assert client.post(url, json=outsider, headers=auth("bob")).status_code == 400

    negative = {"from_user_id": users["bob"].id, "to_user_id": users["alice"].id, "amount": "-5.00"}
    assert client.post(url, json=negative, headers=auth("bob")).status_code == 400


def test_undo_and_edit_settlement(client, auth, users, trip):
    url = f"{BASE}/{trip.id}/settlements"
    body = {"from_user_id": users["bob"].id, "to_user_id": users["alice"].id, "amount": "5.00"}
    settlement_id = client.post(url, json=body, headers=auth("bob")).json()["id"]

    body["amount"] = "7.50"
    edited = client.put(f"{url}/{settlement_id}", json=body, headers=auth("bob"))
    assert edited.status_code == 200
    assert edited.json()["amount"] == "7.50"

    assert client.delete(f"{url}/{settlement_id}", headers=auth("carol")).status_code == 403
    assert client.delete(f"{url}/{settlement_id}", headers=auth("bob")).status_code == 200
    assert client.get(url, headers=auth("bob")).json() == []
