import csv
import io

BASE = "/api/v1/groups"


def _seed(client, auth, users, trip):
    body = {
        "amount": "90.00",
        "description": "Groceries",
        "category": "food",
        "splits": [{"user_id": users[n].id, "share_amount": "30.00"} for n in ("alice", "bob", "carol")],
    }
    assert client.post(f"{BASE}/{trip.id}/expenses", json=body, headers=auth("alice")).status_code == 200

    settle = {"from_user_id": users["bob"].id, "to_user_id": users["alice"].id, "amount": "30.00"}
    assert client.post(f"{BASE}/{trip.id}/settlements", json=settle, headers=auth("bob")).status_code == 200


def test_json_export(client, auth, users, trip):
    _seed(client, auth, users, trip)

    resp = client.get(f"{BASE}/{trip.id}/export", headers=auth("carol"))
    assert resp.status_code == 200
    report = resp.json()

    assert report["group"]["name"] == "Goa Trip"
    assert report["expenses"][0]["description"] == "Groceries"
    assert report["expenses"][0]["paid_by"] == [{"user_id": users["alice"].id, "name": "Alice", "amount": "90.00"}]
    assert report["settlements"][0]["from_name"] == "Bob"

    by_user = {b["user_id"]: b["balance"] for b in report["balances"]}
    assert by_user[users["alice"].id] == "30.00"
    assert by_user[users["bob"].id] == "0.00"
    assert by_user[users["carol"].id] == "-30.00"
    assert report["settlement_plan"] == [{
        "from_user_id": users["carol"].id,
        "from_name": "Carol",
        "to_user_id": users["alice"].id,
        "to_name": "Alice",
        "amount": "30.00",
    }]


def test_csv_export(client, auth, users, trip):
    _seed(client, auth, users, trip)

    resp = client.get(f"{BASE}/{trip.id}/export", params={"format": "csv"}, headers=auth("alice"))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(resp.text)))
    sections = [r[0] for r in rows if len(r) == 1]
    assert sections == ["Expenses", "Settlements", "Balances", "Settlement Plan"]

    expense_row = rows[rows.index(["Expenses"]) + 2]
    assert expense_row[2] == "Groceries"
    assert expense_row[5] == "Alice:90.00"
    assert expense_row[6] == "Alice:30.00; Bob:30.00; Carol:30.00"

    plan_row = rows[rows.index(["Settlement Plan"]) + 2]
    assert plan_row == ["Carol", "Alice", "30.00"]


def test_export_requires_membership(client, auth, trip):
    assert client.get(f"{BASE}/{trip.id}/export", headers=auth("dave")).status_code == 403
    assert client.get(f"{BASE}/{trip.id}/export", params={"format": "xml"}, headers=auth("alice")).status_code == 422
