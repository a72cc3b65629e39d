from datetime import date
from decimal import Decimal

from conftest import BASE


def _add(client, headers, car_id, **payload):
    r = client.post(f"{BASE}/cars/{car_id}/expenses", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_add_expense_defaults_to_today(client, auth_headers, create_car):
    car = create_car()
    exp = _add(client, auth_headers, car["id"], description="Detailing", amount="150.25")
    assert exp["description"] == "Detailing"
    assert Decimal(exp["amount"]) == Decimal("150.25")
    assert exp["date"] == date.today().isoformat()


def test_list_expenses_newest_first_with_total(client, auth_headers, create_car):
    car = create_car()
    _add(client, auth_headers, car["id"], description="Tires", amount=400, date="2024-01-05")
    _add(client, auth_headers, car["id"], description="Smog", amount=50, date="2024-03-01")
    _add(client, auth_headers, car["id"], description="Title", amount="75.50", expense_date="2024-02-10")

    r = client.get(f"{BASE}/cars/{car['id']}/expenses", headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert [e["description"] for e in body["items"]] == ["Smog", "Title", "Tires"]
    assert body["total"] == 3
    assert Decimal(body["total_amount"]) == Decimal("525.50")

    detail = client.get(f"{BASE}/cars/{car['id']}", headers=auth_headers).json()
    assert [e["description"] for e in detail["expenses"]] == ["Smog", "Title", "Tires"]
    assert Decimal(detail["total_cost"]) == Decimal("10525.50")


def test_expense_validation(client, auth_headers, create_car):
    car = create_car()
    url = f"{BASE}/cars/{car['id']}/expenses"
    assert client.post(url, json={"description": "", "amount": 10}, headers=auth_headers).status_code == 422
    assert client.post(url, json={"description": "Oil", "amount": 0}, headers=auth_headers).status_code == 422
    assert client.get(url, headers=auth_headers).json()["total"] == 0


def test_update_expense(client, auth_headers, create_car):
    car = create_car()
    exp = _add(client, auth_headers, car["id"], description="Brakes", amount=300, date="2024-01-05")

    r = client.patch(
        f"{BASE}/expenses/{exp['id']}",
        json={"amount": "325.00", "date": "2024-01-06"},
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["description"] == "Brakes"
    assert Decimal(body["amount"]) == Decimal("325")
    assert body["date"] == "2024-01-06"


def test_delete_expense(client, auth_headers, create_car):
    car = create_car()
    exp = _add(client, auth_headers, car["id"], description="Brakes", amount=300)

    r = client.delete(f"{BASE}/expenses/{exp['id']}", headers=auth_headers)
    assert r.status_code == 204
    assert client.get(f"{BASE}/cars/{car['id']}/expenses", headers=auth_headers).json()["items"] == []
    assert client.delete(f"{BASE}/expenses/{exp['id']}", headers=auth_headers).status_code == 404


def test_expenses_are_private(client, auth_headers, other_headers, create_car):
    car = create_car()
    exp = _add(client, auth_headers, car["id"], description="Brakes", amount=300)

    assert client.get(f"{BASE}/cars/{car['id']}/expenses", headers=other_headers).status_code == 404
    assert (
        client.post(
            f"{BASE}/cars/{car['id']}/expenses",
            json={"description": "x", "amount": 1},
            headers=other_headers,
        ).status_code
        == 404
    )
    r = client.patch(f"{BASE}/expenses/{exp['id']}", json={"amount": 1}, headers=other_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Expense not found"
    assert client.delete(f"{BASE}/expenses/{exp['id']}", headers=other_headers).status_code == 404


def test_expenses_reduce_profit_on_sale(client, auth_headers, create_car):
    car = create_car(purchase_price=5000)
    _add(client, auth_headers, car["id"], description="Engine", amount=2000)
    sold = client.post(f"{BASE}/cars/{car['id']}/sell", json={"sale_price": 6000}, headers=auth_headers).json()
    assert Decimal(sold["profit"]) == Decimal("-1000")
