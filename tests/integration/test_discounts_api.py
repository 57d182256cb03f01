from datetime import datetime, timedelta


def discount_body(**overrides):
    now = datetime.utcnow()
    body = {
        "name": "Spring",
        "name_ar": "الربيع",
        "description": "Spring sale",
        "description_ar": "تخفيضات الربيع",
        "discount_code": "SPRING15",
        "discount_percentage": 15,
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=1)).isoformat(),
    }
    body.update(overrides)
    return body


def test_admin_creates_and_checks_discount(client, admin_headers, user_headers):
    resp = client.post("/api/discounts", json=discount_body(), headers=admin_headers)
    assert resp.status_code == 201

    check = client.get("/api/discounts/check?code=SPRING15", headers=user_headers).get_json()
    assert check["valid"] is True
    assert check["discount_percentage"] == 15.0


def test_expired_discount(client, admin_headers, user_headers):
    past = datetime.utcnow() - timedelta(days=10)
    body = discount_body(start_date=past.isoformat(), end_date=(past + timedelta(days=1)).isoformat())
    client.post("/api/discounts", json=body, headers=admin_headers)

    resp = client.get("/api/discounts/check?code=SPRING15", headers=user_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Discount expired or invalid"


def test_discount_validation(client, admin_headers):
    resp = client.post("/api/discounts", json={"discount_percentage": 120}, headers=admin_headers)
    assert resp.status_code == 400
    errors = resp.get_json()["data"]["errors"]
    assert {"name", "discount_code", "discount_percentage", "start_date", "end_date"} <= set(errors)


def test_duplicate_discount_code_is_409(client, admin_headers):
    client.post("/api/discounts", json=discount_body(), headers=admin_headers)
    assert client.post("/api/discounts", json=discount_body(), headers=admin_headers).status_code == 409


def test_user_cannot_write_discounts(client, user_headers):
    assert client.post("/api/discounts", json=discount_body(), headers=user_headers).status_code == 403
