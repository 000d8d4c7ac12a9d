from datetime import datetime, timezone

from estoque.models import Movement, Product


def _move(client, headers, product_id, movement_type, quantity, reason="Ajuste", **extra):
    return client.post("/movements", json={
        "product_id": product_id,
        "movement_type": movement_type,
        "quantity": quantity,
        "reason": reason,
        **extra,
    }, headers=headers)


def test_entrada_updates_product_balance(client, auth_headers, make_product, db):
    product = make_product(stock=10)

    r = _move(client, auth_headers, product.id, "entrada", 5, reason="Compra", notes="NF 123")
    assert r.status_code == 201
    body = r.json()
    assert body["balance_before"] == 10
    assert body["balance_after"] == 15
    assert body["notes"] == "NF 123"
    assert body["product"] == {"name": product.name, "code": product.code}
    assert body["user"] == {"name": "Bruno"}

    r = client.get(f"/products/{product.id}", headers=auth_headers)
    assert r.json()["stock"] == 15


def test_saida_down_to_zero(client, auth_headers, make_product):
    product = make_product(stock=10, min_stock=5)

    r = _move(client, auth_headers, product.id, "saida", 10, reason="Venda")
    assert r.status_code == 201
    assert r.json()["balance_after"] == 0
    assert client.get(f"/products/{product.id}", headers=auth_headers).json()["stock"] == 0


def test_saida_beyond_balance_is_rejected(client, auth_headers, make_product, db):
    product = make_product(stock=5)

    r = _move(client, auth_headers, product.id, "saida", 10, reason="Venda")
    assert r.status_code == 400
    assert r.json()["error_code"] == "INSUFFICIENT_STOCK"
    assert r.json()["message"] == "Estoque insuficiente para esta operação"
    assert r.json()["details"] == {"balance": 5, "requested": 10}

    db.expire_all()
    assert db.get(Product, product.id).stock == 5
    assert db.query(Movement).count() == 0


def test_non_positive_quantity_is_rejected(client, auth_headers, make_product, db):
    product = make_product(stock=5)

    for quantity in (0, -3):
        r = _move(client, auth_headers, product.id, "entrada", quantity)
        assert r.status_code == 400
        assert r.json()["error_code"] == "INVALID_QUANTITY"

    assert _move(client, auth_headers, product.id, "entrada", "muitos").status_code == 422
    assert db.query(Movement).count() == 0


def test_unknown_direction_and_missing_reason(client, auth_headers, make_product):
    product = make_product(stock=5)

    assert _move(client, auth_headers, product.id, "ajuste", 1).status_code == 422

    r = _move(client, auth_headers, product.id, "entrada", 1, reason="  ")
    assert r.status_code == 400
    assert r.json()["error_code"] == "INVALID_MOVEMENT"


def test_unknown_product(client, auth_headers):
    r = _move(client, auth_headers, 999, "entrada", 1)
    assert r.status_code == 404
    assert r.json()["error_code"] == "PRODUCT_NOT_FOUND"


def test_movement_requires_authentication(client, make_product):
    product = make_product(stock=5)
    assert _move(client, {}, product.id, "entrada", 1).status_code == 401


def test_list_is_newest_first_and_filterable(client, auth_headers, make_product):
    a = make_product(stock=10)
    b = make_product(stock=10)
    first = _move(client, auth_headers, a.id, "entrada", 1).json()
    second = _move(client, auth_headers, b.id, "saida", 2).json()
    third = _move(client, auth_headers, a.id, "saida", 3).json()

    r = client.get("/movements", headers=auth_headers)
    assert [m["id"] for m in r.json()] == [third["id"], second["id"], first["id"]]

    r = client.get("/movements", params={"product_id": a.id}, headers=auth_headers)
    assert [m["id"] for m in r.json()] == [third["id"], first["id"]]

    r = client.get("/movements", params={"movement_type": "saida"}, headers=auth_headers)
    assert [m["id"] for m in r.json()] == [third["id"], second["id"]]

    r = client.get("/movements", params={"limit": 1}, headers=auth_headers)
    assert len(r.json()) == 1

    r = client.get(f"/movements/product/{b.id}", headers=auth_headers)
    assert [m["balance_after"] for m in r.json()] == [8]


def test_history_replays_to_current_balance(client, auth_headers, make_product):
    product = make_product(stock=0)
    for movement_type, quantity in [("entrada", 20), ("saida", 7), ("entrada", 3), ("saida", 16)]:
        assert _move(client, auth_headers, product.id, movement_type, quantity).status_code == 201

    history = list(reversed(client.get(f"/movements/product/{product.id}", headers=auth_headers).json()))
    for previous, current in zip(history, history[1:]):
        assert current["balance_before"] == previous["balance_after"]
    assert history[-1]["balance_after"] == 0
    assert client.get(f"/products/{product.id}", headers=auth_headers).json()["stock"] == 0


def test_movements_cannot_be_edited_or_deleted(client, auth_headers, make_product):
    product = make_product(stock=5)
    movement = _move(client, auth_headers, product.id, "entrada", 1).json()

    assert client.delete(f"/movements/{movement['id']}", headers=auth_headers).status_code in (404, 405)
    assert client.put(f"/movements/{movement['id']}", json={}, headers=auth_headers).status_code in (404, 405)


def test_since_filter_is_inclusive_and_honours_utc_offsets(client, auth_headers, db, user, make_product):
    product = make_product(stock=10)
    db.add(Movement(
        product_id=product.id, user_id=user.id, movement_type="entrada", quantity=1,
        balance_before=9, balance_after=10, reason="Compra",
        created_at=datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc),
    ))
    db.commit()

    def listed(since):
        r = client.get("/movements", params={"since": since}, headers=auth_headers)
        assert r.status_code == 200
        return len(r.json())

    assert listed("2026-10-17T12:00:00+00:00") == 1
    assert listed("2026-10-17T17:00:00+05:00") == 1
    # 09:00 UTC, before the movement
    assert listed("2026-10-17T14:00:00+05:00") == 1
    # 13:00 UTC, after the movement
    assert listed("2026-10-17T08:00:00-05:00") == 0
    assert listed("2026-10-17T12:00:01+00:00") == 0
    # Naive timestamps are read as UTC
    assert listed("2026-10-17T12:00:00") == 1
