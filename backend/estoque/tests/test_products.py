from estoque.models import Movement


def _payload(**overrides):
    data = {"name": "Martelo", "code": "FER-002", "stock": 4, "min_stock": 5, "unit_price": "42.50"}
    data.update(overrides)
    return data


def test_create_and_get_product(client, auth_headers, category):
    r = client.post("/products/", json=_payload(category_id=category.id, product_type="Manual"), headers=auth_headers)
    assert r.status_code == 201
    created = r.json()
    assert created["code"] == "FER-002"
    assert created["unit"] == "unidade"
    assert created["active"] is True
    assert created["category_name"] == "Ferramentas"

    r = client.get(f"/products/{created['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Martelo"

    r = client.get("/products/lookup", params={"code": "FER-002"}, headers=auth_headers)
    assert r.json()["id"] == created["id"]


def test_duplicate_code_is_rejected(client, auth_headers):
    assert client.post("/products/", json=_payload(), headers=auth_headers).status_code == 201

    r = client.post("/products/", json=_payload(name="Outro martelo"), headers=auth_headers)
    assert r.status_code == 409
    assert r.json()["error_code"] == "DUPLICATE_PRODUCT_CODE"
    assert r.json()["message"] == "Já existe um produto com este código"

    r = client.get("/products/", headers=auth_headers)
    assert len(r.json()) == 1


def test_update_to_existing_code_is_rejected(client, auth_headers, make_product):
    make_product(code="A-1")
    other = make_product(code="B-1")

    r = client.put(f"/products/{other.id}", json=_payload(code="A-1"), headers=auth_headers)
    assert r.status_code == 409
    assert r.json()["error_code"] == "DUPLICATE_PRODUCT_CODE"


def test_required_and_non_negative_fields(client, auth_headers):
    assert client.post("/products/", json=_payload(name="  "), headers=auth_headers).status_code == 422
    assert client.post("/products/", json=_payload(code=""), headers=auth_headers).status_code == 422
    assert client.post("/products/", json=_payload(stock=-1), headers=auth_headers).status_code == 422
    assert client.post("/products/", json=_payload(min_stock=-1), headers=auth_headers).status_code == 422


def test_unknown_category(client, auth_headers):
    r = client.post("/products/", json=_payload(category_id=999), headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["error_code"] == "CATEGORY_NOT_FOUND"


def test_update_is_full_replacement(client, auth_headers, category):
    created = client.post(
        "/products/",
        json=_payload(category_id=category.id, material="Aço", location="A1"),
        headers=auth_headers,
    ).json()

    r = client.put(f"/products/{created['id']}", json={"name": "Martelo grande", "code": "FER-002"}, headers=auth_headers)
    assert r.status_code == 200
    updated = r.json()
    assert updated["name"] == "Martelo grande"
    assert updated["material"] is None
    assert updated["location"] is None
    assert updated["category_id"] is None
    assert updated["unit_price"] is None
    assert updated["stock"] == 0
    assert updated["min_stock"] == 10


def test_list_orders_by_name_and_searches(client, auth_headers, make_product):
    make_product(name="Parafuso", code="PAR-1", product_type="Fixação")
    make_product(name="Chave", code="FER-1")
    make_product(name="Arruela", code="ARR-1", active=False)

    names = [p["name"] for p in client.get("/products/", headers=auth_headers).json()]
    assert names == ["Arruela", "Chave", "Parafuso"]

    r = client.get("/products/", params={"q": "fixa"}, headers=auth_headers)
    assert [p["code"] for p in r.json()] == ["PAR-1"]

    r = client.get("/products/", params={"q": "fer"}, headers=auth_headers)
    assert [p["code"] for p in r.json()] == ["FER-1"]

    r = client.get("/products/", params={"active": "true"}, headers=auth_headers)
    assert "Arruela" not in [p["name"] for p in r.json()]


def test_search_treats_wildcards_literally(client, auth_headers, make_product):
    make_product(name="Parafuso", code="PAR-1")
    make_product(name="Desconto 50% caixa", code="CX-1")

    r = client.get("/products/", params={"q": "_"}, headers=auth_headers)
    assert r.json() == []

    r = client.get("/products/", params={"q": "%"}, headers=auth_headers)
    assert [p["code"] for p in r.json()] == ["CX-1"]


def test_archive_and_unarchive(client, auth_headers, make_product):
    product = make_product()

    r = client.post(f"/products/{product.id}/archive", headers=auth_headers)
    assert r.json()["active"] is False

    r = client.post(f"/products/{product.id}/unarchive", headers=auth_headers)
    assert r.json()["active"] is True


def test_delete_product_without_history(client, auth_headers, make_product):
    product = make_product()

    r = client.delete(f"/products/{product.id}", headers=auth_headers)
    assert r.status_code == 200
    assert client.get(f"/products/{product.id}", headers=auth_headers).status_code == 404


def test_delete_product_with_history_is_refused_by_store(client, auth_headers, db, user, make_product):
    product = make_product(stock=5)
    db.add(Movement(
        product_id=product.id, user_id=user.id, movement_type="entrada", quantity=5,
        balance_before=0, balance_after=5, reason="Estoque inicial",
    ))
    db.commit()

    r = client.delete(f"/products/{product.id}", headers=auth_headers)
    assert r.status_code == 409
    assert r.json()["error_code"] == "PRODUCT_IN_USE"
    assert client.get(f"/products/{product.id}", headers=auth_headers).status_code == 200


def test_missing_product_returns_404(client, auth_headers):
    r = client.get("/products/12345", headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["error_code"] == "PRODUCT_NOT_FOUND"


def test_categories(client, auth_headers):
    r = client.post("/categories/", json={"name": "Embalagens"}, headers=auth_headers)
    assert r.status_code == 201

    r = client.post("/categories/", json={"name": "Embalagens"}, headers=auth_headers)
    assert r.status_code == 409
    assert r.json()["error_code"] == "DUPLICATE_CATEGORY"

    r = client.get("/categories/", headers=auth_headers)
    assert [c["name"] for c in r.json()] == ["Embalagens"]
