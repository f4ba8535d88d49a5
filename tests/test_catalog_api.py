from datetime import datetime, timedelta


def test_book_crud(client, staff_headers):
    res = client.post("/books/", json={"title": " Emma ", "author": "Jane Austen", "isbn": "978-0141439587",
                                       "available_copies": 3}, headers=staff_headers)
    assert res.status_code == 201
    book = res.get_json()["data"]
    assert book["title"] == "Emma"
    assert book["available_copies"] == 3

    res = client.put(f"/books/{book['id']}", json={"description": "A novel"}, headers=staff_headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["description"] == "A novel"

    res = client.get("/books/", headers=staff_headers)
    assert res.get_json()["data"]["total_items"] == 1

    assert client.delete(f"/books/{book['id']}", headers=staff_headers).status_code == 200
    assert client.get(f"/books/{book['id']}", headers=staff_headers).status_code == 404


def test_book_validation(client, staff_headers, make_book):
    res = client.post("/books/", json={"author": "Nobody"}, headers=staff_headers)
    assert res.status_code == 400
    assert res.get_json()["kind"] == "invalid_input"

    res = client.post("/books/", json={"title": "X", "author": "Y", "available_copies": -1}, headers=staff_headers)
    assert res.status_code == 400

    res = client.post("/books/", json={"title": "X", "author": "Y", "specialty_id": 77}, headers=staff_headers)
    assert res.status_code == 404

    make_book(isbn="111")
    res = client.post("/books/", json={"title": "X", "author": "Y", "isbn": "111"}, headers=staff_headers)
    assert res.status_code == 400


def test_book_copies_not_editable(client, staff_headers, make_book, copies):
    book_id = make_book(copies=2)

    res = client.put(f"/books/{book_id}", json={"available_copies": 10}, headers=staff_headers)

    assert res.status_code == 400
    assert copies(book_id) == 2


def test_delete_book_in_use(client, staff_headers, engine, app, make_book, make_resident, make_user):
    book_id = make_book()
    with app.app_context():
        tx = engine.borrow(book_id, make_resident(), datetime.utcnow() + timedelta(days=3), make_user())
        engine.return_book(tx.id, None)

    res = client.delete(f"/books/{book_id}", headers=staff_headers)

    assert res.status_code == 409
    assert res.get_json()["kind"] == "record_in_use"


def test_catalog_writes_need_staff(client, headers_for):
    res = client.post("/books/", json={"title": "X", "author": "Y"}, headers=headers_for("resident"))
    assert res.status_code == 403
    assert client.get("/books/").status_code == 401


def test_resident_crud(client, staff_headers):
    res = client.post("/residents/", json={"first_name": "Grace", "last_name": "Hopper",
                                           "email": "Grace@Example.org", "grade": 3}, headers=staff_headers)
    assert res.status_code == 201
    resident = res.get_json()["data"]
    assert resident["email"] == "grace@example.org"

    res = client.put(f"/residents/{resident['id']}", json={"phone": "555-0100", "grade": 4}, headers=staff_headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["grade"] == 4

    res = client.post("/residents/", json={"first_name": "G", "last_name": "H", "email": "grace@example.org"},
                      headers=staff_headers)
    assert res.status_code == 400

    assert client.delete(f"/residents/{resident['id']}", headers=staff_headers).status_code == 200
    assert client.get(f"/residents/{resident['id']}", headers=staff_headers).status_code == 404


def test_resident_grade_range(client, staff_headers, make_resident):
    res = client.post("/residents/", json={"first_name": "A", "last_name": "B", "grade": 6}, headers=staff_headers)
    assert res.status_code == 400

    resident_id = make_resident()
    res = client.put(f"/residents/{resident_id}", json={"grade": 0}, headers=staff_headers)
    assert res.status_code == 400


def test_delete_resident_in_use(client, staff_headers, engine, app, make_book, make_resident, make_user):
    resident_id = make_resident()
    with app.app_context():
        engine.borrow(make_book(), resident_id, datetime.utcnow() + timedelta(days=3), make_user())

    res = client.delete(f"/residents/{resident_id}", headers=staff_headers)

    assert res.status_code == 409
    assert res.get_json()["kind"] == "record_in_use"


def test_specialties(client, staff_headers):
    res = client.post("/specialties/", json={"name": "History"}, headers=staff_headers)
    assert res.status_code == 201
    specialty_id = res.get_json()["data"]["id"]

    assert client.post("/specialties/", json={"name": "History"}, headers=staff_headers).status_code == 400
    assert client.post("/specialties/", json={}, headers=staff_headers).status_code == 400

    res = client.post("/books/", json={"title": "SPQR", "author": "Mary Beard", "specialty_id": specialty_id},
                      headers=staff_headers)
    assert res.get_json()["data"]["specialty"] == "History"

    res = client.get("/specialties/", headers=staff_headers)
    assert [s["name"] for s in res.get_json()["data"]] == ["History"]


def test_login_and_me(client, make_user):
    make_user(role="admin", password="hunter2", username="marian")

    res = client.post("/auth/login", json={"username": "marian", "password": "wrong"})
    assert res.status_code == 401

    res = client.post("/auth/login", json={"username": "marian"})
    assert res.status_code == 400

    res = client.post("/auth/login", json={"username": "marian", "password": "hunter2"})
    assert res.status_code == 200
    token = res.get_json()["access_token"]

    res = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.get_json()["user"]["username"] == "marian"
    assert res.get_json()["user"]["role"] == "admin"


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}
