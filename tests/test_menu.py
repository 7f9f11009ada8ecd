import os
from datetime import datetime, timezone

from bson import ObjectId

from conftest import MIB, auth_headers, png_bytes, run
from db.db_operation import mongo_conn
from services.storage import resolve_image

MENU_FIELDS = {"title": "Omelette", "shortDescription": "Three eggs with cheese and herbs", "price": "9", "type": "breakfast"}


def create(client, token, fields=None, image=None):
    kwargs = {"data": fields or MENU_FIELDS, "headers": auth_headers(token)}
    if image is not None:
        kwargs["files"] = {"image": image}
    return client.post("/api/menu", **kwargs)


def test_create_with_valid_image(client, admin_token):
    response = create(client, admin_token, image=("omelette.png", png_bytes(MIB), "image/png"))
    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Omelette"
    assert body["shortDescription"] == "Three eggs with cheese and herbs"
    assert body["price"] == 9
    assert body["type"] == "breakfast"
    assert body["createdBy"]
    assert body["imagePath"].startswith("/uploads/")
    assert body["imagePath"].endswith(".png")
    path = resolve_image(body["imagePath"])
    assert path is not None
    assert os.path.getsize(path) == MIB


def test_create_without_image(client, admin_token):
    response = create(client, admin_token)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "image"
    assert run(mongo_conn.menu_collection.count_documents({})) == 0


def test_create_with_oversized_image(client, admin_token, tmp_path):
    response = create(client, admin_token, image=("huge.png", png_bytes(6 * MIB), "image/png"))
    assert response.status_code == 400
    assert run(mongo_conn.menu_collection.count_documents({})) == 0
    upload_dir = tmp_path / "uploads"
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_create_with_wrong_file_type(client, admin_token):
    response = create(client, admin_token, image=("notes.txt", b"hello", "text/plain"))
    assert response.status_code == 400
    # extension and content type must agree
    response = create(client, admin_token, image=("sneaky.png", b"hello", "text/plain"))
    assert response.status_code == 400


def test_create_with_missing_or_invalid_fields(client, admin_token):
    image = ("x.png", png_bytes(1024), "image/png")
    missing = {k: v for k, v in MENU_FIELDS.items() if k != "title"}
    assert create(client, admin_token, fields=missing, image=image).status_code == 400
    bad_type = {**MENU_FIELDS, "type": "brunch"}
    assert create(client, admin_token, fields=bad_type, image=image).status_code == 400
    negative = {**MENU_FIELDS, "price": "-1"}
    assert create(client, admin_token, fields=negative, image=image).status_code == 400
    short = {**MENU_FIELDS, "shortDescription": "too short"}
    assert create(client, admin_token, fields=short, image=image).status_code == 400


def test_admin_only_writes(client, guest_token, menu_item):
    image = ("x.png", png_bytes(1024), "image/png")
    assert create(client, guest_token, image=image).status_code == 403
    assert client.put(f"/api/menu/{menu_item['id']}", data={"title": "Hacked"}, headers=auth_headers(guest_token)).status_code == 403
    assert client.delete(f"/api/menu/{menu_item['id']}", headers=auth_headers(guest_token)).status_code == 403
    assert client.post("/api/menu", data=MENU_FIELDS).status_code == 401


def test_list_is_public_and_newest_first(client, admin_token, menu_item):
    run(mongo_conn.menu_collection.update_one(
        {"_id": ObjectId(menu_item["id"])},
        {"$set": {"created_at": datetime(2020, 1, 1, tzinfo=timezone.utc)}},
    ))
    second = create(client, admin_token, image=("b.gif", b"GIF89a" + b"\0" * 10, "image/gif")).json()
    response = client.get("/api/menu")
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [second["id"], menu_item["id"]]


def test_list_filtered_by_type(client, admin_token, menu_item):
    create(client, admin_token, fields={**MENU_FIELDS, "type": "dinner"}, image=("d.jpg", b"\xff\xd8\xff" + b"\0" * 10, "image/jpeg"))
    dinner = client.get("/api/menu", params={"type": "dinner"}).json()
    assert [item["type"] for item in dinner] == ["dinner"]


def test_get_one(client, menu_item):
    response = client.get(f"/api/menu/{menu_item['id']}")
    assert response.status_code == 200
    body = response.json()
    for key in ("id", "title", "shortDescription", "price", "type", "imagePath", "createdBy"):
        assert body[key] == menu_item[key]


def test_get_unknown_and_malformed_ids(client):
    assert client.get("/api/menu/64b7f0c2a1b2c3d4e5f60718").status_code == 404
    assert client.get("/api/menu/not-an-id").status_code == 404


def test_update_fields_keeps_image(client, admin_token, menu_item):
    response = client.put(
        f"/api/menu/{menu_item['id']}",
        data={"title": "Buttermilk Pancakes", "price": "8.25"},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Buttermilk Pancakes"
    assert body["price"] == 8.25
    assert body["shortDescription"] == menu_item["shortDescription"]
    assert body["imagePath"] == menu_item["imagePath"]
    assert resolve_image(body["imagePath"]) is not None


def test_update_with_new_image_replaces_file(client, admin_token, menu_item):
    old_path = resolve_image(menu_item["imagePath"])
    response = client.put(
        f"/api/menu/{menu_item['id']}",
        files={"image": ("new.png", png_bytes(2048), "image/png")},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["imagePath"] != menu_item["imagePath"]
    assert resolve_image(body["imagePath"]) is not None
    assert not os.path.exists(old_path)
    assert len(os.listdir(os.path.dirname(old_path))) == 1


def test_update_with_invalid_image_keeps_old_file(client, admin_token, menu_item):
    response = client.put(
        f"/api/menu/{menu_item['id']}",
        files={"image": ("new.bmp", b"BM", "image/bmp")},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 400
    assert resolve_image(menu_item["imagePath"]) is not None
    assert client.get(f"/api/menu/{menu_item['id']}").json()["imagePath"] == menu_item["imagePath"]


def test_update_unknown_item(client, admin_token):
    response = client.put("/api/menu/64b7f0c2a1b2c3d4e5f60718", data={"title": "Nothing"}, headers=auth_headers(admin_token))
    assert response.status_code == 404


def test_delete_removes_record_and_file(client, admin_token, menu_item):
    path = resolve_image(menu_item["imagePath"])
    response = client.delete(f"/api/menu/{menu_item['id']}", headers=auth_headers(admin_token))
    assert response.status_code == 200
    assert response.json() == {"msg": "Menu item deleted"}
    assert not os.path.exists(path)
    assert client.get(f"/api/menu/{menu_item['id']}").status_code == 404


def test_delete_succeeds_when_file_already_gone(client, admin_token, menu_item):
    os.remove(resolve_image(menu_item["imagePath"]))
    response = client.delete(f"/api/menu/{menu_item['id']}", headers=auth_headers(admin_token))
    assert response.status_code == 200
    assert client.get(f"/api/menu/{menu_item['id']}").status_code == 404


def test_delete_unknown_item(client, admin_token):
    assert client.delete("/api/menu/not-an-id", headers=auth_headers(admin_token)).status_code == 404


def test_failed_insert_removes_new_image(client, admin_token, tmp_path, monkeypatch):
    async def broken_insert(*args, **kwargs):
        raise RuntimeError("database down")

    monkeypatch.setattr(mongo_conn.menu_collection, "insert_one", broken_insert)
    response = create(client, admin_token, image=("a.png", png_bytes(1024), "image/png"))
    assert response.status_code == 500
    assert response.json() == {"detail": "Server error"}
    assert list((tmp_path / "uploads").iterdir()) == []


def test_failed_update_keeps_old_image_and_removes_new(client, admin_token, menu_item, monkeypatch):
    async def broken_update(*args, **kwargs):
        raise RuntimeError("database down")

    old_path = resolve_image(menu_item["imagePath"])
    monkeypatch.setattr(mongo_conn.menu_collection, "find_one_and_update", broken_update)
    response = client.put(
        f"/api/menu/{menu_item['id']}",
        files={"image": ("new.png", png_bytes(1024), "image/png")},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 500
    assert os.listdir(os.path.dirname(old_path)) == [os.path.basename(old_path)]


def test_create_checks_lengths_after_trimming(client, admin_token):
    image = ("x.png", png_bytes(1024), "image/png")
    blank = {**MENU_FIELDS, "title": "     ", "shortDescription": "          "}
    response = create(client, admin_token, fields=blank, image=image)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "title"

    padded_title = {**MENU_FIELDS, "title": "  ab  "}
    assert create(client, admin_token, fields=padded_title, image=image).status_code == 400
    padded_description = {**MENU_FIELDS, "shortDescription": "   short    "}
    response = create(client, admin_token, fields=padded_description, image=image)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "shortDescription"
    assert run(mongo_conn.menu_collection.count_documents({})) == 0


def test_create_stores_trimmed_values(client, admin_token):
    fields = {**MENU_FIELDS, "title": "  Omelette  ", "shortDescription": "  Three eggs with cheese  "}
    body = create(client, admin_token, fields=fields, image=("x.png", png_bytes(1024), "image/png")).json()
    assert body["title"] == "Omelette"
    assert body["shortDescription"] == "Three eggs with cheese"


def test_update_checks_lengths_after_trimming(client, admin_token, menu_item):
    url = f"/api/menu/{menu_item['id']}"
    assert client.put(url, data={"title": "    "}, headers=auth_headers(admin_token)).status_code == 400
    assert client.put(url, data={"title": " ab "}, headers=auth_headers(admin_token)).status_code == 400
    assert client.put(url, data={"shortDescription": "   tiny   "}, headers=auth_headers(admin_token)).status_code == 400
    assert client.get(url).json()["title"] == "Pancakes"


def test_uploaded_image_is_served(client, menu_item):
    response = client.get(menu_item["imagePath"])
    assert response.status_code == 200
    assert response.content == png_bytes()


def test_deleted_image_is_no_longer_served(client, admin_token, menu_item):
    client.delete(f"/api/menu/{menu_item['id']}", headers=auth_headers(admin_token))
    assert client.get(menu_item["imagePath"]).status_code == 404
    assert client.get("/uploads/missing.png").status_code == 404


def test_created_at_is_utc_on_every_read(client, admin_token, menu_item):
    assert menu_item["createdAt"].endswith("Z")
    assert client.get(f"/api/menu/{menu_item['id']}").json()["createdAt"].endswith("Z")
    assert client.get("/api/menu").json()[0]["createdAt"].endswith("Z")
    updated = client.put(f"/api/menu/{menu_item['id']}", data={"price": "3"}, headers=auth_headers(admin_token)).json()
    assert updated["createdAt"].endswith("Z")
