from app.models import BookStatus
from factories import add_book, add_user, add_wishlist

MISSING_BOOK_ID = "9a1b2c3d-4e5f-4a6b-8c7d-0e1f2a3b4c5d"


def test_add_to_wishlist(client, store):
    book = add_book(store)
    add_user(store, "U1")

    response = client.post("/api/wishlist", json={"userId": "U1", "bookId": book.id})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Book added to wishlist successfully"
    assert body["data"]["userId"] == "U1"
    assert body["data"]["bookId"] == book.id
    assert body["data"]["book"]["title"] == book.title


def test_add_to_wishlist_twice(client, store):
    book = add_book(store)
    add_user(store, "U1")
    add_wishlist(store, "U1", book)

    response = client.post("/api/wishlist", json={"userId": "U1", "bookId": book.id})

    assert response.status_code == 409
    assert response.json()["message"] == "Book is already in wishlist"


def test_add_to_wishlist_unknown_user(client, store):
    book = add_book(store)

    response = client.post("/api/wishlist", json={"userId": "U9", "bookId": book.id})

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_add_to_wishlist_deleted_user(client, store):
    book = add_book(store)
    add_user(store, "U1", deleted=True)

    response = client.post("/api/wishlist", json={"userId": "U1", "bookId": book.id})

    assert response.status_code == 404


def test_add_to_wishlist_book_errors(client, store):
    add_user(store, "U1")
    deleted = add_book(store)
    deleted.soft_delete()
    store.commit()

    malformed = client.post("/api/wishlist", json={"userId": "U1", "bookId": "abc"})
    missing = client.post("/api/wishlist", json={"userId": "U1", "bookId": MISSING_BOOK_ID})
    gone = client.post("/api/wishlist", json={"userId": "U1", "bookId": deleted.id})

    assert malformed.status_code == 400
    assert malformed.json()["message"] == "Invalid book ID"
    assert missing.status_code == 404
    assert missing.json()["message"] == "Book not found"
    assert gone.status_code == 404


def test_add_to_wishlist_requires_fields(client):
    response = client.post("/api/wishlist", json={"userId": "U1"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "bookId"


def test_user_wishlist(client, store):
    first = add_book(store)
    second = add_book(store, title="Dune", author="Frank Herbert", isbn="9780441172719")
    add_user(store, "U1")
    add_wishlist(store, "U1", first)
    add_wishlist(store, "U1", second)

    response = client.get("/api/wishlist/user/U1")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["userId"] == "U1"
    assert sorted(item["book"]["title"] for item in data["wishlist"]) == [
        "Dune",
        "The Left Hand of Darkness",
    ]


def test_user_wishlist_unknown_user(client):
    response = client.get("/api/wishlist/user/U9")
    assert response.status_code == 404


def test_check_wishlist(client, store):
    book = add_book(store)
    add_user(store, "U1")
    add_user(store, "U2")
    add_wishlist(store, "U1", book)

    present = client.get("/api/wishlist/check", params={"userId": "U1", "bookId": book.id})
    absent = client.get("/api/wishlist/check", params={"userId": "U2", "bookId": book.id})

    assert present.status_code == 200
    assert present.json()["data"]["isInWishlist"] is True
    assert present.json()["data"]["wishlist"]["userId"] == "U1"
    assert absent.json()["data"] == {"isInWishlist": False, "wishlist": None}


def test_check_wishlist_requires_both_ids(client):
    response = client.get("/api/wishlist/check", params={"userId": "U1"})

    assert response.status_code == 400
    assert response.json()["message"] == "userId and bookId are required"


def test_list_wishlists(client, store):
    book = add_book(store)
    other = add_book(store, title="Dune", author="Frank Herbert", isbn="9780441172719")
    for user_id in ("U1", "U2", "U3"):
        add_user(store, user_id)
        add_wishlist(store, user_id, book)
    add_wishlist(store, "U1", other)

    response = client.get("/api/wishlist", params={"bookId": book.id, "limit": 2})

    data = response.json()["data"]
    assert len(data["wishlists"]) == 2
    assert data["pagination"]["totalItems"] == 3
    assert data["pagination"]["totalPages"] == 2

    response = client.get("/api/wishlist", params={"userId": "U1"})
    assert response.json()["data"]["pagination"]["totalItems"] == 2


def test_remove_from_wishlist(client, store):
    book = add_book(store)
    add_user(store, "U1")
    add_wishlist(store, "U1", book)

    response = client.delete(f"/api/wishlist/user/U1/book/{book.id}")

    assert response.status_code == 200
    assert response.json()["message"] == "Book removed from wishlist successfully"

    response = client.delete(f"/api/wishlist/user/U1/book/{book.id}")
    assert response.status_code == 404
    assert response.json()["message"] == "Book not found in wishlist"


def test_removed_entry_is_not_notified(client, store, notifier):
    book = add_book(store, availability_status=BookStatus.BORROWED)
    add_user(store, "U1")
    add_user(store, "U2")
    add_wishlist(store, "U1", book)
    add_wishlist(store, "U2", book)

    client.delete(f"/api/wishlist/user/U2/book/{book.id}")
    client.put(f"/api/books/{book.id}", json={"availabilityStatus": "Available"})

    assert notifier.recipients == ["u1@example.com"]
