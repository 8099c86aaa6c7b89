"""
Tests for Books API Endpoints

This module tests all CRUD operations for the /api/books endpoints.

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_create_book_success, test_get_book_not_found

Every response is checked through its envelope: {message, data, isSuccess}.
"""

from bson import ObjectId
from fastapi import status

from tests.conftest import auth_header

MISSING_ID = str(ObjectId())


class TestListBooks:
    """Tests for GET /api/books endpoint."""

    def test_list_books_empty(self, client):
        """Test listing books when database is empty."""
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["isSuccess"] is True
        assert body["message"] == "Books fetched successfully"
        assert body["data"] == []

    def test_list_books_with_data(self, client, sample_book):
        """Test listing books returns expected data."""
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["_id"] == str(sample_book.id)
        assert data[0]["title"] == "Rich Dad Poor Dad"
        assert data[0]["reviewCount"] == 0
        assert data[0]["averageRating"] is None

    def test_list_books_returns_exactly_created_set(self, client, sample_user, book_payload):
        headers = auth_header(sample_user)
        titles = ["Dune", "Emma", "Ulysses"]
        for title in titles:
            client.post("/api/books", json={**book_payload, "title": title}, headers=headers)

        response = client.get("/api/books")

        assert sorted(book["title"] for book in response.json()["data"]) == titles


class TestGetBook:
    """Tests for GET /api/books/{book_id} endpoint."""

    def test_get_book_success(self, client, sample_book):
        """Test getting a book by valid ID."""
        response = client.get(f"/api/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Book fetched successfully"
        data = body["data"]
        assert data["title"] == "Rich Dad Poor Dad"
        assert data["author"] == "Robert Kiyosaki"
        assert data["genre"] == "Finance"
        assert data["price"] == 15.99
        assert "createdAt" in data
        assert "updatedAt" in data

    def test_get_book_not_found(self, client):
        """Test getting a non-existent book returns 404."""
        response = client.get(f"/api/books/{MISSING_ID}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {
            "message": "Book not found",
            "data": None,
            "isSuccess": False,
        }

    def test_get_book_malformed_id(self, client):
        """A value that is not an ObjectId is just an unknown book."""
        response = client.get("/api/books/not-an-id")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Book not found"


class TestCreateBook:
    """Tests for POST /api/books endpoint."""

    def test_create_book_success(self, client, sample_user, book_payload):
        """Test creating a book with valid data."""
        response = client.post(
            "/api/books", json=book_payload, headers=auth_header(sample_user)
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["isSuccess"] is True
        assert body["message"] == "Book created successfully"
        data = body["data"]
        assert data["title"] == "Dune"
        assert data["image"] == "/dune.jpg"
        assert data["price"] == 9.99
        assert data["reviewCount"] == 0
        assert ObjectId.is_valid(data["_id"])

        # Retrievable afterwards
        fetched = client.get(f"/api/books/{data['_id']}")
        assert fetched.json()["data"]["title"] == "Dune"

    def test_create_book_duplicate_title(self, client, sample_user, sample_book, book_payload):
        """Test that a second book with the same title is rejected."""
        response = client.post(
            "/api/books",
            json={**book_payload, "title": sample_book.title},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {
            "message": "Book already exists",
            "data": None,
            "isSuccess": False,
        }

    def test_create_book_twice(self, client, sample_user, book_payload):
        headers = auth_header(sample_user)

        first = client.post("/api/books", json=book_payload, headers=headers)
        second = client.post("/api/books", json=book_payload, headers=headers)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_409_CONFLICT
        assert len(client.get("/api/books").json()["data"]) == 1

    def test_create_book_default_image(self, client, sample_user, book_payload):
        """Test that a blank image is replaced by the default cover."""
        response = client.post(
            "/api/books",
            json={**book_payload, "image": "   "},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["image"] == "/rich and poor dad.jpg"

    def test_create_book_without_image(self, client, sample_user, book_payload):
        del book_payload["image"]

        response = client.post("/api/books", json=book_payload, headers=auth_header(sample_user))

        assert response.json()["data"]["image"] == "/rich and poor dad.jpg"

    def test_create_book_numeric_string_price(self, client, sample_user, book_payload):
        """Prices sent as strings are coerced to numbers."""
        response = client.post(
            "/api/books",
            json={**book_payload, "price": "18.5"},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["price"] == 18.5

    def test_create_book_negative_price(self, client, sample_user, book_payload):
        """Test that negative price is rejected."""
        response = client.post(
            "/api/books",
            json={**book_payload, "price": -1},
            headers=auth_header(sample_user),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["isSuccess"] is False
        assert body["message"] == "Validation failed"
        assert body["data"][0]["field"] == "price"

    def test_create_book_blank_title(self, client, sample_user, book_payload):
        """Test that whitespace-only title is rejected."""
        response = client.post(
            "/api/books",
            json={**book_payload, "title": "   "},
            headers=auth_header(sample_user),
        )

        assert response.status_code == 422
        assert response.json()["data"][0]["field"] == "title"

    def test_create_book_missing_required_fields(self, client, sample_user):
        response = client.post(
            "/api/books", json={"title": "Dune"}, headers=auth_header(sample_user)
        )

        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["data"]}
        assert {"author", "genre", "price"} <= fields

    def test_create_book_boolean_price(self, client, sample_user, book_payload):
        """A boolean is not coerced into a price."""
        response = client.post(
            "/api/books",
            json={**book_payload, "price": True},
            headers=auth_header(sample_user),
        )

        assert response.status_code == 422
        assert response.json()["data"][0]["field"] == "price"
        assert client.get("/api/books").json()["data"] == []

    def test_create_book_nan_price(self, client, sample_user, book_payload):
        response = client.post(
            "/api/books",
            json={**book_payload, "price": "NaN"},
            headers=auth_header(sample_user),
        )

        assert response.status_code == 422
        error = response.json()["data"][0]
        assert error["field"] == "price"
        assert "finite" in error["message"]

    def test_create_book_trims_fields(self, client, sample_user, book_payload):
        response = client.post(
            "/api/books",
            json={**book_payload, "title": "  Dune  ", "author": " Frank Herbert "},
            headers=auth_header(sample_user),
        )

        data = response.json()["data"]
        assert data["title"] == "Dune"
        assert data["author"] == "Frank Herbert"

    def test_create_book_requires_auth(self, client, book_payload):
        """Test that creating a book without a token returns 401."""
        response = client.post("/api/books", json=book_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["isSuccess"] is False

    def test_create_book_invalid_token(self, client, book_payload):
        response = client.post(
            "/api/books",
            json=book_payload,
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUpdateBook:
    """Tests for PUT /api/books/{book_id} endpoint."""

    def test_update_book_success(self, client, sample_user, sample_book, book_payload):
        """Test that an update replaces every field."""
        response = client.put(
            f"/api/books/{sample_book.id}",
            json=book_payload,
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Book updated successfully"
        data = body["data"]
        assert data["_id"] == str(sample_book.id)
        for field in ("title", "author", "genre", "description", "image", "price"):
            assert data[field] == book_payload[field]

        fetched = client.get(f"/api/books/{sample_book.id}").json()["data"]
        assert fetched["title"] == "Dune"

    def test_update_book_blank_image_uses_default(
        self, client, sample_user, sample_book, book_payload
    ):
        response = client.put(
            f"/api/books/{sample_book.id}",
            json={**book_payload, "image": ""},
            headers=auth_header(sample_user),
        )

        assert response.json()["data"]["image"] == "/rich and poor dad.jpg"

    def test_update_book_not_found(self, client, sample_user, book_payload):
        """Test updating non-existent book returns 404."""
        response = client.put(
            f"/api/books/{MISSING_ID}",
            json=book_payload,
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Book not found"

    def test_update_book_invalid_body(self, client, sample_user, sample_book, book_payload):
        response = client.put(
            f"/api/books/{sample_book.id}",
            json={**book_payload, "price": "free"},
            headers=auth_header(sample_user),
        )

        assert response.status_code == 422

    def test_update_book_requires_auth(self, client, sample_book, book_payload):
        response = client.put(f"/api/books/{sample_book.id}", json=book_payload)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestDeleteBook:
    """Tests for DELETE /api/books/{book_id} endpoint."""

    def test_delete_book_success(self, client, sample_user, sample_book):
        """Test deleting an existing book."""
        response = client.delete(
            f"/api/books/{sample_book.id}", headers=auth_header(sample_user)
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Book deleted successfully"
        assert body["data"]["_id"] == str(sample_book.id)

        # Verify it's gone
        assert client.get(f"/api/books/{sample_book.id}").status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/api/books").json()["data"] == []

    def test_delete_book_removes_reviews(self, client, sample_user, sample_review):
        book_id = str(sample_review.book_id)

        client.delete(f"/api/books/{book_id}", headers=auth_header(sample_user))

        response = client.get(f"/api/reviews/{sample_review.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_book_not_found(self, client, sample_user):
        """Test deleting non-existent book returns 404."""
        response = client.delete(f"/api/books/{MISSING_ID}", headers=auth_header(sample_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_book_requires_auth(self, client, sample_book):
        response = client.delete(f"/api/books/{sample_book.id}")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
