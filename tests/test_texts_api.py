"""
API tests for text records and the encrypt/decrypt endpoints.
"""

from conftest import register_and_login

TEXTS = "/api/hillcipher/texts"


def add_text(client, headers, content):
    response = client.post(TEXTS, json={"Content": content}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["id"]


def test_add_text(client, auth_headers):
    response = client.post(TEXTS, json={"Content": "Test text"}, headers=auth_headers)
    assert response.status_code == 200
    assert "Test text" in response.text
    assert response.json()["encrypted"] is False


def test_add_text_snake_case_body(client, auth_headers):
    response = client.post(TEXTS, json={"content": "lower"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["content"] == "lower"


def test_update_text(client, auth_headers):
    text_id = add_text(client, auth_headers, "Initial text")

    response = client.patch(
        f"{TEXTS}/{text_id}", json={"Content": "Updated text"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert "Updated text" in response.text


def test_delete_text(client, auth_headers):
    text_id = add_text(client, auth_headers, "Text to delete")

    response = client.delete(f"{TEXTS}/{text_id}", headers=auth_headers)
    assert response.status_code == 200

    response = client.get(f"{TEXTS}/{text_id}", headers=auth_headers)
    assert response.status_code == 404


def test_encrypt_text(client, auth_headers):
    text_id = add_text(client, auth_headers, "HELLO")

    response = client.post(
        f"{TEXTS}/{text_id}/encrypt", json={"Key": "5,8,3,7"}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["content"] == "PXNGUV"
    assert body["encrypted"] is True


def test_decrypt_text(client, auth_headers):
    text_id = add_text(client, auth_headers, "HELLO")

    client.post(f"{TEXTS}/{text_id}/encrypt", json={"Key": "5,8,3,7"}, headers=auth_headers)
    response = client.post(
        f"{TEXTS}/{text_id}/decrypt", json={"Key": "5,8,3,7"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert "HELLO" in response.text
    assert response.json() == {"id": text_id, "content": "HELLOX", "encrypted": False}


def test_decrypt_with_equivalent_key_spelling(client, auth_headers):
    text_id = add_text(client, auth_headers, "HELLO")

    client.post(f"{TEXTS}/{text_id}/encrypt", json={"key": "5,8,3,7"}, headers=auth_headers)
    response = client.post(
        f"{TEXTS}/{text_id}/decrypt", json={"key": " 5, 8, 29, 7"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["content"] == "HELLOX"


def test_get_text(client, auth_headers):
    text_id = add_text(client, auth_headers, "Test text")

    response = client.get(f"{TEXTS}/{text_id}", headers=auth_headers)
    assert response.status_code == 200
    assert "Test text" in response.text


def test_get_all_texts(client, auth_headers):
    add_text(client, auth_headers, "Text 1")
    add_text(client, auth_headers, "Text 2")

    response = client.get(TEXTS, headers=auth_headers)
    assert response.status_code == 200
    assert [text["content"] for text in response.json()] == ["Text 1", "Text 2"]


class TestCipherErrors:
    def test_non_invertible_key(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        response = client.post(
            f"{TEXTS}/{text_id}/encrypt", json={"Key": "2,4,6,8"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "inverse" in response.json()["detail"]

        # Nothing was stored
        assert client.get(f"{TEXTS}/{text_id}", headers=auth_headers).json()["content"] == "HELLO"

    def test_bad_dimension(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        response = client.post(
            f"{TEXTS}/{text_id}/encrypt", json={"Key": "1,2,3,4,5"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "square" in response.json()["detail"]

    def test_malformed_key(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        response = client.post(
            f"{TEXTS}/{text_id}/encrypt", json={"Key": "5,a,3,7"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "non-integer" in response.json()["detail"]

    def test_very_long_key_token(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        response = client.post(
            f"{TEXTS}/{text_id}/encrypt",
            json={"Key": "1" + "0" * 5000 + ",8,3,7"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert "inverse" in response.json()["detail"]

    def test_encrypt_twice_conflicts(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        url = f"{TEXTS}/{text_id}/encrypt"
        assert client.post(url, json={"Key": "5,8,3,7"}, headers=auth_headers).status_code == 200
        assert client.post(url, json={"Key": "5,8,3,7"}, headers=auth_headers).status_code == 409

    def test_decrypt_plain_text_conflicts(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        response = client.post(
            f"{TEXTS}/{text_id}/decrypt", json={"Key": "5,8,3,7"}, headers=auth_headers
        )
        assert response.status_code == 409

    def test_decrypt_with_other_key(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        client.post(f"{TEXTS}/{text_id}/encrypt", json={"Key": "5,8,3,7"}, headers=auth_headers)

        response = client.post(
            f"{TEXTS}/{text_id}/decrypt", json={"Key": "3,3,2,5"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "does not match" in response.json()["detail"]

    def test_update_clears_encryption(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "HELLO")
        client.post(f"{TEXTS}/{text_id}/encrypt", json={"Key": "5,8,3,7"}, headers=auth_headers)

        response = client.patch(
            f"{TEXTS}/{text_id}", json={"Content": "FRESH"}, headers=auth_headers
        )
        assert response.json()["encrypted"] is False


class TestAccess:
    def test_requires_token(self, client):
        assert client.get(TEXTS).status_code == 401

    def test_rejects_unknown_token(self, client):
        response = client.get(TEXTS, headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_texts_are_private(self, client, auth_headers):
        text_id = add_text(client, auth_headers, "secret")
        other_headers = {"Authorization": f"Bearer {register_and_login(client)}"}

        assert client.get(f"{TEXTS}/{text_id}", headers=other_headers).status_code == 404
        assert client.get(TEXTS, headers=other_headers).json() == []
        assert client.delete(f"{TEXTS}/{text_id}", headers=other_headers).status_code == 404

    def test_missing_text(self, client, auth_headers):
        assert client.get(f"{TEXTS}/999999", headers=auth_headers).status_code == 404
