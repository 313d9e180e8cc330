from conftest import API, CREDENTIALS
from hoaxify.models import FileAttachment, Hoax

USER2 = {"email": "user2@mail.com", "password": "P4ssword"}


def post_hoaxes(client, headers, count, prefix="Hoax number"):
    for i in range(1, count + 1):
        client.post(f"{API}/hoaxes", json={"content": f"{prefix} {i:03d}"}, headers=headers)


class TestListHoaxes:
    def test_empty_page(self, client):
        body = client.get(f"{API}/hoaxes").json()
        assert body == {"content": [], "page": 0, "size": 10, "totalPages": 0}

    def test_newest_first(self, client, add_user, auth_header):
        add_user()
        post_hoaxes(client, auth_header(CREDENTIALS), 3)
        contents = [h["content"] for h in client.get(f"{API}/hoaxes").json()["content"]]
        assert contents == ["Hoax number 003", "Hoax number 002", "Hoax number 001"]

    def test_pages_through_hoaxes(self, client, add_user, auth_header):
        add_user()
        post_hoaxes(client, auth_header(CREDENTIALS), 12)
        body = client.get(f"{API}/hoaxes", params={"page": 1, "size": 5}).json()
        assert body["totalPages"] == 3
        assert [h["content"] for h in body["content"]][0] == "Hoax number 007"

    def test_hoax_shape(self, client, add_user, auth_header, png_bytes):
        user = add_user()
        headers = auth_header(CREDENTIALS)
        attachment_id = client.post(
            f"{API}/hoaxes/attachments", files={"file": ("a.png", png_bytes, "image/png")}
        ).json()["id"]
        client.post(f"{API}/hoaxes", json={"content": "Hoax with file", "fileAttachment": attachment_id}, headers=headers)

        hoax = client.get(f"{API}/hoaxes").json()["content"][0]
        assert set(hoax.keys()) == {"id", "content", "timestamp", "user", "fileAttachment"}
        assert isinstance(hoax["timestamp"], int)
        assert hoax["user"]["id"] == user.id
        assert hoax["fileAttachment"]["fileType"] == "image/png"

    def test_hoax_without_attachment_has_no_attachment_key(self, client, add_user, auth_header):
        add_user()
        post_hoaxes(client, auth_header(CREDENTIALS), 1)
        assert "fileAttachment" not in client.get(f"{API}/hoaxes").json()["content"][0]


class TestListUserHoaxes:
    def test_returns_only_that_users_hoaxes(self, client, add_user, auth_header):
        user = add_user()
        add_user(username="user2", email="user2@mail.com")
        post_hoaxes(client, auth_header(CREDENTIALS), 2, prefix="First user hoax")
        post_hoaxes(client, auth_header(USER2), 3, prefix="Second user hoax")

        body = client.get(f"{API}/users/{user.id}/hoaxes").json()
        assert len(body["content"]) == 2
        assert all(h["user"]["id"] == user.id for h in body["content"])

    def test_returns_404_for_unknown_user(self, client):
        response = client.get(f"{API}/users/42/hoaxes")
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_returns_404_for_inactive_user(self, client, add_user):
        user = add_user(inactive=True)
        assert client.get(f"{API}/users/{user.id}/hoaxes").status_code == 404


class TestDeleteHoax:
    def test_returns_403_without_token(self, client, add_user, auth_header, rows):
        add_user()
        post_hoaxes(client, auth_header(CREDENTIALS), 1)
        hoax_id = rows(Hoax)[0].id
        response = client.delete(f"{API}/hoaxes/{hoax_id}")
        assert response.status_code == 403
        assert len(rows(Hoax)) == 1

    def test_returns_403_for_another_users_hoax(self, client, add_user, auth_header, rows):
        add_user()
        add_user(username="user2", email="user2@mail.com")
        post_hoaxes(client, auth_header(CREDENTIALS), 1)
        hoax_id = rows(Hoax)[0].id
        assert client.delete(f"{API}/hoaxes/{hoax_id}", headers=auth_header(USER2)).status_code == 403

    def test_returns_403_for_unknown_hoax(self, client, add_user, auth_header):
        add_user()
        assert client.delete(f"{API}/hoaxes/77", headers=auth_header(CREDENTIALS)).status_code == 403

    def test_owner_deletes_hoax_and_attachment(self, client, add_user, auth_header, attachment_store, png_bytes, rows):
        add_user()
        headers = auth_header(CREDENTIALS)
        attachment_id = client.post(
            f"{API}/hoaxes/attachments", files={"file": ("a.png", png_bytes, "image/png")}
        ).json()["id"]
        client.post(f"{API}/hoaxes", json={"content": "Hoax with file", "fileAttachment": attachment_id}, headers=headers)
        hoax_id = rows(Hoax)[0].id
        filename = rows(FileAttachment)[0].filename

        response = client.delete(f"{API}/hoaxes/{hoax_id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Hoax is deleted"
        assert rows(Hoax) == []
        assert rows(FileAttachment) == []
        assert not attachment_store.exists(filename)
