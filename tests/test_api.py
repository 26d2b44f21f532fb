import asyncio
import unittest

from fastapi.testclient import TestClient

import main

PREFIX = "/api/v1"


class GalleryApiTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(main.app)
        main.backends.identity.reset()
        main.backends.documents.reset()
        main.backends.blobs.reset()

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def signup(self, email="ann@example.com", password="secret123", **extra):
        response = self.client.post(f"{PREFIX}/admin/signup", json={"email": email, "password": password, **extra})
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["user"]

    def auth(self, user_id):
        return {"Authorization": f"Bearer {main.backends.identity.issue_token(user_id)}"}

    def admin_headers(self, email="ann@example.com"):
        return self.auth(self.signup(email=email)["id"])

    def create_client(self, headers, email="c1@example.com", name="Client"):
        response = self.client.post(
            f"{PREFIX}/client/create",
            json={"email": email, "name": name},
            headers=headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["client"]

    def create_gallery(self, headers, **body):
        body.setdefault("name", "Wedding - Smith")
        response = self.client.post(f"{PREFIX}/admin/galleries", json=body, headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["gallery"]

    def upload(self, headers, gallery_id, name="a.jpg", data=b"jpeg-bytes"):
        return self.client.post(
            f"{PREFIX}/admin/galleries/{gallery_id}/photos",
            files={"photo": (name, data, "image/jpeg")},
            headers=headers,
        )

    # ------------------------------------------------------------
    # Tests
    # ------------------------------------------------------------

    def test_health(self):
        response = self.client.get(f"{PREFIX}/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_signup(self):
        user = self.signup(name="Ann", businessName="Ann Photo")

        self.assertEqual(user["email"], "ann@example.com")
        self.assertEqual(user["user_metadata"]["role"], "admin")
        self.assertEqual(user["user_metadata"]["businessName"], "Ann Photo")

        session = asyncio.run(main.backends.identity.sign_in("ann@example.com", "secret123"))
        self.assertEqual(session.user.id, user["id"])
        self.assertEqual(session.user.role.value, "admin")

    def test_signup_duplicate_email(self):
        self.signup()
        response = self.client.post(
            f"{PREFIX}/admin/signup",
            json={"email": "ann@example.com", "password": "secret123"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_missing_or_bad_token(self):
        response = self.client.get(f"{PREFIX}/admin/galleries")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

        response = self.client.get(f"{PREFIX}/client/galleries", headers={"Authorization": "Bearer nope"})
        self.assertEqual(response.status_code, 401)
        self.assertIn("error", response.json())

    def test_client_cannot_call_admin_operations(self):
        admin = self.admin_headers()
        client = self.auth(self.create_client(admin)["id"])

        response = self.client.get(f"{PREFIX}/admin/galleries", headers=client)
        self.assertEqual(response.status_code, 401)

        response = self.client.post(f"{PREFIX}/client/create", json={"email": "x@example.com"}, headers=client)
        self.assertEqual(response.status_code, 401)

    def test_gallery_crud(self):
        headers = self.admin_headers()
        gallery = self.create_gallery(headers, description="June")

        self.assertEqual(gallery["status"], "draft")
        self.assertEqual(gallery["privacy"], "private")
        self.assertEqual(gallery["photos"], [])
        self.assertIn("adminId", gallery)

        response = self.client.put(
            f"{PREFIX}/admin/galleries/{gallery['id']}",
            json={"status": "published"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()["gallery"]
        self.assertEqual(updated["status"], "published")
        self.assertEqual(updated["name"], gallery["name"])
        self.assertEqual(updated["description"], "June")

        listed = self.client.get(f"{PREFIX}/admin/galleries", headers=headers).json()["galleries"]
        self.assertEqual([g["id"] for g in listed], [gallery["id"]])

        response = self.client.delete(f"{PREFIX}/admin/galleries/{gallery['id']}", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get(f"{PREFIX}/admin/galleries", headers=headers).json(), {"galleries": []})

    def test_other_admins_gallery_is_not_found(self):
        owner = self.admin_headers()
        gallery = self.create_gallery(owner)
        intruder = self.admin_headers(email="zoe@example.com")

        response = self.client.put(
            f"{PREFIX}/admin/galleries/{gallery['id']}",
            json={"name": "Mine now"},
            headers=intruder,
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.upload(intruder, gallery["id"]).status_code, 404)
        self.assertEqual(self.client.get(f"{PREFIX}/admin/galleries", headers=intruder).json(), {"galleries": []})

    def test_validation_errors(self):
        headers = self.admin_headers()

        response = self.client.post(f"{PREFIX}/admin/galleries", json={}, headers=headers)
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

        gallery = self.create_gallery(headers)
        response = self.client.put(
            f"{PREFIX}/admin/galleries/{gallery['id']}",
            json={"name": None},
            headers=headers,
        )
        self.assertEqual(response.status_code, 400)

    def test_upload_without_file(self):
        headers = self.admin_headers()
        gallery = self.create_gallery(headers)

        response = self.client.post(f"{PREFIX}/admin/galleries/{gallery['id']}/photos", headers=headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No file provided"})

    def test_wedding_scenario(self):
        admin = self.admin_headers()
        c1 = self.create_client(admin, email="c1@example.com")
        c2 = self.create_client(admin, email="c2@example.com")
        gallery = self.create_gallery(admin, status="draft", privacy="private", clients=[])

        for name in ("one.jpg", "two.jpg"):
            response = self.upload(admin, gallery["id"], name=name)
            self.assertEqual(response.status_code, 200, response.text)
            self.assertTrue(response.json()["photo"]["storagePath"].endswith(".jpg"))

        response = self.client.put(
            f"{PREFIX}/admin/galleries/{gallery['id']}",
            json={"clients": [c1["id"]]},
            headers=admin,
        )
        self.assertEqual(response.status_code, 200)

        seen = self.client.get(f"{PREFIX}/client/galleries", headers=self.auth(c1["id"]))
        self.assertEqual(seen.status_code, 200)
        galleries = seen.json()["galleries"]
        self.assertEqual(len(galleries), 1)
        self.assertEqual(len(galleries[0]["photos"]), 2)
        for photo in galleries[0]["photos"]:
            self.assertTrue(photo["url"])

        other = self.client.get(f"{PREFIX}/client/galleries", headers=self.auth(c2["id"]))
        self.assertEqual(other.json(), {"galleries": []})

    def test_removing_client_revokes_access(self):
        admin = self.admin_headers()
        c1 = self.create_client(admin)
        wedding = self.create_gallery(admin, clients=[c1["id"]])
        engagement = self.create_gallery(admin, name="Engagement", clients=[c1["id"]])
        headers = self.auth(c1["id"])

        seen = self.client.get(f"{PREFIX}/client/galleries", headers=headers).json()["galleries"]
        self.assertEqual(sorted(g["id"] for g in seen), sorted([wedding["id"], engagement["id"]]))

        response = self.client.put(
            f"{PREFIX}/admin/galleries/{wedding['id']}",
            json={"clients": []},
            headers=admin,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["gallery"]["clients"], [])

        seen = self.client.get(f"{PREFIX}/client/galleries", headers=headers).json()["galleries"]
        self.assertEqual([g["id"] for g in seen], [engagement["id"]])
        self.assertEqual(seen[0]["clients"], [c1["id"]])
        self.assertEqual(seen[0]["updatedAt"], engagement["updatedAt"])

        response = self.client.put(
            f"{PREFIX}/admin/galleries/{engagement['id']}",
            json={"clients": []},
            headers=admin,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(f"{PREFIX}/client/galleries", headers=headers).json(), {"galleries": []})

    def test_request_id_header(self):
        response = self.client.get(f"{PREFIX}/health")
        self.assertRegex(response.headers["X-Request-ID"], r"^[0-9a-f]{8}$")

        response = self.client.get(f"{PREFIX}/health", headers={"X-Request-ID": "trace-42"})
        self.assertEqual(response.headers["X-Request-ID"], "trace-42")

        response = self.client.get(f"{PREFIX}/admin/galleries", headers={"X-Request-ID": "trace-43"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["X-Request-ID"], "trace-43")

    def test_toggle_favorite(self):
        admin = self.admin_headers()
        client = self.create_client(admin)
        gallery = self.create_gallery(admin, clients=[client["id"]])
        photo = self.upload(admin, gallery["id"]).json()["photo"]
        headers = self.auth(client["id"])
        url = f"{PREFIX}/client/galleries/{gallery['id']}/photos/{photo['id']}/favorite"

        first = self.client.post(url, headers=headers)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"success": True, "isFavorite": True})

        second = self.client.post(url, headers=headers)
        self.assertEqual(second.json(), {"success": True, "isFavorite": False})

        missing = self.client.post(
            f"{PREFIX}/client/galleries/{gallery['id']}/photos/photo-missing/favorite",
            headers=headers,
        )
        self.assertEqual(missing.status_code, 404)


if __name__ == "__main__":
    unittest.main()
