import unittest
from concurrent.futures import ThreadPoolExecutor

from support import auth_headers, clear_database, make_user, resume_payload

from fastapi.testclient import TestClient

from resume_builder.main import app
from resume_builder.schemas.resume import VersionCreateRequest
from resume_builder.services import version_service


class VersionsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_database()
        self.owner = make_user("owner")
        self.headers = auth_headers(self.owner)
        response = self.client.post("/api/resumes", json=resume_payload(), headers=self.headers)
        self.resume = response.json()
        self.url = f"/api/resumes/{self.resume['id']}/versions"

    def _snapshot(self, description: str, title: str = "Experience") -> dict:
        response = self.client.post(
            self.url,
            json={"sections": [{"type": "experience", "title": title, "content": "x"}], "description": description},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_version_numbers_increment(self):
        numbers = [self._snapshot(f"v{i}")["versionNumber"] for i in range(3)]
        self.assertEqual(numbers, [1, 2, 3])

        listing = self.client.get(self.url, headers=self.headers).json()
        self.assertEqual([v["versionNumber"] for v in listing], [3, 2, 1])
        self.assertEqual(listing[0]["user"]["id"], self.owner["id"])

    def test_concurrent_snapshots_get_distinct_contiguous_numbers(self):
        def snapshot(index: int) -> int:
            payload = VersionCreateRequest.model_validate(
                {"sections": [{"type": "experience", "title": "Experience", "content": "x"}], "description": f"v{index}"}
            )
            return version_service.create_version(self.resume["id"], self.owner, payload)["version_number"]

        with ThreadPoolExecutor(max_workers=8) as pool:
            numbers = list(pool.map(snapshot, range(16)))

        self.assertEqual(sorted(numbers), list(range(1, 17)))
        listing = self.client.get(self.url, headers=self.headers).json()
        self.assertEqual(len({v["versionNumber"] for v in listing}), 16)

    def test_description_is_required(self):
        response = self.client.post(self.url, json={"sections": [], "description": "  "}, headers=self.headers)
        self.assertEqual(response.status_code, 422)

    def test_get_version_and_missing(self):
        self._snapshot("first")
        response = self.client.get(f"{self.url}/1", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "first")

        response = self.client.get(f"{self.url}/9", headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Version not found")

    def test_restore_replaces_sections_and_appends_version(self):
        self._snapshot("old layout", title="Old Title")
        self._snapshot("new layout", title="New Title")

        response = self.client.post(f"{self.url}/1/restore", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Version restored successfully")
        self.assertEqual(body["version"]["versionNumber"], 3)
        self.assertEqual(body["version"]["description"], "Restored from version 1")

        resume = self.client.get(f"/api/resumes/{self.resume['id']}", headers=self.headers).json()
        self.assertEqual([s["title"] for s in resume["sections"]], ["Old Title"])

    def test_outsider_cannot_access_versions(self):
        outsider = make_user("outsider")
        response = self.client.get(self.url, headers=auth_headers(outsider))
        self.assertEqual(response.status_code, 403)


if __name__ == "__main__":
    unittest.main()
