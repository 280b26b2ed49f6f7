import unittest

from support import auth_headers, clear_database, make_user

from fastapi.testclient import TestClient

from resume_builder.main import app

SAMPLE_CODE = "\\documentclass{article}\n\\begin{document}\nHello\n\\end{document}\n"


class LatexApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_database()
        self.user = make_user("jane")
        self.headers = auth_headers(self.user)

    def test_save_creates_then_updates(self):
        created = self.client.post("/api/latex/save", json={"code": SAMPLE_CODE}, headers=self.headers)
        self.assertEqual(created.status_code, 200)
        body = created.json()
        self.assertEqual(body["title"], "Untitled Document")

        updated = self.client.post(
            "/api/latex/save",
            json={"documentId": body["id"], "code": "% edited", "title": "CV"},
            headers=self.headers,
        ).json()
        self.assertEqual(updated["id"], body["id"])
        self.assertEqual(updated["code"], "% edited")
        self.assertEqual(updated["title"], "CV")

        fetched = self.client.get(f"/api/latex/document/{body['id']}", headers=self.headers)
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["code"], "% edited")

    def test_documents_are_private(self):
        body = self.client.post("/api/latex/save", json={"code": SAMPLE_CODE}, headers=self.headers).json()
        other = auth_headers(make_user("other"))

        self.assertEqual(self.client.get(f"/api/latex/document/{body['id']}", headers=other).status_code, 404)
        response = self.client.post(
            "/api/latex/save",
            json={"documentId": body["id"], "code": "hijack"},
            headers=other,
        )
        self.assertEqual(response.status_code, 404)

    def test_requires_auth(self):
        self.assertEqual(self.client.post("/api/latex/save", json={"code": "x"}).status_code, 401)


if __name__ == "__main__":
    unittest.main()
