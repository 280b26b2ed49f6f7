import unittest

from support import auth_headers, clear_database, make_user

from fastapi.testclient import TestClient

from resume_builder.data.default_templates import DEFAULT_TEMPLATES
from resume_builder.main import app
from resume_builder.services.template_service import seed_default_templates


class TemplatesApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_database()
        self.user = make_user("designer")
        self.headers = auth_headers(self.user)

    def _create(self, name: str, **extra) -> dict:
        payload = {"name": name, "category": "modern", "style": {"fontFamily": "Inter", "colors": ["#111"]}, **extra}
        response = self.client.post("/api/templates", json=payload, headers=self.headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_seed_is_idempotent(self):
        self.assertEqual(seed_default_templates(), len(DEFAULT_TEMPLATES))
        self.assertEqual(seed_default_templates(), 0)
        listing = self.client.get("/api/templates").json()
        self.assertEqual(len(listing), len(DEFAULT_TEMPLATES))
        self.assertTrue(all(t["creator"] is None for t in listing))

    def test_force_reseed_keeps_user_templates(self):
        seed_default_templates()
        self._create("Mine")
        self.assertEqual(seed_default_templates(force=True), len(DEFAULT_TEMPLATES))
        names = {t["name"] for t in self.client.get("/api/templates").json()}
        self.assertIn("Mine", names)
        self.assertEqual(len(names), len(DEFAULT_TEMPLATES) + 1)

    def test_create_requires_auth_and_unique_name(self):
        response = self.client.post("/api/templates", json={"name": "Anon"})
        self.assertEqual(response.status_code, 401)

        created = self._create("Sleek")
        self.assertEqual(created["creator"], self.user["id"])
        self.assertEqual(created["usageCount"], 0)

        response = self.client.post("/api/templates", json={"name": "Sleek"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Template name already exists")

    def test_list_filters_public_by_category_and_orders_by_usage(self):
        first = self._create("First")
        second = self._create("Second")
        self._create("Hidden", isPublic=False)
        self._create("Academic", category="academic")
        self.client.put(f"/api/templates/{second['id']}/usage", headers=self.headers)

        listing = self.client.get("/api/templates", params={"category": "modern"}).json()
        self.assertEqual([t["id"] for t in listing], [second["id"], first["id"]])

    def test_private_template_visible_to_creator_only(self):
        hidden = self._create("Hidden", isPublic=False)
        url = f"/api/templates/{hidden['id']}"
        self.assertEqual(self.client.get(url).status_code, 403)
        other = make_user("other")
        self.assertEqual(self.client.get(url, headers=auth_headers(other)).status_code, 403)
        self.assertEqual(self.client.get(url, headers=self.headers).status_code, 200)

    def test_usage_increments(self):
        template = self._create("Counter")
        url = f"/api/templates/{template['id']}/usage"
        self.assertEqual(self.client.put(url, headers=self.headers).json(), {"success": True, "usageCount": 1})
        self.assertEqual(self.client.put(url, headers=self.headers).json()["usageCount"], 2)

    def test_missing_template_is_404(self):
        self.assertEqual(self.client.get("/api/templates/nope").status_code, 404)
        self.assertEqual(self.client.put("/api/templates/nope/usage", headers=self.headers).status_code, 404)


if __name__ == "__main__":
    unittest.main()
