import unittest
from unittest.mock import AsyncMock, patch

from support import auth_headers, clear_database, make_user, resume_payload

from fastapi.testclient import TestClient

from resume_builder.main import app


class CommentsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_database()
        self.owner = make_user("owner")
        self.collaborator = make_user("collab")
        self.outsider = make_user("outsider")
        self.owner_headers = auth_headers(self.owner)
        self.collab_headers = auth_headers(self.collaborator)

        resume = self.client.post("/api/resumes", json=resume_payload(), headers=self.owner_headers).json()
        self.resume_id = resume["id"]
        self.client.post(
            f"/api/resumes/{self.resume_id}/collaborators",
            json={"collaboratorId": self.collaborator["id"]},
            headers=self.owner_headers,
        )
        self.url = f"/api/resumes/{self.resume_id}/comments"
        self.notify = AsyncMock()
        patcher = patch("resume_builder.api.comments.notify_resume_update", new=self.notify)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _comment(self, headers, **extra) -> dict:
        payload = {"content": "Tighten this", "section": "experience", **extra}
        response = self.client.post(self.url, json=payload, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_create_populates_author_and_broadcasts(self):
        comment = self._comment(self.collab_headers, position={"x": 10, "y": 20})
        self.assertEqual(comment["user"]["id"], self.collaborator["id"])
        self.assertFalse(comment["isResolved"])
        update = self.notify.await_args.args[1]
        self.assertEqual(update["type"], "comment_added")
        self.assertEqual(update["data"]["id"], comment["id"])

    def test_outsider_cannot_comment(self):
        response = self.client.post(
            self.url,
            json={"content": "hi", "section": "header"},
            headers=auth_headers(self.outsider),
        )
        self.assertEqual(response.status_code, 403)

    def test_reply_requires_parent_on_same_resume(self):
        parent = self._comment(self.owner_headers)
        reply = self._comment(self.collab_headers, parentComment=parent["id"])
        self.assertEqual(reply["parentComment"], parent["id"])

        response = self.client.post(
            self.url,
            json={"content": "orphan", "section": "header", "parentComment": "missing"},
            headers=self.owner_headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Parent comment not found")

    def test_list_filters_by_section(self):
        self._comment(self.owner_headers, section="header")
        self._comment(self.owner_headers, section="skills")
        response = self.client.get(self.url, params={"section": "skills"}, headers=self.collab_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([c["section"] for c in response.json()], ["skills"])

    def test_only_author_can_edit(self):
        comment = self._comment(self.collab_headers)
        response = self.client.put(f"{self.url}/{comment['id']}", json={"content": "x"}, headers=self.owner_headers)
        self.assertEqual(response.status_code, 403)

        response = self.client.put(f"{self.url}/{comment['id']}", json={"content": "Edited"}, headers=self.collab_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["content"], "Edited")
        self.assertEqual(self.notify.await_args.args[1]["type"], "comment_updated")

    def test_owner_can_delete_any_comment_with_replies(self):
        parent = self._comment(self.collab_headers)
        self._comment(self.collab_headers, parentComment=parent["id"])

        response = self.client.delete(f"{self.url}/{parent['id']}", headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Comment deleted successfully")
        self.assertEqual(self.client.get(self.url, headers=self.owner_headers).json(), [])
        self.assertEqual(self.notify.await_args.args[1], {"type": "comment_deleted", "data": {"commentId": parent["id"]}})

    def test_non_author_collaborator_cannot_delete(self):
        comment = self._comment(self.owner_headers)
        response = self.client.delete(f"{self.url}/{comment['id']}", headers=self.collab_headers)
        self.assertEqual(response.status_code, 403)

    def test_toggle_resolution(self):
        comment = self._comment(self.owner_headers)
        resolved = self.client.put(f"{self.url}/{comment['id']}/resolve", headers=self.collab_headers).json()
        self.assertTrue(resolved["isResolved"])
        self.assertEqual(resolved["resolvedBy"]["id"], self.collaborator["id"])
        self.assertIsNotNone(resolved["resolvedAt"])

        reopened = self.client.put(f"{self.url}/{comment['id']}/resolve", headers=self.owner_headers).json()
        self.assertFalse(reopened["isResolved"])
        self.assertIsNone(reopened["resolvedBy"])

    def test_comment_from_other_resume_is_404(self):
        other = self.client.post("/api/resumes", json=resume_payload("Other"), headers=self.owner_headers).json()
        comment = self._comment(self.owner_headers)
        response = self.client.put(
            f"/api/resumes/{other['id']}/comments/{comment['id']}",
            json={"content": "x"},
            headers=self.owner_headers,
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Comment not found")


if __name__ == "__main__":
    unittest.main()
