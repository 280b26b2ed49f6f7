import unittest
from datetime import timedelta

from support import clear_database

from resume_builder.db import store


class DocumentStoreTests(unittest.TestCase):
    def setUp(self):
        clear_database()

    def test_insert_get_update_delete(self):
        doc = store.insert_document("notes", {"title": "first", "tags": ["a"]})
        self.assertTrue(doc["id"])
        self.assertEqual(doc["created_at"], doc["updated_at"])

        self.assertEqual(store.get_document("notes", doc["id"])["title"], "first")
        self.assertIsNone(store.get_document("other", doc["id"]))

        updated = store.update_document("notes", doc["id"], {"title": "second", "id": "ignored"})
        self.assertEqual(updated["id"], doc["id"])
        self.assertEqual(updated["title"], "second")
        self.assertEqual(updated["tags"], ["a"])

        self.assertTrue(store.delete_document("notes", doc["id"]))
        self.assertFalse(store.delete_document("notes", doc["id"]))
        self.assertIsNone(store.update_document("notes", doc["id"], {"title": "gone"}))

    def test_filters_sort_and_limit(self):
        store.insert_document("notes", {"owner": "u1", "rank": 2, "parent": None})
        store.insert_document("notes", {"owner": "u1", "rank": 5, "parent": "x"})
        store.insert_document("notes", {"owner": "u2", "rank": 9, "parent": None})
        store.insert_document("notes", {"owner": "u1", "active": True})

        self.assertEqual(store.count_documents("notes", {"owner": "u1"}), 3)
        self.assertEqual(len(store.find_documents("notes", {"owner": "u1", "parent": None})), 2)
        self.assertEqual(len(store.find_documents("notes", {"active": True})), 1)

        ranked = store.find_documents("notes", {"owner": "u1"}, sort_by="rank", descending=True, limit=2)
        self.assertEqual([doc.get("rank") for doc in ranked], [5, 2])

        high = store.find_one("notes", predicate=lambda doc: (doc.get("rank") or 0) > 4, sort_by="rank")
        self.assertEqual(high["rank"], 5)
        self.assertIsNone(store.find_one("notes", {"owner": "nobody"}))

        self.assertEqual(store.delete_documents("notes", {"owner": "u1"}), 3)
        self.assertEqual(store.count_documents("notes"), 1)

    def test_transaction_rolls_back_on_error(self):
        with self.assertRaises(RuntimeError):
            with store.transaction():
                store.insert_document("notes", {"title": "lost"})
                raise RuntimeError("boom")
        self.assertEqual(store.count_documents("notes"), 0)

        with store.transaction():
            store.insert_document("notes", {"title": "kept"})
            with store.transaction():
                store.insert_document("notes", {"title": "nested"})
        self.assertEqual(store.count_documents("notes"), 2)

    def test_purge_older_than(self):
        old = (store.utc_now() - timedelta(days=40)).isoformat()
        store.insert_document("analyses", {"created_at": old})
        store.insert_document("analyses", {"note": "fresh"})

        self.assertEqual(store.purge_documents_older_than("analyses", 30), 1)
        remaining = store.find_documents("analyses")
        self.assertEqual([doc.get("note") for doc in remaining], ["fresh"])


if __name__ == "__main__":
    unittest.main()
