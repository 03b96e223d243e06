import json
import os
import tempfile
import unittest
from unittest import mock

from scripts import crm_data
from services.crm_store import MemoryBlobStore

ADMIN = ["--email", "admin@example.com", "--password", "password"]


class CrmDataCliTests(unittest.TestCase):
    def setUp(self):
        self.store = MemoryBlobStore()
        patcher = mock.patch.object(crm_data, "get_blob_store", return_value=self.store)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_export_then_import(self):
        out = os.path.join(self.tmp.name, "customers.json")
        self.assertEqual(crm_data.main([*ADMIN, "export", "customers", "--out", out]), 0)
        with open(out, encoding="utf-8") as handle:
            self.assertEqual(len(json.load(handle)), 5)

        self.assertEqual(crm_data.main([*ADMIN, "import", "customers", out]), 0)
        self.assertEqual(len(self.store.load("crmCustomers", [])), 10)

    def test_bad_login_returns_error_code(self):
        with mock.patch("sys.stderr"):
            code = crm_data.main(["--email", "admin@example.com", "--password", "nope", "dashboard"])
        self.assertEqual(code, 1)

    def test_reset_clears_store(self):
        self.store.save("crmCustomers", [])
        self.assertEqual(crm_data.main(["reset"]), 0)
        self.assertIsNone(self.store.raw("crmCustomers"))


class CrmDataCliDefaultStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        env = {"DATABASE_URL": "sqlite:///" + os.path.join(self.tmp.name, "crm.db")}
        patcher = mock.patch.dict(os.environ, env)
        patcher.start()
        self.addCleanup(patcher.stop)
        os.environ.pop("CRM_STORE_BACKEND", None)

    def test_import_survives_into_next_run(self):
        source = os.path.join(self.tmp.name, "in.json")
        with open(source, "w", encoding="utf-8") as handle:
            json.dump([{"name": "Imported Co"}], handle)
        self.assertEqual(crm_data.main([*ADMIN, "import", "customers", source]), 0)

        out = os.path.join(self.tmp.name, "out.json")
        self.assertEqual(crm_data.main([*ADMIN, "export", "customers", "--out", out]), 0)
        with open(out, encoding="utf-8") as handle:
            names = [item["name"] for item in json.load(handle)]
        self.assertIn("Imported Co", names)
        self.assertEqual(len(names), 6)


if __name__ == "__main__":
    unittest.main()
