import random
import re
import unittest

from services.crm_engine import ASCENDING, DESCENDING, EntityEngine
from services.crm_entities import ACTIVITIES, CAMPAIGNS, CUSTOMERS, DEALS, PRODUCTS, SUPPLIERS
from services.crm_errors import NotFoundError, PermissionDeniedError


def _customers():
    return [
        {"id": "c1", "name": "Acme", "company": "Acme Corp", "email": "a@acme.com", "ownerId": "s1"},
        {"id": "c2", "name": "Globex", "company": "Globex Inc", "email": "g@globex.com", "ownerId": "s2"},
    ]


class ListTests(unittest.TestCase):
    def test_admin_sees_everything(self):
        engine = EntityEngine(CUSTOMERS)
        self.assertEqual(len(engine.list("Admin", "admin", _customers())), 2)

    def test_non_admin_never_sees_foreign_records(self):
        rng = random.Random(1234)
        owners = ["s1", "s2", "s3", None]
        engine = EntityEngine(DEALS)
        for _ in range(50):
            records = [{"id": f"d{i}", "ownerId": rng.choice(owners)} for i in range(rng.randint(0, 12))]
            caller = rng.choice(["s1", "s2", "s3"])
            role = rng.choice(["Sales", "Viewer"])
            visible = engine.list(role, caller, records)
            self.assertTrue(all(item["ownerId"] == caller for item in visible))
            self.assertEqual(len(visible), sum(1 for item in records if item["ownerId"] == caller))

    def test_viewer_gets_no_campaigns_even_when_owned(self):
        engine = EntityEngine(CAMPAIGNS)
        campaigns = [{"id": "k1", "name": "Mine", "ownerId": "v1", "linkedCustomerIds": []}]
        self.assertEqual(engine.list("Viewer", "v1", campaigns), [])
        self.assertEqual(len(engine.list("Sales", "v1", campaigns)), 1)


class MutationTests(unittest.TestCase):
    def test_sales_add_takes_caller_as_owner(self):
        engine = EntityEngine(CUSTOMERS)
        candidate = {"name": "New Co", "id": "forged"}
        result = engine.add("Sales", "user-sales1", candidate, _customers())
        self.assertEqual(result.record["ownerId"], "user-sales1")
        self.assertNotEqual(result.record["id"], "forged")
        self.assertRegex(result.record["id"], re.compile(r"^cust-\d+-[0-9a-f]{9}$"))
        self.assertEqual(len(result.records), 3)
        self.assertEqual(candidate, {"name": "New Co", "id": "forged"})

    def test_admin_add_keeps_explicit_owner(self):
        engine = EntityEngine(CUSTOMERS)
        result = engine.add("Admin", "user-admin", {"name": "X", "ownerId": "user-sales2"}, [])
        self.assertEqual(result.record["ownerId"], "user-sales2")

    def test_viewer_add_is_denied_for_every_kind(self):
        for kind in (CUSTOMERS, SUPPLIERS, DEALS, ACTIVITIES, CAMPAIGNS, PRODUCTS):
            records = _customers()
            with self.assertRaises(PermissionDeniedError):
                EntityEngine(kind).add("Viewer", "user-viewer", {"name": "x"}, records)
            self.assertEqual(records, _customers())

    def test_ids_are_unique(self):
        engine = EntityEngine(PRODUCTS)
        records = []
        for index in range(25):
            records = engine.add("Admin", "a", {"name": f"p{index}"}, records).records
        self.assertEqual(len({item["id"] for item in records}), 25)

    def test_update_preserves_position(self):
        engine = EntityEngine(CUSTOMERS)
        records = _customers()
        result = engine.update("Sales", "s1", {"id": "c1", "name": "Acme Renamed", "ownerId": "s1"}, records)
        self.assertEqual([item["id"] for item in result.records], ["c1", "c2"])
        self.assertEqual(result.records[0]["name"], "Acme Renamed")
        self.assertEqual(records[0]["name"], "Acme")

    def test_update_errors(self):
        engine = EntityEngine(CUSTOMERS)
        with self.assertRaises(NotFoundError):
            engine.update("Admin", "a", {"id": "missing"}, _customers())
        with self.assertRaises(PermissionDeniedError):
            engine.update("Sales", "s1", {"id": "c2", "name": "mine now"}, _customers())
        with self.assertRaises(PermissionDeniedError):
            engine.update("Viewer", "s1", {"id": "c1"}, _customers())

    def test_delete_customer_cascades_in_one_result(self):
        customers = [{"id": "c1", "name": "Gone", "ownerId": "s1"}, {"id": "c2", "name": "Stays", "ownerId": "s1"}]
        deals = [
            {"id": "d1", "customerId": "c1"},
            {"id": "d2", "customerId": "c1"},
            {"id": "d3", "customerId": "c2"},
        ]
        activities = [{"id": "a1", "customerId": "c1"}, {"id": "a2", "customerId": "c2"}]
        campaigns = [{"id": "k1", "linkedCustomerIds": ["c1", "c2"]}]
        related = {"deals": deals, "activities": activities, "campaigns": campaigns}

        result = EntityEngine(CUSTOMERS).delete("Sales", "s1", "c1", customers, related)

        self.assertEqual([item["id"] for item in result.records], ["c2"])
        self.assertEqual([item["id"] for item in result.related["deals"]], ["d3"])
        self.assertEqual([item["id"] for item in result.related["activities"]], ["a2"])
        self.assertEqual(result.related["campaigns"][0]["linkedCustomerIds"], ["c2"])
        # inputs untouched
        self.assertEqual(len(deals), 3)
        self.assertEqual(campaigns[0]["linkedCustomerIds"], ["c1", "c2"])

    def test_delete_supplier_and_deal_cascade_to_activities(self):
        activities = [
            {"id": "a1", "supplierId": "s-1", "dealId": "d-1"},
            {"id": "a2", "supplierId": "s-2"},
        ]
        result = EntityEngine(SUPPLIERS).delete("Admin", "a", "s-1", [{"id": "s-1"}], {"activities": activities})
        self.assertEqual([item["id"] for item in result.related["activities"]], ["a2"])
        result = EntityEngine(DEALS).delete("Admin", "a", "d-1", [{"id": "d-1"}], {"activities": activities})
        self.assertEqual([item["id"] for item in result.related["activities"]], ["a2"])

    def test_delete_errors(self):
        engine = EntityEngine(PRODUCTS)
        with self.assertRaises(NotFoundError):
            engine.delete("Admin", "a", "nope", [])
        with self.assertRaises(PermissionDeniedError):
            engine.delete("Sales", "s1", "p1", [{"id": "p1", "ownerId": None}])

    def test_delete_requires_cascade_collections(self):
        with self.assertRaises(ValueError):
            EntityEngine(CUSTOMERS).delete("Admin", "a", "c1", _customers(), {"deals": []})


class SearchSortTests(unittest.TestCase):
    def test_blank_query_returns_input(self):
        records = _customers()
        self.assertEqual(EntityEngine(CUSTOMERS).search("   ", records), records)

    def test_search_is_case_insensitive_over_fields(self):
        engine = EntityEngine(CUSTOMERS)
        self.assertEqual([r["id"] for r in engine.search("GLOBEX.COM", _customers())], ["c2"])
        self.assertEqual([r["id"] for r in engine.search("corp", _customers())], ["c1"])

    def test_search_uses_linked_names(self):
        deals = [{"id": "d1", "name": "License", "stage": "Proposal", "customerId": "c2"}]
        lookups = {"customers": _customers()}
        engine = EntityEngine(DEALS)
        self.assertEqual(len(engine.search("globex", deals, lookups)), 1)
        self.assertEqual(engine.search("acme", deals, lookups), [])

    def test_campaign_search_uses_linked_customer_names(self):
        campaigns = [{"id": "k1", "name": "Launch", "status": "Active", "linkedCustomerIds": ["c1"]}]
        results = EntityEngine(CAMPAIGNS).search("acme", campaigns, {"customers": _customers()})
        self.assertEqual(len(results), 1)

    def test_sort_is_stable(self):
        records = [{"name": "B", "id": 1}, {"name": "A", "id": 2}, {"name": "A", "id": 3}]
        ordered = EntityEngine(CUSTOMERS).sort(records, "name", ASCENDING)
        self.assertEqual([item["id"] for item in ordered], [2, 3, 1])

    def test_sort_numbers_descending(self):
        records = [{"id": "p1", "price": 10}, {"id": "p2", "price": 300}, {"id": "p3", "price": 25.5}]
        ordered = EntityEngine(PRODUCTS).sort(records, "price", DESCENDING)
        self.assertEqual([item["id"] for item in ordered], ["p2", "p3", "p1"])

    def test_sort_by_customer_name(self):
        deals = [{"id": "d1", "customerId": "c2"}, {"id": "d2", "customerId": "c1"}]
        ordered = EntityEngine(DEALS).sort(deals, "customerId", ASCENDING, {"customers": _customers()})
        self.assertEqual([item["id"] for item in ordered], ["d2", "d1"])

    def test_mismatched_types_keep_order(self):
        records = [{"id": 1, "value": "high"}, {"id": 2, "value": 5}, {"id": 3, "value": None}]
        ordered = EntityEngine(DEALS).sort(records, "value", ASCENDING)
        self.assertEqual([item["id"] for item in ordered], [1, 2, 3])

    def test_default_activity_sort_is_due_date(self):
        records = [{"id": "a1", "dueDate": "2024-07-20"}, {"id": "a2", "dueDate": "2024-07-01"}]
        self.assertEqual([item["id"] for item in EntityEngine(ACTIVITIES).sort(records)], ["a2", "a1"])

    def test_unknown_sort_key_raises(self):
        with self.assertRaises(ValueError):
            EntityEngine(CUSTOMERS).sort(_customers(), "email", ASCENDING)

    def test_unknown_direction_raises(self):
        with self.assertRaises(ValueError):
            EntityEngine(CUSTOMERS).sort(_customers(), "name", "sideways")


if __name__ == "__main__":
    unittest.main()
