"""Seed workspace loaded on first start and restored on logout."""
from __future__ import annotations

import copy
from typing import Any, Dict, List

from services.crm_auth import hash_password

DEFAULT_COMMISSION_RATE = 0.10
SEED_PASSWORD = "password"

DEAL_STAGE_PROBABILITIES = {
    "Prospecting": 0.10,
    "Qualification": 0.30,
    "Proposal": 0.50,
    "Negotiation": 0.75,
    "Won": 1.00,
    "Lost": 0.00,
}


_CUSTOMERS = [
    {
        "id": "cust-1",
        "name": "Acme Corp",
        "email": "contact@acmecorp.com",
        "phone": "555-1001",
        "company": "Acme Corp",
        "status": "Active",
        "notes": "Long-standing client, always pays on time. Interested in new product line.",
        "ownerId": "user-admin",
    },
    {
        "id": "cust-2",
        "name": "Globex Inc.",
        "email": "info@globex.com",
        "phone": "555-2002",
        "company": "Globex Inc.",
        "status": "Lead",
        "notes": "New lead from recent conference. Needs follow-up call next week.",
        "ownerId": "user-sales1",
    },
    {
        "id": "cust-3",
        "name": "Cyberdyne Systems",
        "email": "sales@cyberdyne.net",
        "phone": "555-3003",
        "company": "Cyberdyne Systems",
        "status": "Active",
        "notes": "Valuable partner, exploring expansion opportunities.",
        "ownerId": "user-sales2",
    },
    {
        "id": "cust-4",
        "name": "Initech Solutions",
        "email": "support@initech.com",
        "phone": "555-4004",
        "company": "Initech Solutions",
        "status": "Prospect",
        "notes": "Potential client, needs a demo. Budget seems tight.",
        "ownerId": "user-sales1",
    },
    {
        "id": "cust-5",
        "name": "Umbrella Corp",
        "email": "contact@umbrellacorp.com",
        "phone": "555-5005",
        "company": "Umbrella Corp",
        "status": "Inactive",
        "notes": "Old client, no recent activity.",
        "ownerId": "user-admin",
    },
]

_SUPPLIERS = [
    {
        "id": "sup-1",
        "name": "Tech Parts Ltd.",
        "contactPerson": "Alice Smith",
        "email": "alice@techparts.com",
        "phone": "555-6001",
        "company": "Tech Parts Ltd.",
        "status": "Preferred",
        "notes": "Primary supplier for electronic components. Reliable and cost-effective.",
        "ownerId": "user-admin",
    },
    {
        "id": "sup-2",
        "name": "Office Supplies Co.",
        "contactPerson": "Bob Johnson",
        "email": "bob@officesupplies.net",
        "phone": "555-6002",
        "company": "Office Supplies Co.",
        "status": "Active",
        "notes": "Regular supplier for office consumables. Good prices.",
        "ownerId": "user-sales1",
    },
]

_DEALS = [
    {
        "id": "deal-1",
        "name": "Acme Corp - Software License",
        "customerId": "cust-1",
        "value": 15000,
        "stage": "Proposal",
        "closeDate": "2024-07-31",
        "notes": "Sent initial proposal, waiting for feedback. Follow-up expected next week.",
        "ownerId": "user-admin",
    },
    {
        "id": "deal-2",
        "name": "Globex Inc. - Cloud Migration",
        "customerId": "cust-2",
        "value": 50000,
        "stage": "Qualification",
        "closeDate": "2024-08-15",
        "notes": "Initial discussion positive. Need to schedule a deep-dive meeting.",
        "ownerId": "user-sales1",
    },
    {
        "id": "deal-3",
        "name": "Cyberdyne Systems - Hardware Upgrade",
        "customerId": "cust-3",
        "value": 25000,
        "stage": "Negotiation",
        "closeDate": "2024-07-20",
        "notes": "Client requested a discount. Reviewing options with management.",
        "ownerId": "user-sales2",
    },
    {
        "id": "deal-4",
        "name": "Acme Corp - New Product Rollout",
        "customerId": "cust-1",
        "value": 30000,
        "stage": "Won",
        "closeDate": "2024-06-25",
        "notes": "Deal won last month. Client very happy with the service.",
        "ownerId": "user-admin",
    },
    {
        "id": "deal-5",
        "name": "Initech Solutions - Support Contract",
        "customerId": "cust-4",
        "value": 10000,
        "stage": "Proposal",
        "closeDate": "2024-09-01",
        "notes": "Drafted support contract.",
        "ownerId": "user-sales1",
    },
]

_ACTIVITIES = [
    {
        "id": "act-1",
        "title": "Call with Acme Corp",
        "type": "Call",
        "status": "Pending",
        "dueDate": "2024-07-15",
        "notes": "Discuss proposal details for software license.",
        "customerId": "cust-1",
        "dealId": "deal-1",
        "ownerId": "user-admin",
    },
    {
        "id": "act-2",
        "title": "Meeting with Globex Inc.",
        "type": "Meeting",
        "status": "Pending",
        "dueDate": "2024-07-18",
        "notes": "Deep-dive into cloud migration requirements.",
        "customerId": "cust-2",
        "dealId": "deal-2",
        "ownerId": "user-sales1",
    },
    {
        "id": "act-3",
        "title": "Send follow-up email to Cyberdyne Systems",
        "type": "Email",
        "status": "Completed",
        "dueDate": "2024-07-08",
        "notes": "Sent updated pricing information.",
        "customerId": "cust-3",
        "dealId": "deal-3",
        "ownerId": "user-sales2",
    },
    {
        "id": "act-4",
        "title": "Prepare demo for Initech Solutions",
        "type": "Task",
        "status": "Pending",
        "dueDate": "2024-07-16",
        "notes": "Focus on integration features.",
        "customerId": "cust-4",
        "ownerId": "user-sales1",
    },
    {
        "id": "act-5",
        "title": "Order components from Tech Parts Ltd.",
        "type": "Task",
        "status": "Completed",
        "dueDate": "2024-07-01",
        "notes": "Placed order for new batch of chips.",
        "supplierId": "sup-1",
        "ownerId": "user-admin",
    },
    {
        "id": "act-6",
        "title": "Review Q3 strategy with Jane",
        "type": "Meeting",
        "status": "Pending",
        "dueDate": "2024-07-22",
        "notes": "Discuss sales goals for the next quarter.",
        "ownerId": "user-admin",
    },
]

_CAMPAIGNS = [
    {
        "id": "camp-1",
        "name": "Summer Product Launch",
        "description": "Campaign to promote the new summer product line to existing active customers.",
        "status": "Active",
        "startDate": "2024-07-01",
        "endDate": "2024-08-31",
        "linkedCustomerIds": ["cust-1", "cust-3"],
        "ownerId": "user-admin",
    },
    {
        "id": "camp-2",
        "name": "Lead Nurturing Q3",
        "description": "Automated email sequence for new leads generated in Q3.",
        "status": "Planning",
        "startDate": "2024-07-15",
        "endDate": "2024-09-30",
        "linkedCustomerIds": ["cust-2", "cust-4"],
        "ownerId": "user-sales1",
    },
]

_PRODUCTS = [
    {
        "id": "prod-1",
        "name": "CRM Pro License",
        "description": "Annual license for CRM Pro software with advanced features.",
        "price": 1200,
        "category": "Software",
        "sku": "SW-CRM-PRO-2024",
        "ownerId": "user-admin",
    },
    {
        "id": "prod-2",
        "name": "Cloud Migration Service",
        "description": "Full service for migrating on-premise infrastructure to cloud platforms.",
        "price": 15000,
        "category": "Service",
        "sku": "SVC-CLOUD-MIG",
        "ownerId": "user-sales1",
    },
    {
        "id": "prod-3",
        "name": "Enterprise Hardware Pack",
        "description": "Bundle of servers and network equipment for large organizations.",
        "price": 25000,
        "category": "Hardware",
        "sku": "HW-ENT-BUNDLE",
        "ownerId": "user-admin",
    },
    {
        "id": "prod-4",
        "name": "Strategic Consulting Hour",
        "description": "One hour of expert strategic consulting on business growth.",
        "price": 300,
        "category": "Consulting",
        "sku": "SVC-CONSULT-HR",
        "ownerId": "user-sales2",
    },
]

_USERS = [
    {"id": "user-admin", "username": "Admin User", "email": "admin@example.com", "role": "Admin"},
    {"id": "user-sales1", "username": "Sales Rep One", "email": "sales1@example.com", "role": "Sales"},
    {"id": "user-sales2", "username": "Sales Rep Two", "email": "sales2@example.com", "role": "Sales"},
    {"id": "user-viewer", "username": "Viewer Only", "email": "viewer@example.com", "role": "Viewer"},
]

_SEED_COLLECTIONS = {
    "customers": _CUSTOMERS,
    "suppliers": _SUPPLIERS,
    "deals": _DEALS,
    "activities": _ACTIVITIES,
    "campaigns": _CAMPAIGNS,
    "products": _PRODUCTS,
}


def seed_collections() -> Dict[str, List[Dict[str, Any]]]:
    """Fresh deep copies, so callers can never edit the seed set itself."""
    return copy.deepcopy(_SEED_COLLECTIONS)


def seed_users() -> List[Dict[str, Any]]:
    return [{**user, "passwordHash": hash_password(SEED_PASSWORD)} for user in _USERS]
