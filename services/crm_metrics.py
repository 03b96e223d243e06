from __future__ import annotations

from numbers import Number
from typing import Any, Dict, List, Mapping, Sequence

from services.crm_engine import find_record
from services.crm_seed import DEAL_STAGE_PROBABILITIES

CLOSED_STAGES = {"Won", "Lost"}
DASHBOARD_LIST_LIMIT = 5


def _amount(value: Any) -> float:
    if isinstance(value, Number) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _customer_name(customer_id: Any, customers: Sequence[Dict[str, Any]], missing_label: str) -> str:
    customer = find_record(customer_id, customers)
    return str(customer.get("name")) if customer and customer.get("name") else missing_label


def weighted_forecast(deals: Sequence[Dict[str, Any]], probabilities: Mapping[str, float] = DEAL_STAGE_PROBABILITIES) -> float:
    """Expected value of open deals; won deals are already revenue and lost deals count for nothing."""
    return sum(
        _amount(deal.get("value")) * probabilities.get(deal.get("stage"), 0.0)
        for deal in deals
        if deal.get("stage") not in CLOSED_STAGES
    )


def dashboard_metrics(
    customers: Sequence[Dict[str, Any]],
    deals: Sequence[Dict[str, Any]],
    activities: Sequence[Dict[str, Any]],
    missing_label: str = "",
    limit: int = DASHBOARD_LIST_LIMIT,
) -> Dict[str, Any]:
    pending = [item for item in activities if item.get("status") == "Pending"]
    upcoming = sorted(pending, key=lambda item: str(item.get("dueDate") or ""))[:limit]
    won = [deal for deal in deals if deal.get("stage") == "Won"]
    recent_won = sorted(won, key=lambda deal: str(deal.get("closeDate") or ""), reverse=True)[:limit]
    return {
        "totalCustomers": len(customers),
        "activeDeals": sum(1 for deal in deals if deal.get("stage") not in CLOSED_STAGES),
        "pendingActivities": len(pending),
        "totalDealValue": sum(_amount(deal.get("value")) for deal in deals),
        "dealForecast": weighted_forecast(deals),
        "upcomingActivities": upcoming,
        "recentWonDeals": [
            {**deal, "customerName": _customer_name(deal.get("customerId"), customers, missing_label)}
            for deal in recent_won
        ],
    }


def commission_overview(
    deals: Sequence[Dict[str, Any]],
    customers: Sequence[Dict[str, Any]],
    rate: float,
    missing_label: str = "",
) -> Dict[str, Any]:
    won = [deal for deal in deals if deal.get("stage") == "Won"]
    rows: List[Dict[str, Any]] = [
        {
            "dealId": deal.get("id"),
            "dealName": deal.get("name"),
            "customerName": _customer_name(deal.get("customerId"), customers, missing_label),
            "dealValue": _amount(deal.get("value")),
            "commission": round(_amount(deal.get("value")) * rate, 2),
        }
        for deal in won
    ]
    total_won = sum(row["dealValue"] for row in rows)
    return {
        "rate": rate,
        "ratePercent": f"{rate * 100:.0f}",
        "totalWonValue": total_won,
        "totalCommission": total_won * rate,
        "deals": rows,
    }
