from __future__ import annotations

import logging
from numbers import Number
from typing import Any, Callable, Dict, List, Optional, Sequence

import openai
from openai import OpenAI

from services.crm_errors import GenerationError
from shared.config import get_openai_settings

logger = logging.getLogger(__name__)

SUMMARY_TEMPERATURE = 0.7


def _client(api_key: Optional[str], base_url: Optional[str] = None) -> OpenAI:
    if not api_key:
        raise GenerationError("OPENAI_API_KEY is required to generate summaries.")
    if base_url:
        return OpenAI(api_key=api_key, base_url=base_url)
    return OpenAI(api_key=api_key)


def _failure_message(exc: Exception) -> str:
    detail = str(exc) or "Unknown error"
    return f"Failed to generate content: {detail}. Please check your API key and network connection."


def generate_text(
    prompt: str,
    *,
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    system_instruction: Optional[str] = None,
    model: Optional[str] = None,
    key_selector: Optional[Callable[[], Optional[str]]] = None,
) -> str:
    """
    Run one chat completion and return its text.

    A "not found" answer from the API (typically a key bound to the wrong
    project or model) triggers one key re-selection and one retry. Every
    other failure, and a failed retry, raises GenerationError.
    """
    settings = get_openai_settings()
    messages: List[Dict[str, str]] = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": prompt})
    params: Dict[str, Any] = {"model": model or settings["model"], "messages": messages}
    if temperature is not None:
        params["temperature"] = temperature
    if top_p is not None:
        params["top_p"] = top_p

    def _run(api_key: Optional[str]) -> str:
        resp = _client(api_key, settings["base_url"]).chat.completions.create(**params)
        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            raise GenerationError("Failed to generate content: the model returned an empty response.")
        return content.strip()

    try:
        return _run(settings["api_key"])
    except GenerationError:
        raise
    except openai.NotFoundError as exc:
        logger.warning("First generation attempt was not found (%s); re-selecting key and retrying", exc)
        api_key = key_selector() if key_selector else get_openai_settings()["api_key"]
        try:
            return _run(api_key)
        except GenerationError:
            raise
        except Exception as retry_exc:  # pylint: disable=broad-except
            logger.error("Generation retry failed: %s", retry_exc)
            raise GenerationError(_failure_message(retry_exc)) from retry_exc
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Generation failed: %s", exc)
        raise GenerationError(_failure_message(exc)) from exc


def format_money(value: Any) -> str:
    if not isinstance(value, Number) or isinstance(value, bool):
        return str(value if value is not None else "")
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _activity_lines(activities: Sequence[Dict[str, Any]], empty: str) -> str:
    if not activities:
        return empty
    return "\n".join(
        f"- Activity: {a.get('title')}, Type: {a.get('type')}, Status: {a.get('status')}, Due: {a.get('dueDate')}"
        for a in activities
    )


def build_customer_prompt(customer: Dict[str, Any], deals, activities, translator) -> str:
    if deals:
        deal_lines = "\n".join(
            f"- Deal: {d.get('name')}, Value: ${format_money(d.get('value'))}, Stage: {d.get('stage')}, Close Date: {d.get('closeDate')}"
            for d in deals
        )
    else:
        deal_lines = translator.translate("customers.detail.no_related_deals_summary")
    return "\n".join(
        [
            "Provide a concise summary of the following CRM customer data, focusing on key details, status, and any relevant notes.",
            "Format the summary as a professional internal report, use markdown.",
            "",
            f"Customer Name: {customer.get('name')}",
            f"Company: {customer.get('company')}",
            f"Email: {customer.get('email')}",
            f"Phone: {customer.get('phone')}",
            f"Status: {customer.get('status')}",
            f"Notes: {customer.get('notes') or translator.translate('customers.detail.no_specific_notes')}",
            "",
            "Related Deals:",
            deal_lines,
            "",
            "Related Activities:",
            _activity_lines(activities, translator.translate("customers.detail.no_related_activities_summary")),
        ]
    )


def build_deal_prompt(deal: Dict[str, Any], customer_name: str, activities, translator) -> str:
    return "\n".join(
        [
            "Provide a concise summary of the following CRM deal data, focusing on key details, current stage, value, and any relevant notes.",
            "Format the summary as a professional internal report, use markdown.",
            "",
            f"Deal Name: {deal.get('name')}",
            f"Customer: {customer_name}",
            f"Value: ${format_money(deal.get('value'))}",
            f"Stage: {deal.get('stage')}",
            f"Expected Close Date: {deal.get('closeDate')}",
            f"Notes: {deal.get('notes') or translator.translate('deals.detail.no_specific_notes')}",
            "",
            "Related Activities:",
            _activity_lines(activities, translator.translate("deals.detail.no_related_activities_summary")),
        ]
    )


def build_supplier_prompt(supplier: Dict[str, Any], activities, translator) -> str:
    return "\n".join(
        [
            "Provide a concise summary of the following CRM supplier data, focusing on key details, contact information, status, and any relevant notes.",
            "Format the summary as a professional internal report, use markdown.",
            "",
            f"Supplier Name: {supplier.get('name')}",
            f"Company: {supplier.get('company')}",
            f"Contact Person: {supplier.get('contactPerson')}",
            f"Email: {supplier.get('email')}",
            f"Phone: {supplier.get('phone')}",
            f"Status: {supplier.get('status')}",
            f"Notes: {supplier.get('notes') or translator.translate('suppliers.detail.no_specific_notes')}",
            "",
            "Related Activities:",
            _activity_lines(activities, translator.translate("suppliers.detail.no_related_activities_summary")),
        ]
    )


def generate_summary(prompt: str, key_selector: Optional[Callable[[], Optional[str]]] = None) -> str:
    return generate_text(prompt, temperature=SUMMARY_TEMPERATURE, key_selector=key_selector)
