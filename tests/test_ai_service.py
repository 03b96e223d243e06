import unittest
from types import SimpleNamespace
from unittest import mock

import httpx
import openai

from services import ai_service
from services.crm_errors import GenerationError
from services.i18n_service import Translator

SETTINGS = {"api_key": "sk-first", "model": "gpt-4o-mini", "base_url": None}


def _completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _not_found():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(404, request=request)
    return openai.NotFoundError("Requested entity was not found.", response=response, body=None)


class GenerateTextTests(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch("services.ai_service.get_openai_settings", return_value=dict(SETTINGS))
        patcher.start()
        self.addCleanup(patcher.stop)
        client_patcher = mock.patch("services.ai_service.OpenAI")
        self.openai_cls = client_patcher.start()
        self.addCleanup(client_patcher.stop)
        self.create = self.openai_cls.return_value.chat.completions.create

    def test_returns_stripped_text_and_passes_options(self):
        self.create.return_value = _completion("  ## Summary\n")
        text = ai_service.generate_text("prompt", temperature=0.7, system_instruction="Be brief")
        self.assertEqual(text, "## Summary")
        kwargs = self.create.call_args.kwargs
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertEqual(kwargs["model"], "gpt-4o-mini")
        self.assertEqual(kwargs["messages"][0], {"role": "system", "content": "Be brief"})
        self.assertNotIn("top_p", kwargs)

    def test_not_found_reselects_key_and_retries_once(self):
        self.create.side_effect = [_not_found(), _completion("retried")]
        selector = mock.Mock(return_value="sk-second")
        self.assertEqual(ai_service.generate_text("prompt", key_selector=selector), "retried")
        selector.assert_called_once_with()
        self.assertEqual(self.openai_cls.call_args_list[-1].kwargs["api_key"], "sk-second")
        self.assertEqual(self.create.call_count, 2)

    def test_second_not_found_surfaces(self):
        self.create.side_effect = [_not_found(), _not_found()]
        with self.assertRaises(GenerationError):
            ai_service.generate_text("prompt", key_selector=lambda: "sk-second")
        self.assertEqual(self.create.call_count, 2)

    def test_other_failures_do_not_retry(self):
        self.create.side_effect = RuntimeError("network down")
        with self.assertRaises(GenerationError) as ctx:
            ai_service.generate_text("prompt")
        self.assertIn("network down", str(ctx.exception))
        self.assertEqual(self.create.call_count, 1)

    def test_empty_response_is_an_error(self):
        self.create.return_value = _completion("   ")
        with self.assertRaises(GenerationError):
            ai_service.generate_text("prompt")

    def test_missing_key_is_an_error(self):
        with mock.patch("services.ai_service.get_openai_settings", return_value={**SETTINGS, "api_key": None}):
            with self.assertRaises(GenerationError):
                ai_service.generate_text("prompt")
        self.create.assert_not_called()


class PromptTests(unittest.TestCase):
    def setUp(self):
        self.translator = Translator()

    def test_customer_prompt_lists_related_records(self):
        prompt = ai_service.build_customer_prompt(
            {"name": "Acme", "company": "Acme Corp", "email": "a@a.com", "phone": "1", "status": "Active"},
            [{"name": "License", "value": 15000, "stage": "Proposal", "closeDate": "2024-07-31"}],
            [],
            self.translator,
        )
        self.assertIn("Customer Name: Acme", prompt)
        self.assertIn("Notes: No specific notes.", prompt)
        self.assertIn("- Deal: License, Value: $15,000, Stage: Proposal, Close Date: 2024-07-31", prompt)
        self.assertIn("No related activities.", prompt)

    def test_deal_prompt(self):
        prompt = ai_service.build_deal_prompt(
            {"name": "Upgrade", "value": 2500.5, "stage": "Negotiation", "closeDate": "2024-07-20", "notes": "Discount"},
            "Cyberdyne",
            [{"title": "Call", "type": "Call", "status": "Pending", "dueDate": "2024-07-15"}],
            self.translator,
        )
        self.assertIn("Customer: Cyberdyne", prompt)
        self.assertIn("Value: $2,500.5", prompt)
        self.assertIn("- Activity: Call, Type: Call, Status: Pending, Due: 2024-07-15", prompt)

    def test_supplier_prompt(self):
        prompt = ai_service.build_supplier_prompt(
            {"name": "Tech Parts", "contactPerson": "Alice", "status": "Preferred"}, [], self.translator
        )
        self.assertIn("Contact Person: Alice", prompt)
        self.assertIn("No related activities.", prompt)


if __name__ == "__main__":
    unittest.main()
