import json
import unittest

import httpx

from intake_client.api import IntakeApiClient
from intake_client.session import FormDraftSession
from intake_client.store import MemoryStorage


class TestIntakeApiClient(unittest.IsolatedAsyncioTestCase):
    def _client(self, handler, errors=None):
        return IntakeApiClient(
            "http://intake.test/",
            transport=httpx.MockTransport(handler),
            on_error=errors.append if errors is not None else None,
        )

    async def test_successful_save_returns_id(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "sub-1", "version": 1})

        result = await self._client(handler).save_submission(
            {"firstName": "Ada"}, 2, [1], None, "session_1_abc"
        )
        self.assertEqual(result, {"id": "sub-1"})
        self.assertEqual(seen["path"], "/api/save-submission")
        self.assertEqual(seen["body"]["sessionId"], "session_1_abc")
        self.assertEqual(seen["body"]["completedSteps"], [1])
        self.assertIsNone(seen["body"]["totalAmount"])

    async def test_server_error_returns_none_and_reports(self):
        errors = []

        def handler(request):
            return httpx.Response(500, json={"error": "Failed to save submission: boom"})

        with self.assertLogs("intake_client.api", level="ERROR"):
            result = await self._client(handler, errors).save_submission({}, 1, [], None, "s")
        self.assertIsNone(result)
        self.assertEqual(errors, ["Failed to save submission: boom"])

    async def test_non_json_error_body(self):
        errors = []

        def handler(request):
            return httpx.Response(502, text="Bad gateway")

        with self.assertLogs("intake_client.api", level="ERROR"):
            result = await self._client(handler, errors).save_submission({}, 1, [], None, "s")
        self.assertIsNone(result)
        self.assertEqual(errors, ["Failed to save submission"])

    async def test_network_error_returns_none(self):
        errors = []

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertLogs("intake_client.api", level="ERROR"):
            result = await self._client(handler, errors).save_submission({}, 1, [], None, "s")
        self.assertIsNone(result)
        self.assertEqual(len(errors), 1)

    async def test_save_draft_uses_session_state(self):
        draft = FormDraftSession(MemoryStorage())
        draft.update({"firstName": "Ada"})
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "sub-9"})

        result = await self._client(handler).save_draft(draft, 3, [1, 2], 45.0)
        self.assertEqual(result, {"id": "sub-9"})
        self.assertEqual(bodies[0]["sessionId"], draft.session_id)
        self.assertEqual(bodies[0]["formData"]["firstName"], "Ada")
        self.assertEqual(bodies[0]["totalAmount"], 45.0)


if __name__ == "__main__":
    unittest.main()
