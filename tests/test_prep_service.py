import json
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hireprep.core.errors import (  # noqa: E402
    ConfigurationError,
    UpstreamError,
    UpstreamFormatError,
    ValidationError,
)
from hireprep.schemas.prep import Question  # noqa: E402
from hireprep.services.prep_service import continue_generate, generate  # noqa: E402
from tests.fakes import FakeAIClient, generation_payload, question_payload  # noqa: E402

RESUME = "Backend engineer. Python, FastAPI and PostgreSQL services deployed on Kubernetes."
JD = "Senior Backend Engineer. Kubernetes, PostgreSQL, Kafka. 5+ years of experience."


class GenerateTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        env = patch.dict(os.environ, {"AI_PROVIDER": "openai", "AI_STREAM": "true"})
        env.start()
        self.addCleanup(env.stop)

    def _patch_client(self, client):
        patcher = patch("hireprep.services.prep_service.get_ai_client", return_value=client)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_generate_concatenates_stream_and_returns_result(self):
        client = FakeAIClient(generation_payload(14), chunk_size=5)
        self._patch_client(client)

        result = await generate(RESUME, JD)

        self.assertEqual(len(result.questions), 14)
        self.assertEqual(result.questions[0].difficulty, "Hard")
        self.assertEqual(result.prep_plan.topics_to_revise[0], "Kubernetes scheduling")
        self.assertEqual(result.skill_gap_analysis.gaps, ["Kubernetes operators"])
        self.assertEqual(len(client.calls), 1)
        self.assertEqual(client.calls[0]["mode"], "stream")
        self.assertAlmostEqual(client.calls[0]["temperature"], 0.7)

    async def test_prompt_embeds_inputs_verbatim(self):
        client = FakeAIClient(generation_payload())
        self._patch_client(client)

        await generate(RESUME, JD)

        system, user = client.calls[0]["messages"]
        self.assertEqual(system.role, "system")
        self.assertIn("12-18", system.content)
        self.assertIn("70%", system.content)
        self.assertIn(RESUME, user.content)
        self.assertIn(JD, user.content)

    async def test_single_shot_mode_uses_complete(self):
        client = FakeAIClient(generation_payload())
        self._patch_client(client)

        with patch.dict(os.environ, {"AI_STREAM": "false"}):
            result = await generate(RESUME, JD)

        self.assertEqual(client.calls[0]["mode"], "complete")
        self.assertEqual(len(result.questions), 12)

    async def test_missing_fields_are_default_filled(self):
        payload = {
            "questions": [
                {"question": "Explain Kafka consumer groups."},
                {"question": "What is a PodDisruptionBudget?", "difficulty": "easy", "category": "  "},
                {"question": "How does MVCC work in PostgreSQL?", "keyPoints": None},
            ]
        }
        self._patch_client(FakeAIClient(payload))

        result = await generate(RESUME, JD)

        first, second, third = result.questions
        self.assertEqual(first.difficulty, "Medium")
        self.assertEqual(first.category, "General")
        self.assertEqual(first.model_answer, "")
        self.assertEqual(first.key_points, [])
        self.assertEqual(first.follow_ups, [])
        self.assertEqual(second.difficulty, "Easy")
        self.assertEqual(second.category, "General")
        self.assertEqual(third.key_points, [])
        self.assertEqual(result.prep_plan.timeline, "")
        self.assertEqual(result.prep_plan.resources, [])
        self.assertEqual(result.skill_gap_analysis.recommendations, "")

        dumped = result.model_dump(by_alias=True)
        for question in dumped["questions"]:
            self.assertEqual(
                set(question),
                {"question", "difficulty", "category", "modelAnswer", "keyPoints", "followUps"},
            )

    async def test_empty_response_is_format_error(self):
        self._patch_client(FakeAIClient(""))
        with self.assertRaises(UpstreamFormatError) as ctx:
            await generate(RESUME, JD)
        self.assertEqual(ctx.exception.code, "empty_response")

    async def test_non_json_response_is_format_error(self):
        self._patch_client(FakeAIClient("Here are your questions: 1. What is Kubernetes?"))
        with self.assertRaises(UpstreamFormatError) as ctx:
            await generate(RESUME, JD)
        self.assertEqual(ctx.exception.code, "invalid_json")

    async def test_non_object_json_is_format_error(self):
        self._patch_client(FakeAIClient(json.dumps([question_payload("Orphan question?")])))
        with self.assertRaises(UpstreamFormatError):
            await generate(RESUME, JD)

    async def test_wrong_shape_fails_fast(self):
        cases = [
            {"questions": "not a list"},
            {"questions": [question_payload("Q?", keyPoints="single string")]},
            {"questions": [question_payload("Q?", difficulty="Expert")]},
            {"questions": [], "prepPlan": ["wrong"]},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                self._patch_client(FakeAIClient(payload))
                with self.assertRaises(UpstreamFormatError) as ctx:
                    await generate(RESUME, JD)
                self.assertEqual(ctx.exception.code, "invalid_schema")

    async def test_empty_inputs_fail_before_any_network_call(self):
        factory = MagicMock()
        with patch("hireprep.services.prep_service.get_ai_client", factory):
            for resume, jd in (("", JD), (RESUME, ""), ("   ", JD), (RESUME, "\n\t")):
                with self.subTest(resume=resume, jd=jd):
                    with self.assertRaises(ValidationError):
                        await generate(resume, jd)
        factory.assert_not_called()

    async def test_missing_api_key_is_configuration_error(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": ""}):
            with self.assertRaises(ConfigurationError):
                await generate(RESUME, JD)

    async def test_unsupported_provider_is_configuration_error(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "llamafarm"}):
            with self.assertRaises(ConfigurationError):
                await generate(RESUME, JD)

    async def test_upstream_failure_propagates_once(self):
        client = FakeAIClient(error=UpstreamError("connection reset"))
        self._patch_client(client)
        with self.assertRaises(UpstreamError):
            await generate(RESUME, JD)
        self.assertEqual(len(client.calls), 1)


class ContinueGenerateTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        env = patch.dict(os.environ, {"AI_PROVIDER": "openai", "AI_STREAM": "true"})
        env.start()
        self.addCleanup(env.stop)

    async def test_continue_lists_existing_and_returns_only_new(self):
        existing = [
            Question(question="How does the Kubernetes scheduler pick a node?"),
            Question(question="Explain PostgreSQL VACUUM."),
        ]
        new_payload = {"questions": [question_payload(f"New angle {i}?") for i in range(6)]}
        client = FakeAIClient(new_payload)

        with patch("hireprep.services.prep_service.get_ai_client", return_value=client):
            result = await continue_generate(RESUME, JD, existing)

        self.assertEqual([q.question for q in result.questions], [f"New angle {i}?" for i in range(6)])
        user = client.calls[0]["messages"][1].content
        self.assertIn("1. How does the Kubernetes scheduler pick a node?", user)
        self.assertIn("2. Explain PostgreSQL VACUUM.", user)
        self.assertIn("DO NOT REPEAT", user)
        self.assertAlmostEqual(client.calls[0]["temperature"], 0.8)

        merged = existing + list(result.questions)
        self.assertEqual(len(merged), len(existing) + len(result.questions))

    async def test_continue_accepts_empty_existing_list(self):
        client = FakeAIClient({"questions": [question_payload("Fresh?")]})
        with patch("hireprep.services.prep_service.get_ai_client", return_value=client):
            result = await continue_generate(RESUME, JD, [])
        self.assertEqual(len(result.questions), 1)

    async def test_continue_validates_inputs(self):
        factory = MagicMock()
        with patch("hireprep.services.prep_service.get_ai_client", factory):
            with self.assertRaises(ValidationError):
                await continue_generate("", JD, [])
            with self.assertRaises(ValidationError):
                await continue_generate(RESUME, JD, None)
        factory.assert_not_called()


if __name__ == "__main__":
    unittest.main()
