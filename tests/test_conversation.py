from __future__ import annotations

import sys
from pathlib import Path
import unittest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
API_CODE_PATH = PROJECT_ROOT / "api-code"
if str(API_CODE_PATH) not in sys.path:
    sys.path.insert(0, str(API_CODE_PATH))

from domain import (  # noqa: E402
    ConversationTurn,
    CredentialPool,
    GenerationParams,
    Role,
    build_contents,
    mask_credential,
    normalize_role,
)
from schemas import ChatRequest  # noqa: E402


def _turns(count: int) -> list[ConversationTurn]:
    return [
        ConversationTurn(role=Role.USER if i % 2 == 0 else Role.ASSISTANT, text=f"turn-{i}")
        for i in range(count)
    ]


class RoleNormalizationTest(unittest.TestCase):
    def test_assistant_aliases_map_to_model_label(self) -> None:
        for label in ("bot", "assistant", "model", "Bot", " AI "):
            role = normalize_role(label)
            self.assertIs(role, Role.ASSISTANT, label)
            self.assertEqual(role.upstream_label, "model")

    def test_user_role_is_preserved(self) -> None:
        self.assertIs(normalize_role("user"), Role.USER)
        self.assertEqual(Role.USER.upstream_label, "user")

    def test_unknown_or_missing_roles(self) -> None:
        self.assertIsNone(normalize_role(None))
        self.assertIsNone(normalize_role(""))
        self.assertIsNone(normalize_role("narrator"))


class BuildContentsTest(unittest.TestCase):
    def test_order_is_preamble_history_message(self) -> None:
        contents = build_contents(
            _turns(2),
            "latest",
            system_preamble="be nice",
        )
        self.assertEqual(
            contents,
            [
                {"role": "user", "parts": [{"text": "be nice"}]},
                {"role": "user", "parts": [{"text": "turn-0"}]},
                {"role": "model", "parts": [{"text": "turn-1"}]},
                {"role": "user", "parts": [{"text": "latest"}]},
            ],
        )

    def test_history_truncated_to_most_recent_turns(self) -> None:
        contents = build_contents(_turns(15), None, history_limit=10)
        texts = [item["parts"][0]["text"] for item in contents]
        self.assertEqual(texts, [f"turn-{i}" for i in range(5, 15)])

    def test_zero_limit_drops_history(self) -> None:
        contents = build_contents(_turns(3), "hi", history_limit=0)
        self.assertEqual(contents, [{"role": "user", "parts": [{"text": "hi"}]}])

    def test_blank_preamble_and_message_are_skipped(self) -> None:
        contents = build_contents(_turns(1), "   ", system_preamble="  ")
        self.assertEqual(len(contents), 1)


class GenerationParamsTest(unittest.TestCase):
    def test_to_upstream_uses_camel_case_and_omits_unset(self) -> None:
        params = GenerationParams(temperature=0.2, top_k=40)
        self.assertEqual(params.to_upstream(), {"temperature": 0.2, "topK": 40})
        self.assertEqual(GenerationParams().to_upstream(), {})

    def test_merged_over_fills_only_missing_fields(self) -> None:
        defaults = GenerationParams(temperature=0.9, top_p=0.8)
        merged = GenerationParams(temperature=0.1).merged_over(defaults)
        self.assertEqual(merged.to_upstream(), {"temperature": 0.1, "topP": 0.8})


class ChatRequestConversionTest(unittest.TestCase):
    def test_invalid_turns_are_dropped(self) -> None:
        request = ChatRequest.model_validate(
            {
                "messages": [
                    {"role": "user", "content": "hello"},
                    {"role": "bot"},
                    {"content": "orphan"},
                    {"role": "narrator", "content": "ignored"},
                    {"role": "bot", "text": "hi there"},
                ]
            }
        )
        conversation = request.to_conversation()
        self.assertEqual(
            [(turn.role, turn.text) for turn in conversation.history],
            [(Role.USER, "hello"), (Role.ASSISTANT, "hi there")],
        )

    def test_messages_preferred_over_history(self) -> None:
        request = ChatRequest.model_validate(
            {
                "messages": [{"role": "user", "content": "from messages"}],
                "history": [{"role": "user", "content": "from history"}],
            }
        )
        self.assertEqual(request.to_conversation().history[0].text, "from messages")

    def test_history_used_when_messages_missing(self) -> None:
        request = ChatRequest.model_validate(
            {"history": [{"role": "assistant", "content": "earlier"}], "message": "now"}
        )
        conversation = request.to_conversation()
        self.assertEqual(conversation.history[0].role, Role.ASSISTANT)
        self.assertEqual(conversation.new_message, "now")

    def test_non_object_entries_and_non_string_fields_are_dropped(self) -> None:
        request = ChatRequest.model_validate(
            {
                "messages": [
                    "stray",
                    7,
                    {"role": "user", "content": 42},
                    {"role": ["bot"], "content": "wrong role type"},
                    {"role": "bot", "content": "kept"},
                ]
            }
        )
        history = request.to_conversation().history
        self.assertEqual([(turn.role, turn.text) for turn in history], [(Role.ASSISTANT, "kept")])

    def test_non_list_history_is_ignored(self) -> None:
        request = ChatRequest.model_validate({"message": "hi", "messages": "not a list"})
        conversation = request.to_conversation()
        self.assertEqual(conversation.history, [])
        self.assertTrue(conversation.has_input)

    def test_history_used_when_messages_has_no_usable_turns(self) -> None:
        request = ChatRequest.model_validate(
            {
                "messages": [{"role": "narrator", "content": "ignored"}, {"content": "no role"}],
                "history": [{"role": "user", "content": "from history"}],
            }
        )
        conversation = request.to_conversation()
        self.assertEqual([turn.text for turn in conversation.history], ["from history"])

    def test_camel_case_options(self) -> None:
        request = ChatRequest.model_validate(
            {"message": "hi", "customPrompt": " pirate ", "topK": 5, "topP": 0.5, "temperature": 1}
        )
        conversation = request.to_conversation()
        self.assertEqual(conversation.system_preamble, "pirate")
        self.assertEqual(
            conversation.generation.to_upstream(),
            {"temperature": 1.0, "topK": 5, "topP": 0.5},
        )

    def test_empty_request_has_no_input(self) -> None:
        self.assertFalse(ChatRequest().to_conversation().has_input)
        self.assertFalse(ChatRequest(message="  ", messages=[]).to_conversation().has_input)


class CredentialPoolTest(unittest.TestCase):
    def test_parses_comma_separated_keys_in_order(self) -> None:
        pool = CredentialPool.from_delimited(" key-one , ,key-two,key-one ")
        self.assertEqual(pool.keys, ("key-one", "key-two"))
        self.assertEqual(len(pool), 2)
        self.assertEqual(list(pool), ["key-one", "key-two"])

    def test_empty_pool_fails_fast(self) -> None:
        with self.assertRaises(RuntimeError):
            CredentialPool.from_delimited("")
        with self.assertRaises(RuntimeError):
            CredentialPool.from_delimited(" , ")

    def test_masking_never_reveals_full_key(self) -> None:
        key = "AIzaSyExampleExampleExample1234"
        self.assertEqual(mask_credential(key), "...1234")
        self.assertEqual(mask_credential("short"), "***")
        self.assertNotIn(key, repr(CredentialPool([key])))


if __name__ == "__main__":
    unittest.main()
