import random

import pytest

from relay.services.fallback_service import (
    FAREWELL_RESPONSE,
    GENERAL_RESPONSES,
    GREETING_RESPONSE,
    HELP_RESPONSE,
    KEYWORD_GROUPS,
    TEST_RESPONSE,
    THANKS_RESPONSE,
    FallbackResponder,
    fallback_reply,
    match_keyword_group,
)


class TestKeywordGroups:
    def test_group_order(self):
        assert [group.name for group in KEYWORD_GROUPS] == ["greeting", "help", "thanks", "farewell", "test"]

    def test_greeting_thai(self):
        assert fallback_reply("สวัสดี") == GREETING_RESPONSE

    def test_greeting_inside_sentence(self):
        assert fallback_reply("สวัสดีครับ วันนี้อากาศดีนะ") == GREETING_RESPONSE

    @pytest.mark.parametrize("text", ["hello", "HELLO", "Hello there"])
    def test_greeting_is_case_insensitive(self, text):
        assert fallback_reply(text) == GREETING_RESPONSE

    def test_help(self):
        assert fallback_reply("ช่วยหน่อยได้ไหม") == HELP_RESPONSE

    def test_thanks(self):
        assert fallback_reply("ขอบคุณมากครับ") == THANKS_RESPONSE

    def test_farewell(self):
        assert fallback_reply("ลาก่อนนะ") == FAREWELL_RESPONSE

    @pytest.mark.parametrize("text", ["บายบาย", "ไปก่อนนะครับ", "Bye!"])
    def test_farewell_variants(self, text):
        assert fallback_reply(text) == FAREWELL_RESPONSE

    @pytest.mark.parametrize("text", ["สบายดีไหม", "สบายดีครับ", "ไม่สบาย"])
    def test_sabai_is_not_farewell(self, text):
        assert match_keyword_group(text) is None
        assert fallback_reply(text, random.Random(0)) != FAREWELL_RESPONSE

    def test_test_keyword(self):
        assert fallback_reply("TEST") == TEST_RESPONSE

    def test_first_matching_group_wins(self):
        # greeting and farewell both present
        assert fallback_reply("สวัสดี แล้วก็ บายบาย") == GREETING_RESPONSE

    def test_no_match_returns_none(self):
        assert match_keyword_group("ราคาเท่าไหร่") is None


class TestGeneralResponses:
    def test_general_interpolates_original_text(self):
        reply = fallback_reply("ราคาเท่าไหร่ XYZ", random.Random(0))
        assert "ราคาเท่าไหร่ XYZ" in reply
        assert any(reply == template.format(message="ราคาเท่าไหร่ XYZ") for template in GENERAL_RESPONSES)

    def test_seeded_rng_is_deterministic(self):
        first = fallback_reply("อะไรนะ", random.Random(42))
        second = fallback_reply("อะไรนะ", random.Random(42))
        assert first == second

    def test_braces_in_text_are_kept(self):
        reply = fallback_reply("{weird}", random.Random(1))
        assert "{weird}" in reply

    def test_general_variant_count(self):
        assert 1 <= len(GENERAL_RESPONSES) <= 3


class TestTotality:
    @pytest.mark.parametrize("text", ["", "   ", "\n", "12345", "🙂", "a" * 5000])
    def test_always_non_empty(self, text):
        reply = fallback_reply(text, random.Random(0))
        assert isinstance(reply, str)
        assert reply.strip()

    def test_responder_uses_its_rng(self):
        responder = FallbackResponder(random.Random(7))
        expected = fallback_reply("คำถามทั่วไป", random.Random(7))
        assert responder("คำถามทั่วไป") == expected
