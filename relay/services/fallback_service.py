"""Keyword-based replies used when the NLU backend cannot answer."""

import random
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class KeywordGroup:
    name: str
    keywords: tuple[str, ...]
    response: str


GREETING_RESPONSE = "สวัสดีครับ! ยินดีต้อนรับ มีอะไรให้ช่วยเหลือไหมครับ? 😊"
HELP_RESPONSE = "ผมพร้อมช่วยเหลือครับ! พิมพ์คำถามที่ต้องการสอบถามได้เลย แล้วผมจะพยายามตอบให้ดีที่สุดครับ 🙋‍♂️"
THANKS_RESPONSE = "ยินดีครับ! หากมีอะไรเพิ่มเติม สอบถามได้ตลอดเลยนะครับ 🙏"
FAREWELL_RESPONSE = "ลาก่อนครับ! ขอบคุณที่ใช้บริการ แล้วพบกันใหม่นะครับ 👋"
TEST_RESPONSE = "ระบบทำงานปกติครับ ✅ ได้รับข้อความของคุณเรียบร้อยแล้ว"

# Order matters: the first group with a matching keyword wins.
KEYWORD_GROUPS: tuple[KeywordGroup, ...] = (
    KeywordGroup("greeting", ("สวัสดี", "หวัดดี", "hello"), GREETING_RESPONSE),
    KeywordGroup("help", ("ช่วย", "help", "วิธีใช้", "ใช้งานยังไง"), HELP_RESPONSE),
    KeywordGroup("thanks", ("ขอบคุณ", "ขอบใจ", "thank"), THANKS_RESPONSE),
    KeywordGroup("farewell", ("ลาก่อน", "บายบาย", "ไปก่อนนะ", "bye"), FAREWELL_RESPONSE),
    KeywordGroup("test", ("ทดสอบ", "test"), TEST_RESPONSE),
)

GENERAL_RESPONSES: tuple[str, ...] = (
    'ได้รับข้อความ "{message}" แล้วครับ ขณะนี้ระบบตอบคำถามอัตโนมัติไม่พร้อมใช้งาน กรุณาลองใหม่ภายหลังนะครับ 🙏',
    'ขอบคุณสำหรับข้อความ "{message}" ครับ ตอนนี้ผมยังตอบเรื่องนี้ไม่ได้ ลองถามใหม่อีกครั้งได้เลยครับ 🤔',
    'ผมได้รับ "{message}" แล้วครับ ขออภัยที่ยังให้คำตอบไม่ได้ในตอนนี้ 😅',
)


def normalize_for_matching(text: str) -> str:
    return (text or "").casefold()


def match_keyword_group(text: str) -> Optional[KeywordGroup]:
    normalized = normalize_for_matching(text)
    if not normalized:
        return None
    for group in KEYWORD_GROUPS:
        if any(keyword in normalized for keyword in group.keywords):
            return group
    return None


def fallback_reply(text: str, rng: Optional[random.Random] = None) -> str:
    """Pick a canned reply for text. Never fails and never returns an empty string."""
    group = match_keyword_group(text)
    if group is not None:
        return group.response

    chooser = rng or random
    template = chooser.choice(GENERAL_RESPONSES)
    return template.format(message=text or "")


class FallbackResponder:
    """Binds fallback_reply to a randomness source."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def __call__(self, text: str) -> str:
        return fallback_reply(text, self.rng)
