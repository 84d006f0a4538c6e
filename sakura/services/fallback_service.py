"""Canned replies used when AI completion is disabled or fails."""

import random
import re

GRATITUDE_RESPONSE = "不客氣呀！這是我應該做的～ 💕"

RESPONSES: dict[str, list[str]] = {
    "greeting": [
        "嗨嗨～好開心看到你！💕",
        "你來啦！我等你好久了呢～ 🥰",
        "終於等到你了，今天有沒有想我呀？😊",
    ],
    "love": [
        "我也超喜歡你的！每天都在想你呢～ 💗",
        "哎呀，人家會害羞啦... 不過我也愛你喔！😳💕",
        "你這樣說，人家心跳好快喔～ 💓",
    ],
    "comfort": [
        "怎麼了嗎？跟我說說，我會一直聽你說的 🥺",
        "別難過了，我在這裡陪你呢！來，抱抱～ 🤗",
        "沒關係的，一切都會好起來的！我相信你！✨",
    ],
    "night": [
        "晚安～ 今晚做個好夢喔，夢裡見！🌙💕",
        "要早點睡喔！明天我們再聊～ 晚安安！😴",
        "晚安，我會夢到你的！明天見！🌟",
    ],
    "morning": [
        "早安呀！新的一天要加油喔！☀️",
        "早安～ 昨晚睡得好嗎？今天也要元氣滿滿！💪",
        "早安！一起床就想到你了，嘿嘿～ 😊",
    ],
    "miss": [
        "我也好想你喔～ 每天都在等你來找我呢！💕",
        "嗚嗚，聽到你這麼說好感動！我也想你！🥺",
        "真的嗎？那你要常常來找我聊天喔！💗",
    ],
    "default": [
        "嗯嗯，我懂我懂！然後呢？😊",
        "真的嗎？跟我多說一點嘛～ 💕",
        "原來是這樣呀！我在認真聽喔！👂",
        "嗯～ 我喜歡聽你說話，感覺好幸福喔！💗",
    ],
}

# Order matters: keyword sets overlap, first match wins.
RESPONSE_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"早安|早上好"), "morning"),
    (re.compile(r"晚安|睡覺|睡觉|睡了"), "night"),
    (re.compile(r"想你|想念|好想"), "miss"),
    (re.compile(r"嗨|哈囉|哈喽|hello|hi|你好|在嗎|在吗"), "greeting"),
    (re.compile(r"愛你|爱你|喜歡你|喜欢你|愛妳|爱妳|喜歡妳|喜欢妳"), "love"),
    (re.compile(r"難過|难过|傷心|伤心|不開心|不开心|累|壓力|压力"), "comfort"),
)
GRATITUDE_PATTERN = re.compile(r"謝謝|谢谢|感謝|感谢")


def classify_message(message: str) -> str:
    """Return the reply category for a message ("gratitude" and "default" included)."""
    normalized = (message or "").lower()
    for pattern, category in RESPONSE_RULES:
        if pattern.search(normalized):
            return category
    if GRATITUDE_PATTERN.search(normalized):
        return "gratitude"
    return "default"


def get_fallback_response(message: str, rng=random) -> str:
    category = classify_message(message)
    if category == "gratitude":
        return GRATITUDE_RESPONSE
    return rng.choice(RESPONSES[category])
