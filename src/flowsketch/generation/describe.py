"""Flow description generation.

The diagram pipeline needs a plain-text, one-step-per-line description of a
process. This module asks Anthropic's Messages API for one; the output format
is only requested, never guaranteed, which is why the classifier is lenient.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Protocol

import anthropic

from ..config.settings import Settings
from ..core.exceptions import ConfigurationError, GenerationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You turn topics and document summaries into step-by-step flowchart "
    "descriptions. Output only the description, one step per line."
)

PROMPTS = {
    "tr": """Aşağıdaki konuyu bir akış diyagramı mantığıyla, adım adım ve numaralandırarak tanımla.
Her satırda tek bir adım olsun. Şu etiketleri kullan: BAŞLANGIÇ, GİRİŞ:, İŞLEM:, KARAR:, ÇIKIŞ:, BİTİŞ.
Karar dallarını girintili madde olarak yaz (EVET ise / HAYIR ise). Paralel adımlar için PARALEL:, tekrarlar için DÖNGÜ: kullan.
Açıklamaları parantez içinde yaz.

Örnek:
1. **BAŞLANGIÇ**
2. **GİRİŞ:** Kullanıcıdan sayı alınır.
3. **KARAR:** Sayı çift mi?
    * **EVET ise:**
        1. **ÇIKIŞ:** "Çift" yazdırılır.
    * **HAYIR ise:**
        1. **ÇIKIŞ:** "Tek" yazdırılır.
4. **BİTİŞ**

Konu:
{topic}
""",
    "en": """Describe the following topic as a numbered, step-by-step flowchart.
Put exactly one step on each line. Use these labels: START, INPUT:, PROCESS:, DECISION:, OUTPUT:, END.
Write decision branches as indented bullets (IF YES / IF NO). Use PARALLEL: for concurrent steps and LOOP: for repetition.
Wrap side notes in parentheses.

Example:
1. **START**
2. **INPUT:** Read a number from the user.
3. **DECISION:** Is the number even?
    * **IF YES:**
        1. **OUTPUT:** Print "even".
    * **IF NO:**
        1. **OUTPUT:** Print "odd".
4. **END**

Topic:
{topic}
""",
}

_FENCE_RE = re.compile(r"```[a-zA-Z]*[ \t]*\n?(.*?)```", re.DOTALL)


class FlowDescriber(Protocol):
    def describe(self, topic: str) -> str:
        ...


def clean_description(text: str) -> str:
    """Strip markdown code fences and surrounding blank lines."""
    fenced = _FENCE_RE.findall(text or "")
    if fenced:
        text = "\n".join(block.strip("\n") for block in fenced)
    return (text or "").strip("\n").rstrip()


def build_prompt(topic: str, language: str = "tr") -> str:
    template = PROMPTS.get(language, PROMPTS["tr"])
    return template.format(topic=topic.strip())


class AnthropicFlowDescriber:
    """Generates flow descriptions with Anthropic's Messages API."""

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.settings.anthropic_api_key:
                raise ConfigurationError(
                    "Missing Anthropic API key",
                    {"env": ["FLOWSKETCH_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"]},
                )
            self._client = anthropic.Anthropic(api_key=self.settings.anthropic_api_key)
        return self._client

    def describe(self, topic: str) -> str:
        if not topic or not topic.strip():
            raise GenerationError("Topic is empty")

        prompt = build_prompt(topic, self.settings.language)
        try:
            response = self.client.messages.create(
                model=self.settings.anthropic_model,
                max_tokens=self.settings.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            logger.warning(
                "Flow description request failed",
                extra={"error": str(exc), "model": self.settings.anthropic_model},
            )
            raise GenerationError(
                "Flow description request failed", {"error": str(exc)}
            ) from exc

        text = "".join(
            getattr(block, "text", "")
            for block in (response.content or [])
            if getattr(block, "type", "text") == "text"
        )
        description = clean_description(text)
        if not description:
            logger.warning("Flow description response was empty", extra={"topic": topic[:80]})
            raise GenerationError("Flow description response was empty", {"topic": topic[:80]})

        logger.debug(
            "Generated flow description",
            extra={"response_preview": description[:500]},
        )
        return description


class StaticFlowDescriber:
    """Returns a fixed description; useful offline and in tests."""

    def __init__(self, text: str):
        self.text = text

    def describe(self, topic: str) -> str:
        return self.text
