from typing import Optional, Protocol, Sequence

from sql_localizer.models import GeneratedRecord

# (raw bytes, mime type)
ImagePayload = tuple[bytes, str]


def with_english(languages: Sequence[str]) -> list[str]:
    return list(dict.fromkeys([*languages, "en"]))


class LocalizationClient(Protocol):
    """The two calls the form makes to a text-generation backend."""

    def generate(
        self,
        text: str,
        languages: Sequence[str],
        image: Optional[ImagePayload] = None,
    ) -> GeneratedRecord:
        ...

    def refine(self, lang: str, current_text: str, english_context: str) -> str:
        ...
