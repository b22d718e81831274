from typing import Iterable, Mapping

from sql_localizer.config import DEFAULT_LABELS


def normalize_code(code: str) -> str:
    return (code or "").strip().lower()


class LanguageLabels:
    """Language code -> display name. Seeded from the defaults; only ever grows."""

    def __init__(self, defaults: Mapping[str, str] = DEFAULT_LABELS):
        self._labels: dict[str, str] = dict(defaults)

    def __contains__(self, code) -> bool:
        return code in self._labels

    def __iter__(self):
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def items(self):
        return self._labels.items()

    def codes(self) -> list[str]:
        return list(self._labels)

    def add(self, code: str, label: str) -> str:
        code = normalize_code(code)
        if not code:
            raise ValueError("language code must not be blank")
        self._labels[code] = label.strip() or code.upper()
        return code

    def label_for(self, code: str) -> str:
        return self._labels.get(code) or self._labels.get(code.lower()) or code.upper()


def sort_languages(codes: Iterable[str], order: list[str]) -> list[str]:
    """English first, then codes in mapping order, then the rest alphabetically."""
    position = {}
    for i, token in enumerate(order):
        position.setdefault(token.lower(), i)

    def sort_key(code):
        if code == "en":
            return (0, 0, "")
        if code in position:
            return (1, position[code], "")
        return (2, 0, code)

    return sorted(dict.fromkeys(codes), key=sort_key)
