from __future__ import annotations

from typing import Iterable, Iterator, Tuple


MASK_SUFFIX_LENGTH = 4


def mask_credential(api_key: str) -> str:
    """Return a log-safe identifier for an API key (its last few characters)."""
    if len(api_key) <= MASK_SUFFIX_LENGTH * 2:
        return "***"
    return f"...{api_key[-MASK_SUFFIX_LENGTH:]}"


class CredentialPool:
    """Ordered, immutable list of interchangeable Gemini API keys."""

    __slots__ = ("_keys",)

    def __init__(self, keys: Iterable[str]):
        ordered: list[str] = []
        for key in keys:
            clean = (key or "").strip()
            if clean and clean not in ordered:
                ordered.append(clean)
        if not ordered:
            raise RuntimeError("GEMINI_API_KEY must contain at least one API key.")
        self._keys: Tuple[str, ...] = tuple(ordered)

    @classmethod
    def from_delimited(cls, raw: str, separator: str = ",") -> "CredentialPool":
        return cls((raw or "").split(separator))

    @property
    def keys(self) -> Tuple[str, ...]:
        return self._keys

    def masked(self) -> list[str]:
        return [mask_credential(key) for key in self._keys]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"CredentialPool({', '.join(self.masked())})"
