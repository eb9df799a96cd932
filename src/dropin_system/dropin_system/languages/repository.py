from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Language


class LanguageRepository(Protocol):
    def get_by_id(self, language_id: int) -> Optional[Language]:
        raise NotImplementedError

    def search(
        self,
        *,
        language_id: Optional[int] = None,
        language: Optional[str] = None,
        short_name: Optional[str] = None,
    ) -> Sequence[Language]:
        """Ordered by language name; text filters match substrings."""

        raise NotImplementedError

    def create(self, *, language: str, short_name: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, *, language_id: int, language: str, short_name: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, language_id: int) -> bool:
        raise NotImplementedError
