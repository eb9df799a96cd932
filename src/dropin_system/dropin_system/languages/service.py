from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..common.validators import FieldErrors, max_length, optional_text, parse_optional_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Language
from .repository import LanguageRepository

log = logging.getLogger(__name__)


class LanguageService:
    def __init__(self, languages: LanguageRepository):
        self._languages = languages

    def get(self, language_id: int) -> Language:
        language = self._languages.get_by_id(int(language_id))
        if not language:
            raise NotFoundError()
        return language

    def search(self, filters: Optional[Mapping[str, str]] = None) -> list[Language]:
        filters = filters or {}
        errors = FieldErrors()
        language_id = parse_optional_int(filters.get("ID"), "ID", "ID", errors)
        if errors:
            # an unparsable id filter matches nothing
            return []
        return list(
            self._languages.search(
                language_id=language_id,
                language=optional_text(filters.get("Language")),
                short_name=optional_text(filters.get("ShortName")),
            )
        )

    def options(self) -> list[tuple[int, str]]:
        """(id, name) pairs for select inputs."""
        return [(lang.language_id, lang.language) for lang in self._languages.search()]

    def name_for(self, language_id: Optional[int]) -> str:
        if not language_id:
            return "-"
        language = self._languages.get_by_id(int(language_id))
        return language.language if language else "-"

    def _parse(self, form: Mapping[str, str]) -> tuple[str, Optional[str]]:
        errors = FieldErrors()
        name = require_non_empty(form.get("Language"), "Language", "Language", errors)
        max_length(name, "Language", "Language", errors)
        short_name = optional_text(form.get("ShortName"))
        max_length(short_name, "ShortName", "Short Name", errors)
        if errors:
            raise ValidationError("Please correct the errors below.", errors.errors)
        return name, short_name

    def create(self, form: Mapping[str, str]) -> int:
        name, short_name = self._parse(form)
        language_id = self._languages.create(language=name, short_name=short_name)
        log.info("language %s created (%s)", language_id, name)
        return language_id

    def update(self, language_id: int, form: Mapping[str, str]) -> None:
        self.get(language_id)
        name, short_name = self._parse(form)
        self._languages.update(language_id=int(language_id), language=name, short_name=short_name)

    def delete(self, language_id: int) -> None:
        if not self._languages.delete(int(language_id)):
            raise NotFoundError()
        log.info("language %s deleted", language_id)
