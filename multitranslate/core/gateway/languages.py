"""Catalog of candidate intermediate languages."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from ...models.translation import LanguageInfo

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_CODE = "en"

_FALLBACK_LANGUAGES = (
    LanguageInfo(code="en", name="English", native_name="English", is_official=True),
    LanguageInfo(code="es", name="Spanish", native_name="Español", is_official=True),
    LanguageInfo(code="fr", name="French", native_name="Français", is_official=True),
    LanguageInfo(code="de", name="German", native_name="Deutsch", is_official=True),
)


class LanguageCatalog:
    """Holds the languages a round trip may pass through."""

    def __init__(
        self,
        languages: Sequence[LanguageInfo],
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._languages = list(languages)
        self._rng = rng or random.Random()

    @classmethod
    def fallback(cls, *, rng: random.Random | None = None) -> "LanguageCatalog":
        return cls(_FALLBACK_LANGUAGES, rng=rng)

    @classmethod
    def from_file(cls, path: Path | None, *, rng: random.Random | None = None) -> "LanguageCatalog":
        """Load ``{"languages": [...]}`` from *path*, falling back to a built-in set."""

        if path is None:
            return cls.fallback(rng=rng)
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            logger.warning("Language data could not be read from %s: %s", path, exc)
            return cls.fallback(rng=rng)
        except ValueError as exc:
            logger.warning("Language data in %s is not valid JSON: %s", path, exc)
            return cls.fallback(rng=rng)

        entries = raw.get("languages") if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            logger.warning("Language data in %s has no 'languages' list", path)
            return cls.fallback(rng=rng)
        try:
            languages = [LanguageInfo.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            logger.warning("Language data in %s is malformed: %s", path, exc)
            return cls.fallback(rng=rng)

        logger.info("Loaded language data", extra={"language_count": len(languages)})
        return cls(languages, rng=rng)

    @property
    def languages(self) -> list[LanguageInfo]:
        return list(self._languages)

    @property
    def codes(self) -> list[str]:
        return [language.code for language in self._languages]

    def __len__(self) -> int:
        return len(self._languages)

    def choose(self) -> str:
        """Pick a random language code, English when the catalog is empty."""

        if not self._languages:
            return DEFAULT_LANGUAGE_CODE
        return self._rng.choice(self._languages).code


__all__ = ("DEFAULT_LANGUAGE_CODE", "LanguageCatalog")
