import json
import logging
from functools import lru_cache
from pathlib import Path

from master_chef.core.config import SUPPORTED_LANGUAGES

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent.parent / "locales"
FALLBACK_LANGUAGE = "en"


class Translator:
    def __init__(self, translations: dict[str, dict[str, str]]) -> None:
        self._translations = translations

    @classmethod
    def load(
        cls, locales_dir: Path = LOCALES_DIR, languages: tuple[str, ...] = SUPPORTED_LANGUAGES
    ) -> "Translator":
        fallback = cls._read_locale(locales_dir, FALLBACK_LANGUAGE) or {}
        translations: dict[str, dict[str, str]] = {}
        for language in languages:
            if language == FALLBACK_LANGUAGE:
                translations[language] = fallback
                continue
            data = cls._read_locale(locales_dir, language)
            translations[language] = data if data is not None else fallback
        return cls(translations)

    @staticmethod
    def _read_locale(locales_dir: Path, language: str) -> dict[str, str] | None:
        path = locales_dir / f"{language}.json"
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "locale_load_failed",
                extra={"language": language, "error_class": exc.__class__.__name__},
            )
            return None
        if not isinstance(data, dict):
            logger.warning(
                "locale_load_failed", extra={"language": language, "error_class": "not_an_object"}
            )
            return None
        return {str(key): str(value) for key, value in data.items()}

    @property
    def languages(self) -> list[str]:
        return list(self._translations)

    def t(self, language: str, key: str) -> str:
        table = self._translations.get(language, {})
        fallback = self._translations.get(FALLBACK_LANGUAGE, {})
        return table.get(key) or fallback.get(key) or key


@lru_cache
def get_translator() -> Translator:
    return Translator.load()
