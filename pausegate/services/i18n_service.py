"""Translations for the visitor-facing pages."""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pausegate.config import settings

logger = logging.getLogger(__name__)

TRANSLATIONS_DIR = Path(__file__).resolve().parent.parent / "translations"


class I18nService:
    """Looks up dot-notation message keys in per-language JSON catalogues."""

    def __init__(self, translations_dir: Path = TRANSLATIONS_DIR):
        self.catalogues: dict[str, dict] = {}
        for lang in settings.supported_languages_list:
            self.catalogues[lang] = self._load_catalogue(translations_dir / lang / "messages.json")

    @staticmethod
    def _load_catalogue(path: Path) -> dict:
        if not path.exists():
            logger.warning(f"No translation catalogue at {path}")
            return {}
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def t(self, key: str, lang: str | None = None, **kwargs) -> str:
        """Translate a dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'maintenance.days')
            lang: Language code; the default language is used when omitted
            **kwargs: Values for ``{{name}}`` placeholders

        Returns:
            Translated string, or the key itself if no catalogue has it
        """
        lang = lang or settings.default_language
        value = self._lookup(key, lang)
        if value is None and lang != settings.default_language:
            value = self._lookup(key, settings.default_language)
        if value is None:
            return key

        for name, replacement in kwargs.items():
            value = value.replace("{{" + name + "}}", str(replacement))
        return value

    def _lookup(self, key: str, lang: str) -> str | None:
        node = self.catalogues.get(lang, {})
        for part in key.split("."):
            if not isinstance(node, dict):
                return None
            node = node.get(part)
        return node if isinstance(node, str) else None


@lru_cache
def get_i18n_service() -> I18nService:
    """Get cached i18n service instance."""
    return I18nService()
