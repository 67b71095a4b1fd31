# -*- coding: utf-8 -*-
"""Centralized Translation Manager for user-facing messages."""

from typing import Callable, List

from services.translations.ar import AR_TRANSLATIONS
from services.translations.en import EN_TRANSLATIONS
from utils.logger import get_logger

logger = get_logger(__name__)


class TranslationManager:
    """Singleton Translation Manager; Arabic is the default language."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._current_language = "ar"
            cls._instance._translations = {
                "ar": AR_TRANSLATIONS,
                "en": EN_TRANSLATIONS,
            }
            cls._instance._listeners: List[Callable] = []
        return cls._instance

    def on_language_changed(self, callback: Callable):
        self._listeners.append(callback)

    def set_language(self, lang_code: str):
        if lang_code not in self._translations:
            lang_code = "ar"
        if self._current_language != lang_code:
            self._current_language = lang_code
            logger.info(f"Language changed to: {lang_code}")
            for callback in self._listeners:
                callback(lang_code)

    def get_language(self) -> str:
        return self._current_language

    def tr(self, key: str, lang: str = None, **kwargs) -> str:
        """Message for key; missing entries fall back to Arabic, then to the key."""
        translation = self._translations.get(lang or self._current_language, {}).get(key)
        if translation is None:
            translation = self._translations["ar"].get(key)
        if translation is None:
            logger.debug(f"Missing translation key {key!r}")
            return key
        if kwargs:
            try:
                translation = translation.format(**kwargs)
            except (KeyError, ValueError):
                logger.warning(f"Bad format arguments for translation {key!r}")
        return translation


_translator = TranslationManager()


def tr(key: str, **kwargs) -> str:
    return _translator.tr(key, **kwargs)


def tr_in(lang: str, key: str, **kwargs) -> str:
    """Message for key in a fixed language, whatever the active one is."""
    return _translator.tr(key, lang=lang, **kwargs)


def set_language(lang_code: str):
    _translator.set_language(lang_code)


def get_language() -> str:
    return _translator.get_language()
