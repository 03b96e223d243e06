from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from services.crm_entities import CUSTOM_LABELS_KEY, LANGUAGE_KEY
from services.i18n_resources import RESOURCES

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


def _lookup(table: Dict[str, Any], key: str) -> Optional[str]:
    node: Any = table
    for part in key.split("."):
        if isinstance(node, dict) and part in node:
            node = node[part]
        else:
            return None
    return node if isinstance(node, str) else None


def interpolate(template: str, args: Dict[str, Any]) -> str:
    for name, value in args.items():
        template = template.replace("{{" + name + "}}", str(value))
    return template


class Translator:
    """
    Language and custom-label state.

    When a blob store is given, the language and the custom labels are read
    from it on start-up and written back on every change.
    """

    def __init__(self, store=None, language: Optional[str] = None):
        self.store = store
        stored_language = store.load(LANGUAGE_KEY, DEFAULT_LANGUAGE) if store else DEFAULT_LANGUAGE
        self.language = language if language in RESOURCES else (
            stored_language if stored_language in RESOURCES else DEFAULT_LANGUAGE
        )
        stored_labels = store.load(CUSTOM_LABELS_KEY, {}) if store else {}
        self.custom_labels: Dict[str, str] = {
            key: label for key, label in stored_labels.items() if isinstance(label, str)
        }
        if len(self.custom_labels) != len(stored_labels):
            logger.warning("Dropped %d non-text custom labels", len(stored_labels) - len(self.custom_labels))

    def translate(self, key: str, **args: Any) -> str:
        text = _lookup(RESOURCES.get(self.language, {}), key)
        if not text:
            text = _lookup(RESOURCES[DEFAULT_LANGUAGE], key)
        if not text:
            return key
        return interpolate(text, args) if args else text

    def get_label(self, key: str, fallback: Optional[str] = None) -> str:
        if self.custom_labels.get(key):
            return self.custom_labels[key]
        translated = self.translate(key)
        if translated != key:
            return translated
        return fallback or key

    def change_language(self, language: str) -> bool:
        if language not in RESOURCES:
            logger.info("Ignoring unknown language '%s'", language)
            return False
        self.language = language
        self._persist(LANGUAGE_KEY, language)
        return True

    def set_custom_label(self, key: str, label: str) -> None:
        if not str(label or "").strip():
            self.custom_labels.pop(key, None)
        else:
            self.custom_labels[key] = label
        self._persist(CUSTOM_LABELS_KEY, self.custom_labels)

    def reset_custom_labels(self) -> None:
        self.custom_labels = {}
        self._persist(CUSTOM_LABELS_KEY, self.custom_labels)

    def _persist(self, key: str, value: Any) -> None:
        if self.store is not None:
            self.store.save(key, value)
