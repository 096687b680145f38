from __future__ import annotations

import logging
import uuid
from typing import Protocol

from signage.repositories.player_store import PlayerContentStore


class LanguageVariantResolver(Protocol):
    def resolve(self, scene_id: uuid.UUID, language_code: str) -> uuid.UUID | None: ...


def normalize_language(code: str | None) -> str | None:
    if code is None:
        return None
    cleaned = code.strip().lower()
    return cleaned or None


class StoreLanguageVariantResolver:
    """Swaps a scene for its sibling in the device language, else the group default."""

    def __init__(self, store: PlayerContentStore):
        self._store = store
        self._logger = logging.getLogger("signage.language_variants")

    def resolve(self, scene_id: uuid.UUID, language_code: str) -> uuid.UUID | None:
        scene = self._store.get_scene(scene_id)
        if scene is None:
            return None
        wanted = normalize_language(language_code)
        if scene.language_group_id is None or wanted is None:
            return scene.id
        if normalize_language(scene.language_code) == wanted:
            return scene.id

        variants = self._store.list_language_variants(scene.language_group_id)
        by_language = {normalize_language(variant.language_code): variant for variant in variants}

        match = by_language.get(wanted)
        if match is None:
            default_language = normalize_language(
                self._store.get_language_group_default(scene.language_group_id)
            )
            if default_language is not None:
                match = by_language.get(default_language)
        if match is None:
            return scene.id

        if match.id != scene.id:
            self._logger.debug(
                "resolved scene variant scene_id=%s language=%s variant_id=%s",
                scene.id,
                wanted,
                match.id,
            )
        return match.id
