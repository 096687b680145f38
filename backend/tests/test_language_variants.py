from __future__ import annotations

import uuid
from unittest import TestCase

from player_fakes import InMemoryPlayerContentStore

from signage.services.language_variants import StoreLanguageVariantResolver, normalize_language


class NormalizeLanguageTests(TestCase):
    def test_normalize(self) -> None:
        self.assertEqual(normalize_language(" ES "), "es")
        self.assertIsNone(normalize_language("   "))
        self.assertIsNone(normalize_language(None))


class StoreLanguageVariantResolverTests(TestCase):
    def setUp(self) -> None:
        self.store = InMemoryPlayerContentStore()
        self.group_id = uuid.uuid4()
        self.store.language_defaults[self.group_id] = "de"
        self.english = self.store.add_scene(name="Menu", language_group_id=self.group_id, language_code="en")
        self.spanish = self.store.add_scene(name="Menú", language_group_id=self.group_id, language_code="es")
        self.german = self.store.add_scene(name="Speisekarte", language_group_id=self.group_id, language_code="de")
        self.resolver = StoreLanguageVariantResolver(self.store)

    def test_sibling_in_requested_language(self) -> None:
        self.assertEqual(self.resolver.resolve(self.english.id, "es"), self.spanish.id)
        self.assertEqual(self.resolver.resolve(self.spanish.id, "EN"), self.english.id)

    def test_scene_already_in_requested_language(self) -> None:
        self.assertEqual(self.resolver.resolve(self.german.id, "de"), self.german.id)

    def test_falls_back_to_group_default_language(self) -> None:
        self.assertEqual(self.resolver.resolve(self.english.id, "fr"), self.german.id)

    def test_keeps_requested_scene_when_default_variant_missing(self) -> None:
        self.store.language_defaults[self.group_id] = "it"
        self.assertEqual(self.resolver.resolve(self.english.id, "fr"), self.english.id)

    def test_ungrouped_scene_is_returned_as_is(self) -> None:
        solo = self.store.add_scene(name="Solo", language_code="en")
        self.assertEqual(self.resolver.resolve(solo.id, "es"), solo.id)

    def test_unknown_scene(self) -> None:
        self.assertIsNone(self.resolver.resolve(uuid.uuid4(), "en"))
