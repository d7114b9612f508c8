"""Tests for the rule-based normalizer."""

import pytest

from whereabouts.adapters.normalization import RuleBasedNormalizer, fold_ascii
from whereabouts.domain.models import EntityKind

PERSON = EntityKind.PERSON
PLACE = EntityKind.PLACE


class TestFoldAscii:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Grudziądz", "GRUDZIADZ"),
            ("Łódź", "LODZ"),
            ("Elbląg", "ELBLAG"),
            ("  zielona   góra ", "ZIELONA GORA"),
            ("Kraków.", "KRAKOW"),
            ("Bielsko-Biała", "BIELSKO BIALA"),
            ("P12", "P12"),
            ("", ""),
            ("???", ""),
        ],
    )
    def test_fold(self, raw, expected):
        assert fold_ascii(raw) == expected


class TestRuleBasedNormalizer:
    def test_place_keeps_every_word(self):
        normalizer = RuleBasedNormalizer()

        assert normalizer.normalize("Zielona Góra", PLACE) == "ZIELONA GORA"

    def test_person_is_first_name(self):
        normalizer = RuleBasedNormalizer()

        assert normalizer.normalize("Barbara Zawadzka", PERSON) == "BARBARA"
        assert normalizer.normalize("rafał", PERSON) == "RAFAL"

    def test_blank_is_empty(self):
        assert RuleBasedNormalizer().normalize("  ", PLACE) == ""

    def test_idempotent(self):
        normalizer = RuleBasedNormalizer()
        once = normalizer.normalize("Grudziądz", PLACE)

        assert normalizer.normalize(once, PLACE) == once

    def test_typo_snaps_onto_known_id(self):
        normalizer = RuleBasedNormalizer(fuzzy_threshold=85.0)
        normalizer.normalize("Grudziądz", PLACE)

        assert normalizer.normalize("Grudziadzz", PLACE) == "GRUDZIADZ"

    def test_distinct_names_stay_distinct(self):
        normalizer = RuleBasedNormalizer(fuzzy_threshold=90.0)
        normalizer.normalize("Kraków", PLACE)

        assert normalizer.normalize("Krosno", PLACE) == "KROSNO"
        assert set(normalizer.known_ids(PLACE)) == {"KRAKOW", "KROSNO"}

    def test_snapping_is_per_kind(self):
        normalizer = RuleBasedNormalizer(fuzzy_threshold=85.0)
        normalizer.normalize("Adam", PERSON)

        assert normalizer.normalize("Adamm", PLACE) == "ADAMM"

    def test_snapping_disabled(self):
        normalizer = RuleBasedNormalizer(fuzzy_threshold=None)
        normalizer.normalize("Grudziądz", PLACE)

        assert normalizer.normalize("Grudziadzz", PLACE) == "GRUDZIADZZ"

    def test_remembered_ids_attract_typos(self):
        normalizer = RuleBasedNormalizer(fuzzy_threshold=85.0)
        normalizer.remember("WARSZAWA", PLACE)

        assert normalizer.normalize("Warszawaa", PLACE) == "WARSZAWA"
        assert normalizer.known_ids(PLACE) == ("WARSZAWA",)

    def test_score_equal_to_threshold_does_not_snap(self):
        # ALEKSANDER / ALEKSANDRA score exactly 90
        normalizer = RuleBasedNormalizer()
        normalizer.normalize("Aleksander", PERSON)

        assert normalizer.normalize("Aleksandra", PERSON) == "ALEKSANDRA"
        assert set(normalizer.known_ids(PERSON)) == {"ALEKSANDER", "ALEKSANDRA"}
