"""Tests for the chat-model backed oracles."""

import json

from whereabouts.adapters.cache import InMemoryCache, NullCache
from whereabouts.adapters.llm import (
    LLMCandidateResolver,
    LLMEntityExtractor,
    LLMNormalizer,
)
from whereabouts.adapters.llm.prompts import (
    clean_answer,
    render_candidate_prompt,
    string_list,
)
from whereabouts.adapters.normalization import RuleBasedNormalizer
from whereabouts.domain.errors import TransportError
from whereabouts.domain.models import (
    AssociationMap,
    CandidateQuery,
    EntityKind,
    ResolutionStatus,
    SearchResult,
)
from whereabouts.services import SubmissionLoop

from tests.fakes import ScriptedSubmitter, StubChatModel

NOTE = "Barbara Zawadzka lived in Kraków with Aleksander."


def query(excluded=frozenset()):
    return CandidateQuery(
        note=NOTE,
        associations=AssociationMap(
            person_to_places={"RAFAL": ("LUBLIN", "GRUDZIADZ"), "ADAM": ()},
            place_to_persons={"GRUDZIADZ": ("RAFAL", "BARBARA")},
        ),
        candidates=("GRUDZIADZ", "ELBLAG"),
        excluded=excluded,
        target_name="Barbara",
    )


class TestEntityExtractor:
    def test_extracts_names_cities_and_prior_locations(self):
        chat = StubChatModel(
            [
                json.dumps(
                    {"names": ["Barbara Zawadzka", "Aleksander"], "cities": ["Kraków"]}
                ),
                json.dumps({"cities": ["Kraków"]}),
            ]
        )
        extractor = LLMEntityExtractor(chat)

        seeds = extractor.extract(NOTE, "Barbara")

        assert seeds.persons == {"Barbara Zawadzka", "Aleksander"}
        assert seeds.places == {"Kraków"}
        assert seeds.prior_locations == {"Kraków"}
        assert all(json_mode for _, json_mode in chat.calls)
        assert "Barbara has been" in chat.calls[1][0][-1]["content"]

    def test_failed_call_gives_empty_part(self):
        chat = StubChatModel(
            [TransportError("down"), json.dumps({"cities": ["Kraków"]})]
        )

        seeds = LLMEntityExtractor(chat).extract(NOTE, "Barbara")

        assert seeds.is_empty
        assert seeds.prior_locations == {"Kraków"}

    def test_garbage_answers_give_empty_seeds(self):
        chat = StubChatModel(["not json", json.dumps(["Kraków"])])

        seeds = LLMEntityExtractor(chat).extract(NOTE, "Barbara")

        assert seeds.is_empty
        assert seeds.prior_locations == frozenset()

    def test_non_string_items_are_ignored(self):
        assert string_list({"names": ["Adam", 3, None, "  "]}, "names") == ["Adam"]
        assert string_list({"names": "Adam"}, "names") == []


class TestLLMNormalizer:
    def test_answer_is_folded(self):
        chat = StubChatModel(["Grudziądz."])
        normalizer = LLMNormalizer(chat, cache=NullCache())

        assert normalizer.normalize("Grudziądzu", EntityKind.PLACE) == "GRUDZIADZ"
        assert chat.calls[0][1] is False

    def test_person_answer_cut_to_first_name(self):
        chat = StubChatModel(["BARBARA ZAWADZKA"])
        normalizer = LLMNormalizer(chat, cache=NullCache())

        assert normalizer.normalize("Barbarze", EntityKind.PERSON) == "BARBARA"

    def test_cache_avoids_repeated_calls(self):
        chat = StubChatModel(["KRAKOW"])
        normalizer = LLMNormalizer(chat, cache=InMemoryCache(name="test"))

        first = normalizer.normalize("Krakowie", EntityKind.PLACE)
        second = normalizer.normalize(" Krakowie ", EntityKind.PLACE)

        assert first == second == "KRAKOW"
        assert len(chat.calls) == 1

    def test_kind_is_part_of_cache_key(self):
        chat = StubChatModel(["LUBLIN", "LUBLIN"])
        normalizer = LLMNormalizer(chat, cache=InMemoryCache(name="test"))

        normalizer.normalize("Lublin", EntityKind.PLACE)
        normalizer.normalize("Lublin", EntityKind.PERSON)

        assert len(chat.calls) == 2

    def test_transport_error_falls_back(self):
        chat = StubChatModel([TransportError("down")])
        normalizer = LLMNormalizer(chat, cache=NullCache())

        assert normalizer.normalize("Rafał Bomba", EntityKind.PERSON) == "RAFAL"

    def test_empty_answer_falls_back(self):
        chat = StubChatModel(["  ...  "])
        normalizer = LLMNormalizer(chat, cache=NullCache())

        assert normalizer.normalize("Elbląg", EntityKind.PLACE) == "ELBLAG"

    def test_blank_input_skips_model(self):
        chat = StubChatModel([])
        normalizer = LLMNormalizer(chat, cache=NullCache())

        assert normalizer.normalize("   ", EntityKind.PLACE) == ""
        assert chat.calls == []

    def test_answers_are_remembered_by_fallback(self):
        chat = StubChatModel(["WARSZAWA", TransportError("down")])
        fallback = RuleBasedNormalizer(fuzzy_threshold=85.0)
        normalizer = LLMNormalizer(chat, cache=NullCache(), fallback=fallback)

        normalizer.normalize("Warszawie", EntityKind.PLACE)

        assert normalizer.normalize("Warszawaa", EntityKind.PLACE) == "WARSZAWA"


class TestCandidateResolver:
    def test_returns_upper_case_city(self):
        chat = StubChatModel([json.dumps({"city": "grudziadz"})])

        assert LLMCandidateResolver(chat).choose(query()) == "GRUDZIADZ"
        assert chat.calls[0][1] is True

    def test_answer_with_diacritics_is_canonical(self):
        chat = StubChatModel([json.dumps({"city": "Grudziądz"})])

        assert LLMCandidateResolver(chat).choose(query()) == "GRUDZIADZ"

    def test_rejected_city_is_not_resubmitted_under_another_spelling(self):
        chat = StubChatModel(
            [json.dumps({"city": "Grudziądz"}), json.dumps({"city": "GRUDZIADZ"})]
        )
        submitter = ScriptedSubmitter()
        loop = SubmissionLoop(resolver=LLMCandidateResolver(chat), submitter=submitter)
        search = SearchResult(
            candidates=("GRUDZIADZ",), associations=query().associations
        )

        outcome = loop.run(NOTE, search, "Barbara")

        assert submitter.submitted == ["GRUDZIADZ"]
        assert outcome.status is ResolutionStatus.CANDIDATES_EXHAUSTED

    def test_unknown_answer(self):
        chat = StubChatModel([json.dumps({"city": "UNKNOWN"})])

        assert LLMCandidateResolver(chat).choose(query()) is None

    def test_failure_is_unknown(self):
        chat = StubChatModel([TransportError("down")])

        assert LLMCandidateResolver(chat).choose(query()) is None

    def test_unreadable_answer_is_unknown(self):
        chat = StubChatModel(["GRUDZIADZ"])

        assert LLMCandidateResolver(chat).choose(query()) is None

    def test_non_string_city_is_unknown(self):
        chat = StubChatModel([json.dumps({"city": ["GRUDZIADZ"]})])

        assert LLMCandidateResolver(chat).choose(query()) is None

    def test_prompt_lists_exclusions(self):
        chat = StubChatModel([json.dumps({"city": "ELBLAG"})])

        LLMCandidateResolver(chat).choose(query(frozenset({"GRUDZIADZ"})))

        prompt = chat.calls[0][0][-1]["content"]
        assert "Do not consider the following cities" in prompt
        assert "GRUDZIADZ" in prompt.split("Do not consider")[1]


class TestPrompts:
    def test_candidate_prompt_is_deterministic(self):
        a = query(frozenset({"ELBLAG", "GRUDZIADZ"}))
        b = query(frozenset({"GRUDZIADZ", "ELBLAG"}))

        assert render_candidate_prompt(a) == render_candidate_prompt(b)

    def test_candidate_prompt_sorts_maps(self):
        prompt = render_candidate_prompt(query())

        assert prompt.index('"ADAM"') < prompt.index('"RAFAL"')
        assert prompt.index('"GRUDZIADZ"') < prompt.index('"LUBLIN"')

    def test_no_exclusion_paragraph_without_exclusions(self):
        assert "Do not consider" not in render_candidate_prompt(query())

    def test_clean_answer(self):
        assert clean_answer(' "Elbląg." ') == "ELBLAG"
        assert clean_answer("zielona  góra") == "ZIELONA GORA"
        assert clean_answer(" Unknown. ") is None
        assert clean_answer("unknown") is None
        assert clean_answer("") is None
        assert clean_answer(None) is None
