"""Prompt templates and response parsing for the language oracles.

Everything sent to the model is rendered here, with sorted keys and
sorted lists wherever order carries no meaning, so the same search
state always produces the same prompt.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Optional

from ...domain.errors import MalformedOracleResponse
from ...domain.models import AssociationMap, CandidateQuery, EntityKind
from ..normalization.rule_based import fold_ascii

UNKNOWN_ANSWER = "UNKNOWN"

EXTRACT_ENTITIES = (
    "List separately every person name and every city name mentioned in the "
    "note below. Answer with a JSON object of the form "
    '{"names": ["NAME1", "NAME2"], "cities": ["CITY1", "CITY2"]}.'
)

EXTRACT_PRIOR_LOCATIONS = (
    "List every city where, according to the note below, {target} has been "
    "before. Answer with a JSON object of the form "
    '{{"cities": ["CITY1", "CITY2"]}}.\n'
    "Note:\n{note}"
)

NORMALIZE_PERSON = (
    "Normalize the given Polish first name to the nominative case. "
    "Replace Polish letters (ĄĆĘŁŃÓŚŹŻ) with their plain Latin counterparts "
    "and allow for typos in the input. Answer with the first name only, in "
    "capital letters, without any whitespace.\n{raw}"
)

NORMALIZE_PLACE = (
    "Normalize the given city name to the nominative case, in capital "
    "letters, without Polish letters. Answer with the city name only.\n{raw}"
)

CHOOSE_CANDIDATE = """Here is a note:
{note}

Persons with the cities they were seen in (format {{person: [cities]}}):
{people}

Cities with the persons seen in them (format {{city: [persons]}}):
{places}

Cities where {target} was spotted:
{candidates}
{exclusions}
Based on the data above, in which city is {target} right now? Answer with a \
JSON object {{"city": "CITY"}} using the city name in capital letters, or \
{{"city": "{unknown}"}} if it cannot be determined."""


def format_associations(associations: AssociationMap) -> tuple[str, str]:
    """Render both adjacency maps as stable, indented JSON."""
    people, places = associations.as_sorted_dicts()
    return (
        json.dumps(people, indent=2, ensure_ascii=False),
        json.dumps(places, indent=2, ensure_ascii=False),
    )


def format_exclusions(excluded: Iterable[str]) -> str:
    ordered = sorted(excluded)
    if not ordered:
        return ""
    return (
        "\nDo not consider the following cities as the current location: "
        + ", ".join(ordered)
        + "\n"
    )


def render_candidate_prompt(query: CandidateQuery) -> str:
    people, places = format_associations(query.associations)
    return CHOOSE_CANDIDATE.format(
        note=query.note,
        people=people,
        places=places,
        target=query.target_name or "the person",
        candidates=json.dumps(list(query.candidates), indent=2, ensure_ascii=False),
        exclusions=format_exclusions(query.excluded),
        unknown=UNKNOWN_ANSWER,
    )


def render_normalize_prompt(raw: str, kind: EntityKind) -> str:
    template = NORMALIZE_PERSON if kind is EntityKind.PERSON else NORMALIZE_PLACE
    return template.format(raw=raw)


def parse_json_object(raw: str, oracle: str) -> Mapping[str, Any]:
    """Decode a model answer that must be a JSON object.

    Raises:
        MalformedOracleResponse: If the answer is not a JSON object.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedOracleResponse(
            "Answer is not valid JSON", cause=e, oracle=oracle, raw=str(raw)[:200]
        )
    if not isinstance(data, dict):
        raise MalformedOracleResponse(
            "Answer is not a JSON object", oracle=oracle, raw=str(raw)[:200]
        )
    return data


def string_list(data: Mapping[str, Any], key: str) -> list[str]:
    """Return the non-empty strings stored under key, ignoring anything else."""
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def clean_answer(raw: Optional[str]) -> Optional[str]:
    """Fold a city answer to a canonical place id; None if blank or unknown."""
    if raw is None:
        return None
    answer = fold_ascii(raw)
    if not answer or answer == UNKNOWN_ANSWER:
        return None
    return answer
