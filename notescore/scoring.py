"""
Relevance scoring of a single note against a search query.

Responsibilities:
- Run the title cascade (exact, prefix, whole word, fuzzy fallback).
- Score query tokens against the title and the path title.
- Add the identifier bonus and apply the hidden-note penalty.
- Emit a score breakdown on request.

Non-Responsibilities:
- No query tokenization (tokens arrive pre-split).
- No candidate enumeration, sorting or pagination.
- No logging or I/O.

Invariant:
Given identical inputs, this module must always return the same score.
The fuzzy budget lives for exactly one scoring call.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .distance import edit_distance
from .normalize import normalize, split_chunks, word_match
from .schema import (
    NORMALIZED_QUERY_KEYS,
    PATH_TITLE_KEYS,
    InvalidRecordError,
    first_present,
    validate_note,
    validate_query,
)
from .weights import DEFAULT_WEIGHTS, ScoreWeights


@dataclass(frozen=True)
class ScoreParams:
    """
    Query side of a scoring call.

    query is expected to be lowercased and normalized_query to equal
    normalize(query). Neither is checked here; use from_query to build
    a consistent instance from raw user input.
    """

    query: str
    tokens: Sequence[str] = ()
    normalized_query: str = ""
    enable_fuzzy_matching: bool = True

    def __post_init__(self):
        # Stored as a tuple so instances stay hashable
        object.__setattr__(self, "tokens", tuple(self.tokens))

    @classmethod
    def from_query(
        cls,
        query: str,
        tokens: Optional[Sequence[str]] = None,
        enable_fuzzy_matching: bool = True,
    ) -> "ScoreParams":
        lowered = query.lower()
        if tokens is None:
            tokens = lowered.split()
        return cls(
            query=lowered,
            tokens=tuple(tokens),
            normalized_query=normalize(lowered),
            enable_fuzzy_matching=enable_fuzzy_matching,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreParams":
        errors = validate_query(data)
        if errors:
            raise InvalidRecordError(errors)

        enable_fuzzy = data.get("enable_fuzzy_matching", True)
        nq_key = first_present(data, NORMALIZED_QUERY_KEYS)
        if nq_key is None:
            return cls.from_query(data["query"], data.get("tokens"), enable_fuzzy)
        return cls(
            query=data["query"],
            tokens=tuple(data.get("tokens", ())),
            normalized_query=data[nq_key],
            enable_fuzzy_matching=enable_fuzzy,
        )


@dataclass(frozen=True)
class NoteInput:
    id: str
    title: str
    path_title: str = ""
    hidden: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoteInput":
        errors = validate_note(data)
        if errors:
            raise InvalidRecordError(errors)

        path_key = first_present(data, PATH_TITLE_KEYS)
        return cls(
            id=data["id"],
            title=data["title"],
            path_title=data[path_key] if path_key else "",
            hidden=data.get("hidden", False),
        )


class FuzzyBudget:
    """Running total of fuzzy score handed out within one scoring call."""

    __slots__ = ("cap", "spent")

    def __init__(self, cap: float):
        self.cap = cap
        self.spent = 0.0

    @property
    def exhausted(self) -> bool:
        return self.spent >= self.cap

    def spend(self, amount: float) -> float:
        self.spent += amount
        return amount


@dataclass(frozen=True)
class ScoreBreakdown:
    note_id: str
    identifier: float
    title: float
    title_tokens: float
    path_tokens: float
    fuzzy_spent: float
    hidden: bool
    total: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "note_id": self.note_id,
            "identifier": self.identifier,
            "title": self.title,
            "title_tokens": self.title_tokens,
            "path_tokens": self.path_tokens,
            "fuzzy_spent": self.fuzzy_spent,
            "hidden": self.hidden,
            "total": self.total,
        }


def fuzzy_title_score(
    title: str,
    query: str,
    budget: FuzzyBudget,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    if budget.exhausted:
        return 0.0
    if len(query) < weights.min_fuzzy_token_length:
        return 0.0

    dist = edit_distance(title, query, weights.max_edit_distance)
    if dist > weights.max_edit_distance:
        return 0.0

    max_len = max(len(title), len(query))
    if dist / max_len > weights.title_fuzzy_max_ratio:
        return 0.0

    similarity = 1.0 - dist / max_len
    base = weights.title_fuzzy_match * similarity * weights.title_fuzzy_damping
    return budget.spend(min(base, weights.max_fuzzy_title_score))


def title_score(
    normalized_title: str,
    normalized_query: str,
    budget: FuzzyBudget,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    enable_fuzzy: bool = True,
) -> float:
    """
    Score the title cascade. The first matching tier wins; the fuzzy
    fallback runs only when exact, prefix and word match all failed.
    """
    if normalized_title == normalized_query:
        return weights.title_exact_match
    if normalized_title.startswith(normalized_query):
        return weights.title_prefix_match
    if word_match(normalized_title, normalized_query):
        return weights.title_word_match
    if not enable_fuzzy:
        return 0.0
    return fuzzy_title_score(normalized_title, normalized_query, budget, weights)


def token_score(
    tokens: Sequence[str],
    text: str,
    factor: float,
    budget: FuzzyBudget,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    enable_fuzzy: bool = True,
) -> float:
    """
    Score every (chunk, token) pair of a field.

    The field is normalized and split on single spaces. For each pair
    only the first matching tier counts: exact, prefix, contains, then
    fuzzy. Weights scale with the raw token length and the field factor.
    Repeated tokens or chunks each contribute; nothing is deduplicated.

    Fuzzy matches are charged to the shared budget, so a field scored
    later in the same call may find it already exhausted.
    """
    chunks = split_chunks(normalize(text))
    prepared = [(normalize(token), len(token)) for token in tokens]
    max_dist = weights.max_edit_distance

    score = 0.0
    for chunk in chunks:
        for norm_token, token_len in prepared:
            if chunk == norm_token:
                score += weights.token_exact_match * token_len * factor
            elif chunk.startswith(norm_token):
                score += weights.token_prefix_match * token_len * factor
            elif norm_token in chunk:
                score += weights.token_contains_match * token_len * factor
            else:
                if not enable_fuzzy or budget.exhausted:
                    continue
                if len(norm_token) < weights.min_fuzzy_token_length:
                    continue

                dist = edit_distance(chunk, norm_token, max_dist)
                if dist <= max_dist:
                    weight = weights.token_fuzzy_match * (1.0 - dist / max_dist)
                    capped_len = min(token_len, weights.max_fuzzy_token_length)
                    fuzzy = min(weight * capped_len * factor, weights.max_fuzzy_score_per_token)
                    score += budget.spend(fuzzy)

    return score


def explain_score(
    params: ScoreParams,
    note: NoteInput,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> ScoreBreakdown:
    budget = FuzzyBudget(weights.max_total_fuzzy_score)
    fuzzy = params.enable_fuzzy_matching

    # query is trusted to be lowercased by the caller
    identifier = weights.note_id_exact_match if note.id.lower() == params.query else 0.0

    title = title_score(normalize(note.title), params.normalized_query, budget, weights, fuzzy)
    title_tokens = token_score(params.tokens, note.title, weights.title_factor, budget, weights, fuzzy)
    path_tokens = token_score(params.tokens, note.path_title, weights.path_factor, budget, weights, fuzzy)

    total = 0.0
    total += identifier
    total += title
    total += title_tokens
    total += path_tokens

    if note.hidden:
        total /= weights.hidden_note_penalty

    return ScoreBreakdown(
        note_id=note.id,
        identifier=identifier,
        title=title,
        title_tokens=title_tokens,
        path_tokens=path_tokens,
        fuzzy_spent=budget.spent,
        hidden=note.hidden,
        total=total,
    )


def compute_score(
    params: ScoreParams,
    note: NoteInput,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """Relevance of note for the query; higher is better, comparable only within one query."""
    return explain_score(params, note, weights).total


def score_notes(
    params: ScoreParams,
    notes: Iterable[NoteInput],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> List[float]:
    """Score notes in input order. Each note gets its own fuzzy budget."""
    return [compute_score(params, note, weights) for note in notes]
