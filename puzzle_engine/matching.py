"""Requirement matching: pure predicates over player input.

Step requirements (all three must hold for a step to complete):
  room     required_room equals the current room name, case-insensitive;
           vacuous when unset
  items    every required item is a substring of some inventory entry;
           vacuous when empty
  actions  every word of at least one required phrase appears as a word of
           the player action; vacuous when empty

Discovery is looser:
  item     the acquired item and a required item contain each other in
           either direction ("rusty key" ⊇ "key", and "keyboard" ⊇ "key");
           a blank item never matches
  action   same word rule as above

Hidden-exit unlock phrases are word-tokenised; every token must appear as a
word of the action, either itself or through a synonym (examine ← look, search,
inspect; use ← put; pull ← move).

A word matches a token when it equals it or is its plural ("bookcases" for
"bookcase"), so "or" never matches inside "door".

Every fuzzy comparison goes through a PhraseMatcher, so the heuristic can be
swapped without touching the state machine.
"""

from __future__ import annotations

import re
from typing import Mapping, Protocol, Sequence

from puzzle_engine.models import StepRequirements

DEFAULT_EXIT_SYNONYMS: dict[str, list[str]] = {
    "examine": ["look", "search", "inspect"],
    "use": ["put"],
    "pull": ["move"],
}

_TOKEN_RE = re.compile(r"[a-z0-9']+")


def normalize(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(text.lower().split())


def tokenize(phrase: str) -> list[str]:
    return _TOKEN_RE.findall(phrase.lower())


def word_present(token: str, words: Sequence[str]) -> bool:
    """token is one of words, or one of them is its plural."""
    return any(word in (token, token + "s", token + "es") for word in words)


# ---------------------------------------------------------------------------
# Matcher protocol and implementations
# ---------------------------------------------------------------------------


class PhraseMatcher(Protocol):
    def matches(self, requirement_phrase: str, player_text: str) -> bool: ...


class ContainsMatcher:
    """Player text contains the requirement phrase (case-insensitive)."""

    def matches(self, requirement_phrase: str, player_text: str) -> bool:
        return normalize(requirement_phrase) in normalize(player_text)


class MutualContainsMatcher:
    """Either string contains the other (case-insensitive)."""

    def matches(self, requirement_phrase: str, player_text: str) -> bool:
        a = normalize(requirement_phrase)
        b = normalize(player_text)
        if not a or not b:
            return False
        return a in b or b in a


class ActionPhraseMatcher:
    """Every word of the phrase appears as a word of the action.

    "unlock door" matches "unlock the door" as well as "unlock door now".
    """

    def matches(self, requirement_phrase: str, player_text: str) -> bool:
        tokens = tokenize(requirement_phrase)
        words = tokenize(player_text)
        return bool(tokens) and all(word_present(token, words) for token in tokens)


class UnlockPhraseMatcher:
    """Every word of the unlock phrase is present, literally or as a synonym.

    "examine bookcase" matches "look at the old bookcase": "bookcase" is a word
    of the action and "examine" is satisfied by "look".
    """

    def __init__(self, synonyms: Mapping[str, Sequence[str]] | None = None) -> None:
        source = DEFAULT_EXIT_SYNONYMS if synonyms is None else synonyms
        self._synonyms = {k.lower(): [s.lower() for s in v] for k, v in source.items()}

    def matches(self, requirement_phrase: str, player_text: str) -> bool:
        tokens = tokenize(requirement_phrase)
        if not tokens:
            return False
        words = tokenize(player_text)
        return all(self._token_satisfied(token, words) for token in tokens)

    def _token_satisfied(self, token: str, words: list[str]) -> bool:
        if word_present(token, words):
            return True
        return any(word_present(syn, words) for syn in self._synonyms.get(token, ()))


_contains = ContainsMatcher()
_mutual = MutualContainsMatcher()
_action = ActionPhraseMatcher()


# ---------------------------------------------------------------------------
# Step requirement predicates
# ---------------------------------------------------------------------------


def room_satisfied(requirements: StepRequirements, room_name: str) -> bool:
    if not requirements.required_room:
        return True
    return room_name.lower() == requirements.required_room.lower()


def items_satisfied(
    requirements: StepRequirements,
    inventory: Sequence[str],
    matcher: PhraseMatcher = _contains,
) -> bool:
    if not requirements.required_items:
        return True
    return all(
        any(matcher.matches(required, held) for held in inventory)
        for required in requirements.required_items
    )


def actions_satisfied(
    requirements: StepRequirements,
    action: str,
    matcher: PhraseMatcher = _action,
) -> bool:
    if not requirements.required_actions:
        return True
    return any(matcher.matches(phrase, action) for phrase in requirements.required_actions)


def step_satisfied(
    requirements: StepRequirements,
    room_name: str,
    inventory: Sequence[str],
    action: str,
) -> bool:
    """All three predicates hold at once."""
    return (
        room_satisfied(requirements, room_name)
        and items_satisfied(requirements, inventory)
        and actions_satisfied(requirements, action)
    )


# ---------------------------------------------------------------------------
# Discovery predicates
# ---------------------------------------------------------------------------


def item_discovers(
    requirements: StepRequirements,
    item_name: str,
    matcher: PhraseMatcher = _mutual,
) -> bool:
    return any(matcher.matches(required, item_name) for required in requirements.required_items)


def action_discovers(
    requirements: StepRequirements,
    action: str,
    matcher: PhraseMatcher = _action,
) -> bool:
    return any(matcher.matches(phrase, action) for phrase in requirements.required_actions)
