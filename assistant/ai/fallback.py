"""Deterministic fallback answers when the model path is unavailable.

An ordered table of FallbackRule(name, predicate, answer) is evaluated
against the lower-cased question; the first matching rule answers. If no
rule matches, a generic suggestions answer is returned. respond() is total:
it never raises and never returns an empty string.
"""

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class FallbackRule:
    """One canned answer and the predicate that selects it."""

    name: str
    predicate: Predicate
    answer: str


def keywords(*phrases: str) -> Predicate:
    """Predicate matching any phrase as whole words in lower-cased text."""
    pattern = re.compile(
        r"\b(?:" + "|".join(re.escape(p) for p in phrases) + r")\b"
    )

    def _match(text: str) -> bool:
        return pattern.search(text) is not None

    return _match


# ---------------------------------------------------------------------------
# Canned answers
# ---------------------------------------------------------------------------

NAVIGATION_ANSWER = (
    "The dashboard has three main areas: the search box at the top, the "
    "filter panel on the side for narrowing by topic, file type, program or "
    "author, and the statistics panel with an overview of the catalog. "
    "Click any resource card to open its details."
)

SEARCH_ANSWER = (
    "To find resources, type keywords into the search box. It matches titles, "
    "descriptions, topics and authors. Combine it with the filters to narrow "
    "results by topic, file type or program."
)

STATISTICS_ANSWER = (
    "The statistics panel shows how many resources the catalog holds and how "
    "they break down by topic, file type and program. The numbers update as "
    "you apply filters."
)

ADD_RESOURCE_ANSWER = (
    "To add a resource, use the add/upload option on the dashboard and fill "
    "in its title, topics, file type, programs and authors. If you don't see "
    "that option, ask an administrator to add it for you."
)

GENERIC_ANSWER = (
    "I can help you find resources, explain the filters, describe the catalog "
    "statistics, or walk you through adding a resource. Try asking, for "
    "example, \"How do I search for PDFs?\" or \"How many resources are there?\""
)

DEFAULT_RULES: tuple[FallbackRule, ...] = (
    FallbackRule(
        name="navigation",
        predicate=keywords(
            "navigate", "navigation", "menu", "where is", "where do i",
            "get around", "how does this work", "how do i use",
        ),
        answer=NAVIGATION_ANSWER,
    ),
    FallbackRule(
        name="search",
        predicate=keywords(
            "search", "find", "look for", "looking for", "filter", "filters",
        ),
        answer=SEARCH_ANSWER,
    ),
    FallbackRule(
        name="statistics",
        predicate=keywords(
            "statistics", "stats", "how many", "count", "number of", "total",
        ),
        answer=STATISTICS_ANSWER,
    ),
    FallbackRule(
        name="add_resource",
        predicate=keywords("add", "upload", "submit", "contribute", "create"),
        answer=ADD_RESOURCE_ANSWER,
    ),
)


class FallbackResponder:
    """First-match-wins rule table with a generic default.

    Args:
        rules: Ordered rules. Defaults to DEFAULT_RULES.
        default_answer: Returned when no rule matches. Must be non-empty.
    """

    def __init__(
        self,
        rules: Sequence[FallbackRule] = DEFAULT_RULES,
        default_answer: str = GENERIC_ANSWER,
    ) -> None:
        if not default_answer.strip():
            raise ValueError("default_answer must be non-empty")
        self._rules = tuple(rule for rule in rules if rule.answer.strip())
        self._default_answer = default_answer

    def match(self, clean_text: str) -> FallbackRule | None:
        """Returns the first rule whose predicate accepts the text."""
        text = (clean_text or "").lower()
        for rule in self._rules:
            try:
                if rule.predicate(text):
                    return rule
            except Exception:
                logger.exception("Fallback rule %r failed; skipping", rule.name)
        return None

    def respond(self, clean_text: str) -> str:
        rule = self.match(clean_text)
        if rule is None:
            return self._default_answer
        logger.debug("Fallback rule matched: %s", rule.name)
        return rule.answer
