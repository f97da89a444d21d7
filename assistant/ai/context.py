"""Prompt context assembly — catalog state as a compact briefing.

Projects the live CatalogSnapshot and CurrentUser into the system-level
instruction sent with every upstream call. Built fresh per request and never
cached: the catalog may change between two questions.

Consumed by:
- AssistantOrchestrator — calls build() right before invoking the model

Tier 2 service module: imports only from schemas (Tier 1).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from assistant.schemas import CatalogSnapshot, CurrentUser

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# List limits — keep the briefing small regardless of catalog size.
# File types are few by nature and are listed in full.
# ---------------------------------------------------------------------------
_MAX_TOPICS = 10
_MAX_PROGRAMS_USED = 5
_MAX_AUTHORS = 5

SYSTEM_INSTRUCTIONS = (
    "You are the help assistant of a resource discovery dashboard. "
    "Answer questions about the resources in the catalog, how to find them "
    "with search and filters, and how to use the dashboard. "
    "Be concise and friendly. If the catalog summary below does not contain "
    "the answer, say so and suggest using the search box or filters."
)

EMPTY_CATALOG_SENTENCE = "No resources are currently available in the catalog."
_ANONYMOUS_USER_SENTENCE = "The current user is not signed in."


def _unique(values: Iterable[str], limit: int | None = None) -> list[str]:
    """Deduplicates in first-occurrence order, skipping blanks."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        item = value.strip()
        if not item or item in seen:
            continue
        seen.add(item)
        result.append(item)
        if limit is not None and len(result) >= limit:
            break
    return result


class ContextBuilder:
    """Builds the system instruction for one upstream call.

    Args:
        instructions: Fixed preamble placed before the catalog summary.
    """

    def __init__(self, instructions: str = SYSTEM_INSTRUCTIONS) -> None:
        self._instructions = instructions

    def build(
        self,
        snapshot: CatalogSnapshot | None,
        user: CurrentUser | None,
    ) -> str:
        """Assembles preamble, user line and catalog summary.

        Args:
            snapshot: Current catalog view. None is treated as empty.
            user: The signed-in user, if any.

        Returns:
            The full system instruction text.
        """
        snapshot = snapshot or CatalogSnapshot()
        lines = [self._instructions, "", self._user_line(user)]
        lines.extend(self._catalog_lines(snapshot))
        context_text = "\n".join(lines)

        logger.debug(
            "Prompt context built: resources=%d chars=%d",
            len(snapshot.resources),
            len(context_text),
        )
        return context_text

    # -------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------

    def _user_line(self, user: CurrentUser | None) -> str:
        if user is None:
            return _ANONYMOUS_USER_SENTENCE
        if user.role:
            return f"The current user is {user.name} ({user.role})."
        return f"The current user is {user.name}."

    def _catalog_lines(self, snapshot: CatalogSnapshot) -> list[str]:
        lines: list[str] = []

        program_names = _unique(p.name for p in snapshot.programs)
        if program_names:
            lines.append(f"Programs: {', '.join(program_names)}.")

        resources = snapshot.resources
        if not resources:
            lines.append(EMPTY_CATALOG_SENTENCE)
            return lines

        lines.append(f"The catalog contains {len(resources)} resources.")

        topics = _unique(
            (t for r in resources for t in r.topics), _MAX_TOPICS,
        )
        file_types = _unique(r.file_type for r in resources)
        programs_used = _unique(
            (p for r in resources for p in r.programs_used), _MAX_PROGRAMS_USED,
        )
        authors = _unique(
            (a for r in resources for a in r.authors), _MAX_AUTHORS,
        )

        if topics:
            lines.append(f"Topics include: {', '.join(topics)}.")
        if file_types:
            lines.append(f"File types: {', '.join(file_types)}.")
        if programs_used:
            lines.append(f"Programs used by resources: {', '.join(programs_used)}.")
        if authors:
            lines.append(f"Authors include: {', '.join(authors)}.")

        return lines
