"""Reconcile declared expectations against arriving spans."""

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterable, Sequence

from ..errors import InvalidTimeoutError
from ..logging_config import get_logger
from ..models import CollectedSpan, Expectation

logger = get_logger(__name__)


@dataclass
class MatchOutcome:
    """Partition of what happened during one verification."""

    missing: list[Expectation]
    met: list[CollectedSpan] = field(default_factory=list)
    extra: list[CollectedSpan] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        return not self.missing


def find_match(missing: Sequence[Expectation], collected: CollectedSpan) -> int | None:
    """
    Index of the expectation satisfied by collected, or None.

    Scans from the last declared expectation to the first, so a specific
    expectation layered on top of an earlier catch-all gets the span first.
    """
    for i in range(len(missing) - 1, -1, -1):
        expectation = missing[i]
        if expectation.scope_name != collected.scope_name:
            continue
        if not expectation.predicate(collected.span):
            continue
        return i
    return None


async def reconcile(
    expectations: Sequence[Expectation],
    spans: AsyncIterable[CollectedSpan],
) -> MatchOutcome:
    """
    Consume spans until every expectation is met or the source times out.

    Each span satisfies at most one expectation. Spans left in the source
    after the last expectation is met are never read. A timeout (or an
    invalid timeout) ends matching and returns the unsatisfied outcome;
    any other error propagates.
    """
    outcome = MatchOutcome(missing=list(expectations))

    try:
        async for collected in spans:
            index = find_match(outcome.missing, collected)
            if index is None:
                outcome.extra.append(collected)
                continue

            outcome.met.append(collected)
            del outcome.missing[index]

            if not outcome.missing:
                break
    except (asyncio.TimeoutError, InvalidTimeoutError) as e:
        logger.debug("Matching stopped: %s", str(e) or "timeout")

    return outcome


def format_report(outcome: MatchOutcome) -> str:
    """Render missing, matched and additional entries as one message."""
    lines = [""]

    lines.append("Missing expectations:")
    for expectation in outcome.missing:
        lines.append(f'  - "{expectation.description}"')

    lines.append("Entries meeting expectations:")
    for collected in outcome.met:
        lines.append(f'    "{collected}"')

    lines.append("Additional entries:")
    for collected in outcome.extra:
        lines.append(f'  + "{collected}"')

    return "\n".join(lines) + "\n"
