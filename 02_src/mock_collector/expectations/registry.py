"""ExpectationRegistry implementation."""

from ..models import NO_DESCRIPTION, Expectation, SpanPredicate, always_true


class ExpectationRegistry:
    """Ordered, append-only collection of declared expectations."""

    def __init__(self):
        self._expectations: list[Expectation] = []

    def add(
        self,
        scope_name: str,
        predicate: SpanPredicate | None = None,
        description: str | None = None,
    ) -> Expectation:
        """Append an expectation. Duplicates are kept."""
        expectation = Expectation(
            scope_name=scope_name,
            predicate=predicate if predicate is not None else always_true,
            description=description if description is not None else NO_DESCRIPTION,
        )
        self._expectations.append(expectation)
        return expectation

    def snapshot(self) -> list[Expectation]:
        """Get a copy of all expectations in insertion order."""
        return self._expectations.copy()

    def __len__(self) -> int:
        return len(self._expectations)
