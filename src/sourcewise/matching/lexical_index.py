"""Weighted multi-field substring index over the supplier catalog."""

from collections.abc import Iterable, Mapping

from ..models import Supplier


def _field_values(supplier: Supplier, field: str) -> list[str]:
    """Searchable text values of a supplier field."""
    if field == "location":
        return [supplier.location.text()] if supplier.location else []
    value = getattr(supplier, field, None)
    if value is None:
        return []
    if isinstance(value, list | tuple | set):
        return [str(v) for v in value]
    return [str(value)]


class LexicalIndex:
    """Case-insensitive substring search with per-field weights.

    Each field contributes its weight at most once per query, however many
    of its values contain the query. The raw score is ``1 - matched weight``
    so lower is better; suppliers matching no field are left out.
    """

    def __init__(self, suppliers: Iterable[Supplier], fields: Mapping[str, float]):
        self._fields = dict(fields)
        self._entries: list[tuple[Supplier, dict[str, list[str]]]] = [
            (
                supplier,
                {
                    field: [v.lower() for v in _field_values(supplier, field)]
                    for field in self._fields
                },
            )
            for supplier in suppliers
        ]

    def __len__(self) -> int:
        return len(self._entries)

    def search(self, query: str) -> list[tuple[Supplier, float]]:
        """Find suppliers whose indexed fields contain the query.

        Args:
            query: Free text; surrounding whitespace is ignored.

        Returns:
            (supplier, raw_score) pairs, best (lowest) score first, ties by
            supplier id. An empty query returns no results.
        """
        needle = query.strip().lower()
        if not needle:
            return []

        results = []
        for supplier, values in self._entries:
            matched_weight = sum(
                weight
                for field, weight in self._fields.items()
                if any(needle in value for value in values[field])
            )
            if matched_weight > 0:
                results.append((supplier, 1 - matched_weight))

        results.sort(key=lambda item: (item[1], item[0].id))
        return results
