"""Projection of stored documents into output rows."""

from __future__ import annotations

from typing import Sequence

from IndexQueryTool.core.errors import ConfigurationError
from IndexQueryTool.core.models import ProjectedRow, StoredDocument
from IndexQueryTool.renderers.base import NULL_VALUE

ID_FIELD = "<id>"
SCORE_FIELD = "<score>"


def project_document(
    document: StoredDocument,
    score: float,
    *,
    selection: Sequence[str] = (),
    show_id: bool = False,
    show_score: bool = False,
    sort_fields: bool = False,
    tabular: bool = False,
) -> ProjectedRow:
    """Build the output row for one document.

    Entries come in this order: ``<id>``, ``<score>``, then fields. Without a
    selection every stored value is emitted in the document's natural field
    order, or ordered by ``(name, value)`` when ``sort_fields`` is set. With a
    selection each requested field emits all its values, or a single ``null``
    placeholder when it has none.

    Args:
        document: Stored values of the document.
        score: Relevance score of the hit.
        selection: Requested field names in output order; empty for all.
        show_id: Prepend the document number.
        show_score: Prepend the score.
        sort_fields: Order unselected output by field name and value.
        tabular: Reject fields holding several values.

    Returns:
        Ordered ``(name, value)`` pairs.

    Raises:
        ConfigurationError: If ``tabular`` is set and a selected field holds
            several values.
    """
    row = ProjectedRow()
    if show_id:
        row.add(ID_FIELD, str(document.docnum))
    if show_score:
        row.add(SCORE_FIELD, str(score))

    if not selection:
        pairs = [(name, value) for name, values in document.fields.items() for value in values]
        if sort_fields:
            pairs.sort()
        for name, value in pairs:
            row.add(name, value)
        return row

    for name in selection:
        values = list(document.fields.get(name) or ())
        if not values:
            row.add(name, NULL_VALUE)
            continue
        if tabular and len(values) > 1:
            raise ConfigurationError(f"Multivalued field '{name}' not allowed with tabular format")
        for value in values:
            row.add(name, value)
    return row
