"""Translation of stream selectors into document query constraints."""

from ..domain.exceptions import InvalidStreamSelectorError
from ..domain.streams import AllStream, CategoryStream, ConcreteStream, StreamName, StreamSelector
from .documents import DocumentQuery, FieldFilter

STREAM_FIELD = "stream"
SEQUENCE_NUMBER_FIELD = "sequenceNumber"

# Highest single-byte character; closes the category range.
CATEGORY_UPPER_BOUND = chr(127)


def resolve_stream_selector(
    stream: "str | StreamSelector",
    minimum_sequence_number: int = 0,
) -> list[FieldFilter]:
    """Build the constraints selecting the events of a stream.

    Concrete streams match their name exactly. Category streams match every
    stream name in the half-open range ``(category, category + "\\x7f"]``,
    which covers all names that extend the category with ASCII characters.
    The all-stream has no constraint.

    Args:
        stream: Stream name or selector.
        minimum_sequence_number: If greater than zero, only events with at
            least this sequence number are selected.

    Returns:
        The constraints to apply to the ordered event query.

    Raises:
        InvalidStreamSelectorError: For unsupported virtual stream names.
        ValueError: If ``minimum_sequence_number`` is negative.

    Examples:
        >>> resolve_stream_selector("order-1")
        [FieldFilter(field='stream', op='==', value='order-1')]
        >>> resolve_stream_selector("$all", minimum_sequence_number=10)
        [FieldFilter(field='sequenceNumber', op='>=', value=10)]
    """
    if minimum_sequence_number < 0:
        raise ValueError("minimum_sequence_number must be >= 0")

    selector = StreamName.parse(stream)
    filters: list[FieldFilter]
    if isinstance(selector, ConcreteStream):
        filters = [FieldFilter(field=STREAM_FIELD, op="==", value=selector.name)]
    elif isinstance(selector, CategoryStream):
        filters = [
            FieldFilter(field=STREAM_FIELD, op=">", value=selector.category),
            FieldFilter(
                field=STREAM_FIELD,
                op="<=",
                value=selector.category + CATEGORY_UPPER_BOUND,
            ),
        ]
    elif isinstance(selector, AllStream):
        filters = []
    else:
        raise InvalidStreamSelectorError(f'Unsupported stream selector "{selector}"')

    if minimum_sequence_number > 0:
        filters.append(
            FieldFilter(field=SEQUENCE_NUMBER_FIELD, op=">=", value=minimum_sequence_number)
        )
    return filters


def build_stream_query(
    collection: str,
    stream: "str | StreamSelector",
    minimum_sequence_number: int = 0,
) -> DocumentQuery:
    """Build the query reading a stream from ``collection`` in global order."""
    return DocumentQuery(
        collection=collection,
        filters=tuple(resolve_stream_selector(stream, minimum_sequence_number)),
        order_by=SEQUENCE_NUMBER_FIELD,
    )
