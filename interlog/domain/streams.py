"""Stream names: concrete streams, category streams and the all-stream.

A stream name is one of three variants. Concrete streams address the events
of a single aggregate, category streams address every stream whose name
falls into the category's lexicographic range, and the all-stream addresses
the whole log.

The textual form follows the usual event store conventions:

- ``"$all"`` is the all-stream
- ``"$ce-<category>"`` is a category stream
- any other name starting with ``$`` is reserved and rejected
- everything else is a concrete stream
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidStreamSelectorError

VIRTUAL_STREAM_PREFIX = "$"
ALL_STREAM_NAME = "$all"
CATEGORY_STREAM_PREFIX = "$ce-"


class ConcreteStream(BaseModel):
    """A single, named stream."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["concrete"] = "concrete"
    name: str = Field(min_length=1)

    def __str__(self) -> str:
        return self.name


class CategoryStream(BaseModel):
    """All streams whose name falls into the range of a category."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["category"] = "category"
    category: str = Field(min_length=1)

    def __str__(self) -> str:
        return f"{CATEGORY_STREAM_PREFIX}{self.category}"


class AllStream(BaseModel):
    """The whole log, in global order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"

    def __str__(self) -> str:
        return ALL_STREAM_NAME


StreamSelector = ConcreteStream | CategoryStream | AllStream


class StreamName:
    """Factory helpers for the stream selector variants.

    Examples:
        >>> StreamName.parse("order-1")
        ConcreteStream(kind='concrete', name='order-1')
        >>> StreamName.parse("$ce-order")
        CategoryStream(kind='category', category='order')
        >>> StreamName.parse("$all")
        AllStream(kind='all')
    """

    @staticmethod
    def concrete(name: str) -> ConcreteStream:
        return ConcreteStream(name=name)

    @staticmethod
    def for_category(category: str) -> CategoryStream:
        return CategoryStream(category=category)

    @staticmethod
    def all() -> AllStream:
        return AllStream()

    @staticmethod
    def parse(value: "str | StreamSelector") -> StreamSelector:
        """Turn a textual stream name into its selector variant.

        Args:
            value: A stream name, or an already parsed selector which is
                returned unchanged.

        Returns:
            The matching selector variant.

        Raises:
            InvalidStreamSelectorError: If the name is empty or uses an
                unsupported virtual form.
        """
        if isinstance(value, (ConcreteStream, CategoryStream, AllStream)):
            return value
        if not isinstance(value, str) or not value:
            raise InvalidStreamSelectorError(f"Invalid stream name {value!r}")
        if not value.startswith(VIRTUAL_STREAM_PREFIX):
            return ConcreteStream(name=value)
        if value == ALL_STREAM_NAME:
            return AllStream()
        if value.startswith(CATEGORY_STREAM_PREFIX) and len(value) > len(
            CATEGORY_STREAM_PREFIX
        ):
            return CategoryStream(category=value[len(CATEGORY_STREAM_PREFIX) :])
        raise InvalidStreamSelectorError(f'Unsupported virtual stream name "{value}"')
