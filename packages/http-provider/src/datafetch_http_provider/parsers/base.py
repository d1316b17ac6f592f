"""Response parser capability.

A parser turns one raw response body into a Dataframe (columns and rows; the
provider assigns the name). Implementations are plain classes that satisfy
the protocol. Nothing needs to inherit from it, so a new format only needs a
class plus one ``register_parser`` call.

Contract for every implementation:
  - locate the array at ``path`` inside the payload, raising
    PathNotFoundError when it is missing or not an array;
  - with declared columns, project each element onto exactly those columns
    and coerce cells to the declared type, keeping the raw value when a cell
    does not coerce;
  - without declared columns, infer them deterministically from the payload;
  - preserve source order for rows and declared/first-seen order for columns.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from datafetch_shared.dataframe import Column, Dataframe


@runtime_checkable
class ResponseParser(Protocol):
    def parse(self, raw_body: str | bytes, path: str, columns: Sequence[Column]) -> Dataframe:
        """Parse ``raw_body`` into an unnamed Dataframe."""
        ...
