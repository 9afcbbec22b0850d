"""Deterministic nonce sequences derived from a seed."""

from __future__ import annotations

from typing import Any, List, Union, overload

from .errors import InvalidInputError
from .group import ElementModQ
from .hash import hash_elems


class Nonces:
    """An indexable, stateless sequence of nonces.

    The effective seed is the given seed, or ``hash_elems(seed, *headers)``
    when headers are supplied. Element i is ``hash_elems(seed, i)``, so the
    same index always yields the same nonce.

    Slicing needs an explicit stop, since the sequence is unbounded.
    """

    def __init__(self, seed: ElementModQ, *headers: Any):
        if headers:
            self.seed = hash_elems(seed, *headers)
        else:
            self.seed = seed

    @overload
    def __getitem__(self, index: int) -> ElementModQ:
        ...

    @overload
    def __getitem__(self, index: slice) -> List[ElementModQ]:
        ...

    def __getitem__(
        self, index: Union[int, slice]
    ) -> Union[ElementModQ, List[ElementModQ]]:
        if isinstance(index, slice):
            if index.stop is None:
                raise InvalidInputError("slicing nonces requires an explicit stop")
            start = index.start or 0
            step = index.step or 1
            if start < 0 or index.stop < 0 or step < 1:
                raise InvalidInputError("nonce slices must be non-negative and ascending")
            return [self.get(i) for i in range(start, index.stop, step)]
        return self.get(index)

    def get(self, index: int) -> ElementModQ:
        if index < 0:
            raise InvalidInputError(f"nonce index must be non-negative, got {index}")
        return hash_elems(self.seed, index)

    def get_with_headers(self, index: int, *headers: Any) -> ElementModQ:
        """Nonce at ``index`` additionally bound to ``headers``."""
        if index < 0:
            raise InvalidInputError(f"nonce index must be non-negative, got {index}")
        return hash_elems(self.seed, index, *headers)
