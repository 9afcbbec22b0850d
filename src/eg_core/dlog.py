"""Bounded discrete logarithm for small exponents.

Plaintexts of ElGamal ciphertexts live in the exponent, so decryption ends
with a search for k such that g^k equals the decrypted element. Vote totals
are small, so a lazily grown table of g^0 .. g^max is enough.

Decryption code owns its `DiscreteLog` and passes it in. Calls that pass
none fall back to `default_discrete_log()`, one process-wide instance
bounded by the `dlog_max` setting.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from gmpy2 import mpz

from .config import get_settings
from .constants import get_parameters
from .errors import ConfigurationError, DiscreteLogError
from .group import ElementModP, g_mod_p

log = logging.getLogger(__name__)


class DiscreteLog:
    """Cache of ``base^k -> k`` for ``0 <= k <= max_exponent``.

    Instances are owned by the caller (typically whoever runs a
    decryption) and may be shared between threads; the table only grows,
    under a lock.
    """

    def __init__(
        self, max_exponent: Optional[int] = None, base: Optional[ElementModP] = None
    ):
        if max_exponent is None:
            max_exponent = get_settings().dlog_max
        if max_exponent <= 0:
            raise ConfigurationError(
                f"discrete log bound must be positive, got {max_exponent}"
            )
        self.max_exponent = max_exponent
        self.base = base if base is not None else g_mod_p()
        self._table: Dict[int, int] = {1: 0}
        self._last_element = mpz(1)
        self._last_exponent = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._table)

    def discrete_log(self, element: ElementModP) -> int:
        """Return k with base^k == element.

        Raises DiscreteLogError when k would exceed ``max_exponent``.
        """
        key = element.elem
        found = self._table.get(key)
        if found is not None:
            return found
        with self._lock:
            return self._extend_to(key, element)

    def _extend_to(self, key: int, element: ElementModP) -> int:
        found = self._table.get(key)
        if found is not None:
            return found
        p = mpz(get_parameters().large_prime)
        base = mpz(self.base.elem)
        current = self._last_element
        exponent = self._last_exponent
        while exponent < self.max_exponent:
            current = (current * base) % p
            exponent += 1
            self._table[int(current)] = exponent
            if current == key:
                break
        self._last_element = current
        self._last_exponent = exponent
        if current != key:
            log.error("discrete log search exhausted at exponent %d", exponent)
            raise DiscreteLogError(element, self.max_exponent)
        log.debug("discrete log table extended to %d entries", len(self._table))
        return exponent


_default: Optional[DiscreteLog] = None
_default_lock = threading.Lock()


def default_discrete_log() -> DiscreteLog:
    """Shared cache used when a caller does not supply one."""
    global _default
    with _default_lock:
        if _default is None:
            _default = DiscreteLog()
        return _default
