"""Exceptions raised by eg_core.

Ordinary negative outcomes (a residue check that fails, a proof that does not
verify) are reported through return values. Exceptions are reserved for
contract violations at construction time, configuration mistakes and the
fatal discrete-log overflow.
"""

from __future__ import annotations

from typing import Any


class ElectionGuardError(Exception):
    """Base class for every error raised by this package."""


class InvalidInputError(ElectionGuardError, ValueError):
    """Malformed input detected before any cryptographic work."""


class ConfigurationError(ElectionGuardError):
    pass


class DiscreteLogError(ElectionGuardError, ArithmeticError):
    """The discrete-log search ran past its bound."""

    def __init__(self, element: Any, max_exponent: int):
        super().__init__(
            f"discrete log of {element} not found within bound {max_exponent}"
        )
        self.element = element
        self.max_exponent = max_exponent


class ProofVerificationError(ElectionGuardError):
    """Raised for an invalid proof in strict mode, and by decryption that needs a valid share."""

    def __init__(self, validation: Any):
        super().__init__(str(validation))
        self.validation = validation


class EncryptionError(ElectionGuardError):
    pass
