"""Shared result type for proof verification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Dict, List

from .config import get_settings
from .errors import ProofVerificationError

log = logging.getLogger(__name__)


class ProofUsage(Enum):
    Unknown = "Unknown"
    SecretValue = "Prove knowledge of secret value"
    SelectionLimit = "Prove value within selection's limit"
    SelectionValue = "Prove selection's value (0 or 1)"
    DecryptionShare = "Prove decryption share was computed with the guardian's key"


@dataclass(frozen=True)
class ProofValidation:
    """Itemized outcome of checking one proof.

    Attributes
    - name: proof kind, used in messages
    - checks: check name -> passed; every check is evaluated, none are skipped
    """

    name: str
    checks: Dict[str, bool] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return all(self.checks.values())

    @property
    def failures(self) -> List[str]:
        return [name for name, ok in self.checks.items() if not ok]

    def raise_for_failure(self) -> None:
        if not self:
            raise ProofVerificationError(self)

    def __str__(self) -> str:
        if self:
            return f"{self.name}: valid"
        return f"{self.name}: failed {', '.join(self.failures)}"


def report(validation: ProofValidation) -> ProofValidation:
    """Log a failed validation; in strict mode also raise it."""
    if not validation:
        log.warning("invalid %s: failed checks %s", validation.name, validation.failures)
        if get_settings().strict_proofs:
            validation.raise_for_failure()
    return validation
