"""
Policy compilers
================

A policy compiler turns a policy expression, whose keys are opaque
placeholders, into its compiled canonical form and tells whether that form
is sound. Compilers raise PolicyMalformedError for text that does not
follow the policy grammar.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Compilation:
    sound: bool
    canonical_form: str
    # Why the policy is not sound, for diagnostics only
    reason: Optional[str] = None


class PolicyCompiler(Protocol):
    def compile(self, policy: str) -> Compilation:
        ...


from .miniscript import MiniscriptCompiler  # noqa: E402
