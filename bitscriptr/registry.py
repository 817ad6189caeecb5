"""
In-memory list of policy entries.

The registry only ever replaces whole entries; every read returns an
immutable snapshot.
"""

import logging
import threading

from typing import List, Optional, Tuple, Union

from .compiler import MiniscriptCompiler, PolicyCompiler
from .config import CONDITION_TYPES, PATTERN_TYPES, PolicyConfig, default_name
from .descriptor import DescriptorResult, OutputType, generate_descriptor
from .entries import (
    ComposedPolicy,
    ConfiguredPolicy,
    PolicyEntry,
    TextPolicy,
    generate_unique_id,
    update_validation,
)
from .errors import ConfigurationError
from .policy.composition import CompositionKind, check_arity
from .settings import Settings


CUSTOM_POLICY_NAME = "Custom Policy"


class PolicyRegistry:
    def __init__(self, compiler: Optional[PolicyCompiler] = None, settings: Optional[Settings] = None):
        self.compiler = compiler or MiniscriptCompiler()
        self.settings = settings or Settings()
        self._entries: List[PolicyEntry] = []
        self._lock = threading.Lock()

    def entries(self) -> Tuple[PolicyEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        return len(self.entries())

    def get(self, entry_id: str) -> PolicyEntry:
        for entry in self.entries():
            if entry.id == entry_id:
                return entry
        raise KeyError(entry_id)

    def selected(self) -> Tuple[PolicyEntry, ...]:
        return tuple(entry for entry in self.entries() if entry.selected)

    def _validated(self, entry: PolicyEntry) -> PolicyEntry:
        return update_validation(entry, self.compiler, self.settings)

    def _append(self, entry: PolicyEntry) -> PolicyEntry:
        with self._lock:
            self._entries.append(entry)
        logging.info("added policy %s (%s): valid=%s", entry.id, entry.name, entry.is_valid)
        return entry

    def _replace(self, entry: PolicyEntry) -> PolicyEntry:
        with self._lock:
            for i, current in enumerate(self._entries):
                if current.id == entry.id:
                    self._entries[i] = entry
                    return entry
        raise KeyError(entry.id)

    def add_configured(self, config: PolicyConfig, name: Optional[str] = None) -> PolicyEntry:
        """Add a condition or pattern configuration; its expression is generated and validated."""
        if not isinstance(config, CONDITION_TYPES + PATTERN_TYPES):
            raise ConfigurationError(f"Unknown configuration type: {type(config).__name__}")
        entry = ConfiguredPolicy(
            id=generate_unique_id(config.type.value),
            name=name or default_name(config),
            config=config,
        )
        return self._append(self._validated(entry))

    def add_text(self, text: str) -> PolicyEntry:
        """Add a policy typed in as text, named "Custom Policy N"."""
        policy_string = (text or "").strip()
        if not policy_string:
            raise ConfigurationError("Policy string cannot be empty.")

        count = sum(1 for entry in self.entries() if entry.name.startswith(CUSTOM_POLICY_NAME))
        entry = TextPolicy(
            id=generate_unique_id("text"),
            name=f"{CUSTOM_POLICY_NAME} {count + 1}",
            policy_string=policy_string,
        )
        return self._append(self._validated(entry))

    def toggle_selection(self, entry_id: str) -> PolicyEntry:
        entry = self.get(entry_id)
        logging.debug("policy %s selected=%s", entry_id, not entry.selected)
        return self._replace(entry.with_selection(not entry.selected))

    def compose(self, kind: Union[CompositionKind, str], threshold: Optional[int] = None) -> PolicyEntry:
        """Compose the selected entries, in list order, into a new entry.

        The constituents are deselected afterwards. Raises CompositionError
        when the number of selected entries does not fit `kind`.
        """
        kind = CompositionKind.parse(kind)
        with self._lock:
            constituents = tuple(entry for entry in self._entries if entry.selected)
            check_arity(kind, len(constituents), threshold)

            composed = self._validated(ComposedPolicy(
                id=generate_unique_id("composed"),
                name=f"Composed ({kind})",
                kind=kind,
                constituents=tuple(c.with_selection(False) for c in constituents),
                threshold=threshold if kind == CompositionKind.THRESHOLD else None,
            ))

            composed_ids = {c.id for c in constituents}
            self._entries = [
                entry.with_selection(False) if entry.id in composed_ids else entry
                for entry in self._entries
            ]
            self._entries.append(composed)

        logging.info("composed %s from %s: valid=%s", composed.id, sorted(composed_ids), composed.is_valid)
        return composed

    def revalidate(self, entry_id: str) -> PolicyEntry:
        return self._replace(self._validated(self.get(entry_id)))

    def remove(self, entry_id: str) -> PolicyEntry:
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    del self._entries[i]
                    logging.info("removed policy %s", entry_id)
                    return entry
        raise KeyError(entry_id)

    def generate_descriptor(self, entry_id: str, output_type: Union[OutputType, str] = OutputType.WSH) -> DescriptorResult:
        """Generate the descriptor of an entry, from a fresh validation of its expression."""
        entry = self._validated(self.get(entry_id))
        if not entry.is_valid or not entry.policy_string:
            return DescriptorResult(error=(
                f"Selected policy is invalid or has no generated policy string: "
                f"{entry.validation_error or 'Unknown error'}"
            ))
        return generate_descriptor(entry.policy_string, output_type, self.compiler, self.settings)
