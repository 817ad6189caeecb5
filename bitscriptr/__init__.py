"""Bitcoin spending policy builder"""

from .common import Network
from .compiler import Compilation, MiniscriptCompiler, PolicyCompiler
from .config import (
    AbsoluteTimelock,
    HashAlgorithm,
    Hashlock,
    Inheritance,
    MultiSig,
    RelativeTimelock,
    SimpleEscrow,
    SingleSig,
    Threshold,
    Vault,
)
from .descriptor import DescriptorResult, OutputType, assemble_descriptor, generate_descriptor
from .entries import ComposedPolicy, ConfiguredPolicy, PolicyEntry, TextPolicy, update_validation
from .key import KeyClassification, classify_key, is_key
from .policy import CompositionKind, KeyMap, compose, extract, reinsert, serialize
from .registry import PolicyRegistry
from .settings import Settings
from .validation import Verdict, validate

__version__ = '0.1.0'

__all__ = [
    "Network",
    "Compilation",
    "MiniscriptCompiler",
    "PolicyCompiler",
    "AbsoluteTimelock",
    "HashAlgorithm",
    "Hashlock",
    "Inheritance",
    "MultiSig",
    "RelativeTimelock",
    "SimpleEscrow",
    "SingleSig",
    "Threshold",
    "Vault",
    "DescriptorResult",
    "OutputType",
    "assemble_descriptor",
    "generate_descriptor",
    "ComposedPolicy",
    "ConfiguredPolicy",
    "PolicyEntry",
    "TextPolicy",
    "update_validation",
    "KeyClassification",
    "classify_key",
    "is_key",
    "CompositionKind",
    "KeyMap",
    "compose",
    "extract",
    "reinsert",
    "serialize",
    "PolicyRegistry",
    "Settings",
    "Verdict",
    "validate",
]
