"""
Policy expressions
==================

Serialization of configurations into the policy grammar, composition of
several policies, key placeholder substitution and parsing.
"""

from .composition import CompositionKind, compose
from .parsing import policy_from_str
from .serializer import serialize, try_serialize
from .substitution import KeyMap, extract, reinsert
