"""
All the exceptions raised while building, validating and wrapping spending policies.
"""


class BitscriptrError(ValueError):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ConfigurationError(BitscriptrError):
    """A condition or pattern configuration is incomplete or out of range"""


class KeyRejectedError(BitscriptrError):
    """A key-material string is not usable in a policy"""


class CompositionError(BitscriptrError):
    """Policies cannot be combined with the requested composition"""


class PolicyMalformedError(BitscriptrError):
    """A policy expression does not follow the policy grammar"""


class UnsoundPolicyError(BitscriptrError):
    """The policy compiler rejected the structure of an expression"""


class UnsupportedOutputTypeError(BitscriptrError):
    """No wrapping rule exists for the requested output descriptor type"""
