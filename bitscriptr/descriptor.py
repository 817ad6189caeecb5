"""
Wrapping of compiled policies into output descriptors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

from .compiler import PolicyCompiler
from .errors import BitscriptrError, UnsupportedOutputTypeError
from .policy.substitution import reinsert
from .settings import Settings
from .validation import validate


class OutputType(Enum):
    """
    The kind of output descriptor to produce
    """
    WSH = "wsh"        #: Native segwit v0 script hash (P2WSH)
    SH_WSH = "sh-wsh"  #: Nested segwit v0 script hash (P2SH-P2WSH), not supported
    TR = "tr"          #: Taproot, not supported

    def __str__(self) -> str:
        return self.value


SUPPORTED_OUTPUT_TYPES = (OutputType.WSH,)

INPUT_CHARSET = (
    "0123456789()[],'/*abcdefgh@:$%{}IJKLMNOPQRSTUVW"
    'XYZ&+-.;<=>?!^_|~ijklmnopqrstuvwxyzABCDEFGH`#"\\ '
)
CHECKSUM_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"


def polymod(c: int, val: int) -> int:
    c0 = c >> 35
    c = ((c & 0x7FFFFFFFF) << 5) ^ val
    if c0 & 1:
        c ^= 0xF5DEE51989
    if c0 & 2:
        c ^= 0xA9FDCA3312
    if c0 & 4:
        c ^= 0x1BAB10E32D
    if c0 & 8:
        c ^= 0x3706B1677A
    if c0 & 16:
        c ^= 0x644D626FFD
    return c


def descriptor_checksum(desc: str) -> str:
    """Calculate the BIP-380 checksum of a descriptor string"""
    c = 1
    cls = 0
    clscount = 0
    for ch in desc:
        pos = INPUT_CHARSET.find(ch)
        if pos == -1:
            raise BitscriptrError("Invalid character '%s' in the descriptor" % ch)
        c = polymod(c, pos & 31)
        cls = cls * 3 + (pos >> 5)
        clscount += 1
        if clscount == 3:
            c = polymod(c, cls)
            cls = 0
            clscount = 0
    if clscount > 0:
        c = polymod(c, cls)
    for j in range(0, 8):
        c = polymod(c, 0)
    c ^= 1

    return "".join(CHECKSUM_CHARSET[(c >> (5 * (7 - j))) & 31] for j in range(0, 8))


def add_checksum(desc: str) -> str:
    """Add the checksum to a descriptor string, replacing any existing one"""
    desc = desc.split("#")[0]
    return desc + "#" + descriptor_checksum(desc)


def supported_output_type(output_type: Union[OutputType, str]) -> OutputType:
    """Resolve an output type given by enum or value, raising for anything that cannot be wrapped."""
    if not isinstance(output_type, OutputType):
        try:
            output_type = OutputType(output_type)
        except ValueError:
            raise UnsupportedOutputTypeError(f"Unsupported output type: {output_type}")
    if output_type not in SUPPORTED_OUTPUT_TYPES:
        raise UnsupportedOutputTypeError(f"Unsupported output type: {output_type}")
    return output_type


def assemble_descriptor(compiled: str, key_map: Mapping[str, str],
                        output_type: Union[OutputType, str] = OutputType.WSH,
                        checksum: bool = False) -> str:
    """Put the original keys back into a compiled policy and wrap it in a descriptor."""
    supported_output_type(output_type)

    desc = f"wsh({reinsert(compiled, key_map)})"
    return add_checksum(desc) if checksum else desc


@dataclass(frozen=True)
class DescriptorResult:
    descriptor: Optional[str] = None
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.descriptor is not None


def generate_descriptor(expr: Optional[str], output_type: Union[OutputType, str] = OutputType.WSH,
                        compiler: Optional[PolicyCompiler] = None,
                        settings: Optional[Settings] = None) -> DescriptorResult:
    """Validate a policy expression and produce its descriptor.

    Never raises; failures are reported in DescriptorResult.error.
    """
    settings = settings or Settings()
    try:
        output_type = supported_output_type(output_type)
    except UnsupportedOutputTypeError as e:
        return DescriptorResult(error=e.message)

    verdict = validate(expr, compiler, settings)
    if not verdict.valid:
        return DescriptorResult(error=verdict.error)

    try:
        desc = assemble_descriptor(verdict.compiled, verdict.key_map, output_type, settings.descriptor_checksum)
    except BitscriptrError as e:
        return DescriptorResult(error=e.message)
    return DescriptorResult(descriptor=desc)
