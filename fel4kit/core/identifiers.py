"""
Closed identifier sets for fel4 builds.

Targets, platforms and build profiles are fixed enumerations whose member
values are the canonical tokens accepted from configuration text and the
command line. Parsing is an exact, case-sensitive match against those tokens.

Example:
    >>> SupportedTarget.parse("armv7-sel4-fel4")
    <SupportedTarget.ARMV7_SEL4_FEL4: 'armv7-sel4-fel4'>
    >>> str(SupportedPlatform.TX1)
    'tx1'
    >>> BuildProfile.all_names()
    ['debug', 'release']
"""

from enum import Enum
from typing import List, TypeVar

from fel4kit.core.exceptions import UnknownIdentifierError

_T = TypeVar("_T", bound="_Identifier")


class _Identifier(Enum):
    """Shared behaviour for the identifier enumerations."""

    @classmethod
    def kind(cls) -> str:
        """Human-readable name of the identifier family."""
        return FAMILY_NAMES[cls]

    @property
    def full_name(self) -> str:
        """Canonical string for this variant."""
        return self.value

    @classmethod
    def all_variants(cls: type[_T]) -> List[_T]:
        """All variants in declaration order."""
        return list(cls)

    @classmethod
    def all_names(cls) -> List[str]:
        """Canonical names of all variants, in the same order as all_variants()."""
        return [variant.full_name for variant in cls.all_variants()]

    @classmethod
    def parse(cls: type[_T], text: object) -> _T:
        """
        Parse a canonical name into a variant.

        Args:
            text: Canonical name (exact spelling, no surrounding whitespace)

        Returns:
            Matching variant

        Raises:
            UnknownIdentifierError: If no variant has this canonical name
        """
        if isinstance(text, str):
            for variant in cls:
                if variant.value == text:
                    return variant
        raise UnknownIdentifierError(cls.kind(), text, cls.all_names())

    def __str__(self) -> str:
        return self.full_name


class SupportedTarget(_Identifier):
    """CPU architecture and base platform a build compiles for."""

    X86_64_SEL4_FEL4 = "x86_64-sel4-fel4"
    ARMV7_SEL4_FEL4 = "armv7-sel4-fel4"
    AARCH64_SEL4_FEL4 = "aarch64-sel4-fel4"


class SupportedPlatform(_Identifier):
    """Hardware board (or board family) a build runs on."""

    PC99 = "pc99"
    SABRE = "sabre"
    TX1 = "tx1"


class BuildProfile(_Identifier):
    """Compilation mode."""

    DEBUG = "debug"
    RELEASE = "release"


# Board each target is normally built for. Informational only: resolution does
# not reject other pairings.
DEFAULT_PLATFORMS = {
    SupportedTarget.X86_64_SEL4_FEL4: SupportedPlatform.PC99,
    SupportedTarget.ARMV7_SEL4_FEL4: SupportedPlatform.SABRE,
    SupportedTarget.AARCH64_SEL4_FEL4: SupportedPlatform.TX1,
}

# Name of each identifier family, as used in error messages.
FAMILY_NAMES = {
    SupportedTarget: "target",
    SupportedPlatform: "platform",
    BuildProfile: "build profile",
}
