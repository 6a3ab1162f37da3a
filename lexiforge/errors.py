"""
Lexiforge Errors
================
Exception hierarchy for configuration-time and generation-time failures.

Configuration errors are raised while a grammar is being assembled (inventory,
patterns, builder) and never during generation. Generation errors indicate a
grammar that cannot produce what was asked of it.
"""


class LexiforgeError(Exception):
    """Base class for all lexiforge errors."""


# =============================================================================
# Configuration-time
# =============================================================================

class ConfigurationError(LexiforgeError, ValueError):
    """Invalid generator configuration."""


class ReservedSymbolError(ConfigurationError):
    """A custom group tried to claim one of the reserved ids ``C`` or ``V``."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"'{symbol}' is reserved and cannot be used as a custom group id")


class UndefinedGroupError(ConfigurationError):
    """A syllable pattern references a group id that was never declared."""

    def __init__(self, group_id: str, pattern: str = ""):
        self.group_id = group_id
        self.pattern = pattern
        where = f" in pattern '{pattern}'" if pattern else ""
        super().__init__(f"Undefined custom group '{group_id}'{where}")


class InvalidThematicVowelError(ConfigurationError):
    """The thematic vowel is not classified as a vowel by the inventory."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Thematic vowel '{symbol}' is not a vowel in this inventory")


class UnknownPhonemeError(ConfigurationError):
    """A symbol could not be classified as a consonant or a vowel."""

    def __init__(self, symbol: str, context: str = ""):
        self.symbol = symbol
        where = f" ({context})" if context else ""
        super().__init__(f"Unknown phoneme '{symbol}'{where}")


# =============================================================================
# Generation-time
# =============================================================================

class GenerationError(LexiforgeError, RuntimeError):
    """A configured grammar failed to produce a word."""


class NoCandidatesError(GenerationError):
    """Class and position filters left nothing to sample from."""

    def __init__(self, kind: str, position=None):
        self.kind = kind
        self.position = position
        where = f" at {position}" if position else ""
        super().__init__(f"No {kind} candidates{where}")


class UnknownGroupError(GenerationError):
    """Sampling was requested from a group that does not exist."""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"Unknown group '{group_id}'")


class UnsatisfiableConstraintError(GenerationError):
    """A syllable's local constraints could not be met within the retry ceiling."""

    def __init__(self, pattern: str, attempts: int):
        self.pattern = pattern
        self.attempts = attempts
        super().__init__(
            f"Syllable pattern '{pattern}' could not satisfy its constraints "
            f"after {attempts} attempts"
        )


class GenerationExhaustedError(GenerationError):
    """No valid word was found within the global retry ceiling."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No valid word found after {attempts} attempts")


class SequenceExhaustedError(GenerationError):
    """Sequential enumeration has no more words."""

    def __init__(self, produced: int):
        self.produced = produced
        super().__init__(f"Sequential enumeration exhausted after {produced} words")


__all__ = [
    "LexiforgeError",
    "ConfigurationError",
    "ReservedSymbolError",
    "UndefinedGroupError",
    "InvalidThematicVowelError",
    "UnknownPhonemeError",
    "GenerationError",
    "NoCandidatesError",
    "UnknownGroupError",
    "UnsatisfiableConstraintError",
    "GenerationExhaustedError",
    "SequenceExhaustedError",
]
