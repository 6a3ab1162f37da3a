#!/usr/bin/env python3
"""
Phoneme Inventory
=================
Consonant and vowel sets, custom symbol groups, sampling weights and
positional restrictions for a constructed language.

Symbols are opaque strings and may be multi-character (``θ``, ``ts``, ``aː``).
Declaration order is preserved everywhere because sequential enumeration walks
phonemes in the order they were declared.

Usage:
    from lexiforge.phonemes import PhonemeInventory, PhonemeClass, Position

    inv = PhonemeInventory(consonants=['p', 't', 'k'], vowels=['a', 'i'])
    inv.set_weight('p', 5.0)
    inv.allow_positions('k', [Position.WORD_FINAL])
    inv.sample(PhonemeClass.CONSONANT, Position.WORD_INITIAL)
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Union

from .entropy import RandomSource, get_rng
from .errors import (
    ConfigurationError,
    NoCandidatesError,
    ReservedSymbolError,
    UnknownGroupError,
    UnknownPhonemeError,
)
from .ipa import is_ipa_consonant, is_ipa_vowel


# =============================================================================
# Tags
# =============================================================================

class PhonemeClass(Enum):
    """Major class of a phoneme."""
    CONSONANT = 'consonant'
    VOWEL = 'vowel'


class Position(Enum):
    """Positional tags a phoneme can be restricted to."""
    WORD_INITIAL = 'word_initial'
    WORD_MEDIAL = 'word_medial'
    WORD_FINAL = 'word_final'
    SYLLABLE_INITIAL = 'syllable_initial'
    SYLLABLE_FINAL = 'syllable_final'


RESERVED_GROUPS = frozenset({'C', 'V'})

PositionSpec = Union[Position, str, Iterable[Union[Position, str]], None]


def as_phoneme_class(kind: Union[PhonemeClass, str]) -> PhonemeClass:
    if isinstance(kind, PhonemeClass):
        return kind
    try:
        return PhonemeClass(str(kind).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown phoneme class: {kind!r}") from None


def as_positions(position: PositionSpec) -> Optional[FrozenSet[Position]]:
    """Normalize a single tag, a tag name or a collection of them."""
    if position is None:
        return None
    if isinstance(position, Position):
        return frozenset({position})
    if isinstance(position, str):
        return frozenset({Position(position)})
    return frozenset(p if isinstance(p, Position) else Position(p) for p in position)


# =============================================================================
# Inventory
# =============================================================================

class PhonemeInventory:
    """
    Phoneme inventory with weighted, position-aware sampling.

    Args:
        consonants: Consonant symbols in declaration order
        vowels: Vowel symbols in declaration order
        weights: Optional per-symbol sampling weights (default 1.0)
        positions: Optional per-symbol allowed positions
        groups: Optional custom groups keyed by a single-character id
    """

    def __init__(
        self,
        consonants: Iterable[str] = (),
        vowels: Iterable[str] = (),
        weights: Optional[Mapping[str, float]] = None,
        positions: Optional[Mapping[str, Iterable]] = None,
        groups: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self._consonants: List[str] = []
        self._vowels: List[str] = []
        self.custom_groups: Dict[str, List[str]] = {}
        self.weights: Dict[str, float] = {}
        self.positional_allow: Dict[str, Set[Position]] = {}

        for symbol in consonants:
            self.add_consonant(symbol)
        for symbol in vowels:
            self.add_vowel(symbol)
        if weights:
            self.set_weights(weights)
        for symbol, allowed in (positions or {}).items():
            self.allow_positions(symbol, allowed)
        for group_id, members in (groups or {}).items():
            self.add_group(group_id, members)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    @property
    def consonants(self) -> List[str]:
        return list(self._consonants)

    @property
    def vowels(self) -> List[str]:
        return list(self._vowels)

    def add_consonant(self, symbol: str, positions: PositionSpec = None) -> None:
        self._register(symbol, self._consonants, self._vowels, positions)

    def add_vowel(self, symbol: str, positions: PositionSpec = None) -> None:
        self._register(symbol, self._vowels, self._consonants, positions)

    def _register(self, symbol: str, target: List[str], other: List[str], positions: PositionSpec) -> None:
        if not symbol:
            raise ConfigurationError("Phoneme symbol cannot be empty")
        if symbol in other:
            raise ConfigurationError(f"'{symbol}' is already registered in the other class")
        if symbol not in target:
            target.append(symbol)
        if positions is not None:
            self.allow_positions(symbol, positions)

    def set_weight(self, symbol: str, weight: float) -> None:
        if weight < 0:
            raise ConfigurationError(f"Weight for '{symbol}' must be non-negative, got {weight}")
        self.weights[symbol] = float(weight)

    def set_weights(self, weights: Mapping[str, float]) -> None:
        for symbol, weight in weights.items():
            self.set_weight(symbol, weight)

    def weight_of(self, symbol: str) -> float:
        return self.weights.get(symbol, 1.0)

    def allow_positions(self, symbol: str, positions: PositionSpec) -> None:
        """Restrict ``symbol`` to the given positions."""
        allowed = as_positions(positions)
        if not allowed:
            raise ConfigurationError(f"Position restriction for '{symbol}' is empty")
        self.positional_allow[symbol] = set(allowed)

    def add_group(self, group_id: str, members: Sequence[str]) -> None:
        """Declare a custom group of symbols under a single-character id."""
        if group_id in RESERVED_GROUPS:
            raise ReservedSymbolError(group_id)
        if len(group_id) != 1:
            raise ConfigurationError(f"Group id must be a single character, got {group_id!r}")
        if not members:
            raise ConfigurationError(f"Group '{group_id}' has no members")
        for member in members:
            if self.classify(member) is None:
                raise UnknownPhonemeError(member, f"member of group '{group_id}'")
        ordered: List[str] = []
        for member in members:
            if member not in ordered:
                ordered.append(member)
        self.custom_groups[group_id] = ordered

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def is_vowel(self, symbol: str) -> bool:
        """Registered vowels first, then the IPA fallback table."""
        if symbol in self._vowels:
            return True
        if symbol in self._consonants:
            return False
        return is_ipa_vowel(symbol)

    def is_consonant(self, symbol: str) -> bool:
        if symbol in self._consonants:
            return True
        if symbol in self._vowels:
            return False
        return is_ipa_consonant(symbol)

    def classify(self, symbol: str) -> Optional[PhonemeClass]:
        if self.is_vowel(symbol):
            return PhonemeClass.VOWEL
        if self.is_consonant(symbol):
            return PhonemeClass.CONSONANT
        return None

    def has_group(self, group_id: str) -> bool:
        return group_id in RESERVED_GROUPS or group_id in self.custom_groups

    def group_members(self, group_id: str) -> List[str]:
        if group_id == 'C':
            return self.consonants
        if group_id == 'V':
            return self.vowels
        if group_id not in self.custom_groups:
            raise UnknownGroupError(group_id)
        return list(self.custom_groups[group_id])

    def is_vowel_like_group(self, group_id: str) -> bool:
        """A group is vowel-like iff every member classifies as a vowel."""
        return all(self.is_vowel(member) for member in self.group_members(group_id))

    @property
    def all_symbols(self) -> List[str]:
        """Every symbol the inventory can emit, in declaration order."""
        symbols = self._consonants + self._vowels
        for members in self.custom_groups.values():
            symbols.extend(m for m in members if m not in symbols)
        return symbols

    # -------------------------------------------------------------------------
    # Sampling
    # -------------------------------------------------------------------------

    def is_allowed(self, symbol: str, position: PositionSpec) -> bool:
        tags = as_positions(position)
        if tags is None or symbol not in self.positional_allow:
            return True
        return bool(self.positional_allow[symbol] & tags)

    def filter(self, symbols: Iterable[str], position: PositionSpec = None) -> List[str]:
        """Symbols allowed at ``position`` with a positive weight, order kept."""
        tags = as_positions(position)
        return [s for s in symbols if self.weight_of(s) > 0 and self.is_allowed(s, tags)]

    def candidates(self, kind: Union[PhonemeClass, str], position: PositionSpec = None) -> List[str]:
        kind = as_phoneme_class(kind)
        pool = self._vowels if kind is PhonemeClass.VOWEL else self._consonants
        return self.filter(pool, position)

    def sample(
        self,
        kind: Union[PhonemeClass, str],
        position: PositionSpec = None,
        rng: Optional[RandomSource] = None,
        exclude: Iterable[str] = (),
        bias: Optional[Mapping[str, float]] = None,
    ) -> str:
        """
        Draw a consonant or vowel allowed at ``position``.

        Args:
            kind: PhonemeClass.CONSONANT or PhonemeClass.VOWEL
            position: Tag or collection of tags; a symbol qualifies when any
                tag is in its allow set
            rng: Random source (defaults to the process-wide one)
            exclude: Symbols to avoid as long as something else remains
            bias: Optional weight multipliers

        Raises:
            NoCandidatesError: if nothing survives the class/position filter
        """
        kind = as_phoneme_class(kind)
        return self._draw(self.candidates(kind, position), kind.value, position, rng, exclude, bias)

    def sample_group(
        self,
        group_id: str,
        position: PositionSpec = None,
        rng: Optional[RandomSource] = None,
        exclude: Iterable[str] = (),
        bias: Optional[Mapping[str, float]] = None,
    ) -> str:
        """Same contract as :meth:`sample`, restricted to a group's members."""
        members = self.group_members(group_id)
        return self._draw(self.filter(members, position), f"group '{group_id}'", position, rng, exclude, bias)

    def _draw(self, pool, label, position, rng, exclude, bias) -> str:
        if not pool:
            raise NoCandidatesError(label, position)
        excluded = set(exclude)
        if excluded:
            remaining = [s for s in pool if s not in excluded]
            if remaining:
                pool = remaining

        items = [(s, self.weight_of(s)) for s in pool]
        if bias:
            biased = [(s, w * bias.get(s, 1.0)) for s, w in items]
            if sum(w for _, w in biased if w > 0) > 0:
                items = biased

        return (rng or get_rng()).weighted_choice(items)

    def __repr__(self) -> str:
        return (f"PhonemeInventory(consonants={self._consonants!r}, vowels={self._vowels!r}, "
                f"groups={self.custom_groups!r})")


__all__ = [
    "PhonemeClass",
    "Position",
    "PhonemeInventory",
    "RESERVED_GROUPS",
    "as_positions",
    "as_phoneme_class",
]
