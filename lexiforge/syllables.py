#!/usr/bin/env python3
"""
Syllable Patterns
=================
Compiles a short pattern string such as ``"CCVC"`` into phoneme draws.

Pattern alphabet:
    C          any consonant
    V          any vowel
    <letter>   a custom group declared on the inventory

A run of two or more ``C`` is a cluster request. Clusters are opt-in: only
literal clusters from ``allowed_onset_clusters`` / ``allowed_coda_clusters``
are ever emitted, and a request with no realizable whitelisted cluster quietly
degrades to a single consonant. That is a policy, not a failure.

After each draw the pattern may double a consonant (gemination), double a vowel
(lengthening) or append a second, different vowel to a vowel run (hiatus).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from .entropy import RandomSource, get_rng
from .errors import ConfigurationError, UndefinedGroupError, UnsatisfiableConstraintError
from .phonemes import PhonemeClass, PhonemeInventory, Position
from .romanization import longest_match_segment
from .settings import get_int_setting

logger = logging.getLogger(__name__)

DEFAULT_SYLLABLE_ATTEMPTS = 1000


# =============================================================================
# Compiled Symbols
# =============================================================================

class SyllablePosition(Enum):
    """Where a syllable sits inside its word."""
    INITIAL = 'initial'
    MEDIAL = 'medial'
    FINAL = 'final'


class SymbolKind(Enum):
    CONSONANT = 'C'
    VOWEL = 'V'
    GROUP = 'group'


@dataclass(frozen=True)
class Symbol:
    """One pattern letter, resolved once at compile time."""
    kind: SymbolKind
    group_id: Optional[str] = None

    @classmethod
    def parse(cls, char: str) -> 'Symbol':
        if char == 'C':
            return cls(SymbolKind.CONSONANT)
        if char == 'V':
            return cls(SymbolKind.VOWEL)
        if char.isspace():
            raise ConfigurationError("Syllable patterns cannot contain whitespace")
        return cls(SymbolKind.GROUP, char)

    @property
    def char(self) -> str:
        return self.group_id if self.kind is SymbolKind.GROUP else self.kind.value


@dataclass(frozen=True)
class Slot:
    """A single draw inside a syllable. ``size > 1`` marks a cluster request."""
    symbol: Symbol
    size: int
    index: int
    count: int
    ends_run: bool

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.count - 1


def compile_pattern(pattern: str) -> Tuple[Slot, ...]:
    """Partition a pattern into runs and flatten them into slots."""
    if not pattern:
        raise ConfigurationError("Syllable pattern cannot be empty")
    runs: List[Tuple[Symbol, int]] = []
    for char in pattern:
        symbol = Symbol.parse(char)
        if runs and runs[-1][0] == symbol:
            runs[-1] = (symbol, runs[-1][1] + 1)
        else:
            runs.append((symbol, 1))

    shapes: List[Tuple[Symbol, int, bool]] = []
    for symbol, length in runs:
        if symbol.kind is SymbolKind.CONSONANT and length > 1:
            shapes.append((symbol, length, True))
        else:
            shapes.extend((symbol, 1, i == length - 1) for i in range(length))

    count = len(shapes)
    return tuple(Slot(symbol, size, i, count, ends_run)
                 for i, (symbol, size, ends_run) in enumerate(shapes))


def slot_positions(slot: Slot, starts_word: bool, ends_word: bool) -> FrozenSet[Position]:
    """Positional tags for a slot given the syllable's place in the word."""
    tags = set()
    word_edge = False
    if slot.is_first:
        tags.add(Position.SYLLABLE_INITIAL)
        if starts_word:
            tags.add(Position.WORD_INITIAL)
            word_edge = True
    if slot.is_last:
        tags.add(Position.SYLLABLE_FINAL)
        if ends_word:
            tags.add(Position.WORD_FINAL)
            word_edge = True
    if not word_edge:
        tags.add(Position.WORD_MEDIAL)
    return frozenset(tags)


# =============================================================================
# Results
# =============================================================================

@dataclass
class SyllableResult:
    """One generated syllable plus what the post-processing did to it."""
    phonemes: List[str]
    pattern: str
    clusters: List[str] = field(default_factory=list)
    degraded_clusters: int = 0
    geminations: int = 0
    lengthenings: int = 0
    hiatuses: int = 0
    attempts: int = 1


@dataclass
class EnumerationSlot:
    """
    Ordered choices for one position of a syllable during enumeration.

    ``pool`` is the candidate set a random draw would see, used to decide
    whether a repeat of the previous phoneme was avoidable.
    """
    options: List[Tuple[str, ...]]
    pool: List[str]
    avoid_repeat: bool = True


# =============================================================================
# Syllable Pattern
# =============================================================================

@dataclass(frozen=True)
class SyllablePattern:
    """
    Immutable syllable template.

    Args:
        pattern: Pattern string, e.g. ``"CVC"``
        constraints: Forbidden substrings for the joined syllable
        hiatus_probability: Chance to append a second vowel after a vowel run
        gemination_probability: Chance to double a single consonant
        vowel_lengthening_probability: Chance to double a single vowel
        allowed_onset_clusters: Whitelist for initial/medial consonant runs
        allowed_coda_clusters: Whitelist for the syllable-final consonant run
        position_weights: Selection multipliers per syllable position
        selection_probability: Base selection weight
    """
    pattern: str
    constraints: Tuple[str, ...] = ()
    hiatus_probability: float = 0.0
    gemination_probability: float = 0.0
    vowel_lengthening_probability: float = 0.0
    allowed_onset_clusters: Optional[Tuple[str, ...]] = None
    allowed_coda_clusters: Optional[Tuple[str, ...]] = None
    position_weights: Mapping[SyllablePosition, float] = field(default_factory=dict)
    selection_probability: float = 1.0

    def __post_init__(self):
        for name in ('hiatus_probability', 'gemination_probability', 'vowel_lengthening_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {value}")
        if self.selection_probability < 0:
            raise ConfigurationError("selection_probability must be non-negative")

        object.__setattr__(self, 'constraints', tuple(self.constraints))
        for name in ('allowed_onset_clusters', 'allowed_coda_clusters'):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, tuple(value))

        weights: Dict[SyllablePosition, float] = {}
        for key, weight in dict(self.position_weights).items():
            position = key if isinstance(key, SyllablePosition) else SyllablePosition(key)
            if weight < 0:
                raise ConfigurationError(f"Position weight for {position.value} must be non-negative")
            weights[position] = float(weight)
        object.__setattr__(self, 'position_weights', weights)
        object.__setattr__(self, '_slots', compile_pattern(self.pattern))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def slots(self) -> Tuple[Slot, ...]:
        return self._slots

    @property
    def symbols(self) -> Tuple[Symbol, ...]:
        return tuple(Symbol.parse(ch) for ch in self.pattern)

    def group_ids(self) -> List[str]:
        ids: List[str] = []
        for symbol in self.symbols:
            if symbol.kind is SymbolKind.GROUP and symbol.group_id not in ids:
                ids.append(symbol.group_id)
        return ids

    def check_groups(self, inventory: PhonemeInventory) -> None:
        """Raise UndefinedGroupError for any group the inventory lacks."""
        for group_id in self.group_ids():
            if not inventory.has_group(group_id):
                raise UndefinedGroupError(group_id, self.pattern)

    def weight_for(self, position: SyllablePosition) -> float:
        return self.selection_probability * self.position_weights.get(position, 1.0)

    def allows_hiatus(self) -> bool:
        return self.hiatus_probability > 0

    def validate(self, sequence: Sequence[str]) -> bool:
        """True when no constraint occurs in the joined sequence."""
        joined = ''.join(sequence)
        return not any(c in joined for c in self.constraints)

    # -------------------------------------------------------------------------
    # Slot helpers
    # -------------------------------------------------------------------------

    def _is_vowel_slot(self, slot: Slot, inventory: PhonemeInventory) -> bool:
        kind = slot.symbol.kind
        if kind is SymbolKind.VOWEL:
            return True
        if kind is SymbolKind.CONSONANT:
            return False
        return inventory.is_vowel_like_group(slot.symbol.group_id)

    def _pool(self, slot: Slot, inventory: PhonemeInventory, tags) -> List[str]:
        kind = slot.symbol.kind
        if kind is SymbolKind.CONSONANT:
            return inventory.candidates(PhonemeClass.CONSONANT, tags)
        if kind is SymbolKind.VOWEL:
            return inventory.candidates(PhonemeClass.VOWEL, tags)
        return inventory.filter(inventory.group_members(slot.symbol.group_id), tags)

    def _cluster_list(self, slot: Slot) -> Optional[Tuple[str, ...]]:
        if slot.is_last and not slot.is_first:
            return self.allowed_coda_clusters
        return self.allowed_onset_clusters

    def realizable_clusters(self, slot: Slot, inventory: PhonemeInventory,
                            tags=None) -> List[Tuple[str, ...]]:
        """
        Whitelisted clusters that split into exactly ``slot.size`` inventory
        consonants, each allowed at ``tags`` with a positive weight.
        """
        allowed = self._cluster_list(slot)
        if not allowed:
            return []
        table = {c: c for c in inventory.consonants}
        usable = set(inventory.filter(inventory.consonants, tags))
        realizable: List[Tuple[str, ...]] = []
        for cluster in allowed:
            parts = tuple(longest_match_segment(cluster, table))
            if len(parts) == slot.size and all(p in usable for p in parts) and parts not in realizable:
                realizable.append(parts)
        return realizable

    def _draw(self, slot, inventory, tags, rng, exclude, bias) -> str:
        kind = slot.symbol.kind
        if kind is SymbolKind.CONSONANT:
            return inventory.sample(PhonemeClass.CONSONANT, tags, rng, exclude)
        if kind is SymbolKind.VOWEL:
            return inventory.sample(PhonemeClass.VOWEL, tags, rng, exclude, bias)
        return inventory.sample_group(slot.symbol.group_id, tags, rng, exclude, bias)

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate(
        self,
        inventory: PhonemeInventory,
        position: SyllablePosition = SyllablePosition.MEDIAL,
        rng: Optional[RandomSource] = None,
        **kwargs,
    ) -> List[str]:
        """Generate one syllable and return its phonemes."""
        return self.generate_detailed(inventory, position, rng, **kwargs).phonemes

    def generate_detailed(
        self,
        inventory: PhonemeInventory,
        position: SyllablePosition = SyllablePosition.MEDIAL,
        rng: Optional[RandomSource] = None,
        starts_word: Optional[bool] = None,
        ends_word: Optional[bool] = None,
        harmony=None,
        previous_vowel: Optional[str] = None,
        max_attempts: Optional[int] = None,
    ) -> SyllableResult:
        """
        Generate one syllable, retrying until its constraints are satisfied.

        Args:
            inventory: Phoneme source
            position: Syllable position inside the word
            rng: Random source
            starts_word: Whether this syllable opens the word (default: INITIAL)
            ends_word: Whether this syllable closes the word (default: FINAL)
            harmony: Optional VowelHarmony biasing vowel draws
            previous_vowel: Last vowel emitted before this syllable
            max_attempts: Retry ceiling (default from settings)

        Raises:
            NoCandidatesError: surfaced immediately, never retried
            UnsatisfiableConstraintError: constraints still matching at the ceiling
        """
        rng = rng or get_rng()
        if starts_word is None:
            starts_word = position is SyllablePosition.INITIAL
        if ends_word is None:
            ends_word = position is SyllablePosition.FINAL
        if max_attempts is None:
            max_attempts = get_int_setting('generation.syllable_max_attempts', DEFAULT_SYLLABLE_ATTEMPTS)

        for attempt in range(1, max_attempts + 1):
            result = self._assemble(inventory, rng, starts_word, ends_word, harmony, previous_vowel)
            if self.validate(result.phonemes):
                result.attempts = attempt
                return result
            logger.debug("Syllable %r rejected by constraints: %s", self.pattern, ''.join(result.phonemes))

        raise UnsatisfiableConstraintError(self.pattern, max_attempts)

    def _assemble(self, inventory, rng, starts_word, ends_word, harmony, previous_vowel) -> SyllableResult:
        result = SyllableResult(phonemes=[], pattern=self.pattern)
        phonemes = result.phonemes
        last_vowel = previous_vowel

        def vowel_bias():
            if harmony is None or last_vowel is None or not harmony.is_active:
                return None
            return harmony.bias(last_vowel, inventory.all_symbols)

        for slot in self._slots:
            tags = slot_positions(slot, starts_word, ends_word)

            if slot.size > 1:
                clusters = self.realizable_clusters(slot, inventory, tags)
                if clusters:
                    cluster = rng.choice(clusters)
                    phonemes.extend(cluster)
                    result.clusters.append(''.join(cluster))
                    continue
                result.degraded_clusters += 1
                logger.debug("No realizable cluster for %r run in %r, using a single consonant",
                             'C' * slot.size, self.pattern)

            exclude = [phonemes[-1]] if phonemes else []
            vowel_source = self._is_vowel_slot(slot, inventory)
            phoneme = self._draw(slot, inventory, tags, rng, exclude, vowel_bias() if vowel_source else None)
            phonemes.append(phoneme)

            # Mixed groups double by the class of the drawn member
            if not inventory.is_vowel(phoneme):
                if rng.chance(self.gemination_probability):
                    phonemes.append(phoneme)
                    result.geminations += 1
                continue

            last_vowel = phoneme
            if rng.chance(self.vowel_lengthening_probability):
                phonemes.append(phoneme)
                result.lengthenings += 1
            if vowel_source and slot.ends_run and rng.chance(self.hiatus_probability):
                extra = self._draw(slot, inventory, tags, rng, [phoneme], vowel_bias())
                phonemes.append(extra)
                last_vowel = extra
                result.hiatuses += 1

        return result

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def enumeration_slots(
        self,
        inventory: PhonemeInventory,
        starts_word: bool,
        ends_word: bool,
    ) -> List[EnumerationSlot]:
        """
        Ordered choices per position, mirroring what ``generate`` can emit.

        A feature with probability strictly between 0 and 1 contributes both
        the plain and the doubled/extended form; at 1 only the doubled one.
        """
        spec: List[EnumerationSlot] = []
        for slot in self._slots:
            tags = slot_positions(slot, starts_word, ends_word)

            if slot.size > 1:
                clusters = self.realizable_clusters(slot, inventory, tags)
                if clusters:
                    spec.append(EnumerationSlot(options=list(clusters), pool=[], avoid_repeat=False))
                    continue

            pool = self._pool(slot, inventory, tags)
            spec.append(EnumerationSlot(options=self._doubling_options(pool, inventory), pool=pool))

            if self._is_vowel_slot(slot, inventory) and slot.ends_run and self.hiatus_probability > 0:
                options: List[Tuple[str, ...]] = []
                if self.hiatus_probability < 1.0:
                    options.append(())
                options.extend((v,) for v in pool)
                spec.append(EnumerationSlot(options=options, pool=pool))
        return spec

    def _doubling_options(self, pool: Sequence[str], inventory: PhonemeInventory) -> List[Tuple[str, ...]]:
        options: List[Tuple[str, ...]] = []
        for symbol in pool:
            if inventory.is_vowel(symbol):
                probability = self.vowel_lengthening_probability
            else:
                probability = self.gemination_probability
            if probability < 1.0:
                options.append((symbol,))
            if probability > 0.0:
                options.append((symbol, symbol))
        return options

    @staticmethod
    def accepts_choice(slots: Sequence[EnumerationSlot], choice: Sequence[Tuple[str, ...]]) -> bool:
        """Whether a random draw could have produced this combination of options."""
        previous: Optional[str] = None
        for slot, option in zip(slots, choice):
            if not option:
                continue
            if slot.avoid_repeat and option[0] == previous and any(p != previous for p in slot.pool):
                return False
            previous = option[-1]
        return True

    def __str__(self) -> str:
        return self.pattern


__all__ = [
    "SyllablePosition",
    "SymbolKind",
    "Symbol",
    "Slot",
    "SyllablePattern",
    "SyllableResult",
    "EnumerationSlot",
    "compile_pattern",
    "slot_positions",
]
