#!/usr/bin/env python3
"""
Word Generator
==============
Top-level orchestrator: draws a syllable count, picks a template per syllable,
assembles the phonemes and rejects candidates that break any word-level rule.

Modes:
    RANDOM           Weighted phoneme sampling (weights always apply)
    WEIGHTED_RANDOM  Same behaviour through its own labeled path
    SEQUENTIAL       Exhaustive enumeration through an external cursor

A generator instance is single-writer: the sequential cursor is its only
mutable state and no locking is done. Seed the random source, not the
generator, for reproducible output.

Usage:
    from lexiforge import PhonemeInventory, WordSpec, WordGenerator, SyllableCountPolicy

    inv = PhonemeInventory(consonants=['r', 't'], vowels=['a', 'e'])
    spec = WordSpec(SyllableCountPolicy.exact(2), ['CV', 'CVC'])
    gen = WordGenerator(inv, spec)
    gen.generate()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Union

from .entropy import RandomSource, get_rng
from .errors import ConfigurationError, GenerationExhaustedError, SequenceExhaustedError
from .harmony import VowelHarmony
from .phonemes import PhonemeClass, PhonemeInventory, as_phoneme_class
from .romanization import RomanizationMap
from .sequential import SequentialEnumeration
from .settings import get_int_setting
from .word_spec import WordSpec, positions_for

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10000
DEFAULT_MAX_WORDS = 1000


class GenerationMode(Enum):
    RANDOM = 'random'
    WEIGHTED_RANDOM = 'weighted_random'
    SEQUENTIAL = 'sequential'


@dataclass
class GeneratedWord:
    """A generated word with the structure that produced it."""
    word: str
    phonemes: List[str]
    syllables: List[List[str]] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)
    attempts: int = 1
    mode: str = GenerationMode.RANDOM.value

    @property
    def syllable_count(self) -> int:
        return len(self.syllables)

    def __str__(self) -> str:
        return self.word


class WordGenerator:
    """
    Generates words from a phoneme inventory and a word spec.

    Args:
        inventory: Phoneme inventory
        spec: Word spec (validated against the inventory here)
        mode: Generation mode
        romanizer: Phoneme -> grapheme table (identity if omitted)
        max_words: Word limit for sequential mode
        rng: Random source (defaults to the process-wide one at call time)
        max_attempts: Whole-word retry ceiling
        harmony: Optional vowel harmony

    Raises:
        UndefinedGroupError, InvalidThematicVowelError: on invalid configuration
    """

    def __init__(
        self,
        inventory: PhonemeInventory,
        spec: WordSpec,
        mode: Union[GenerationMode, str] = GenerationMode.RANDOM,
        romanizer: Optional[RomanizationMap] = None,
        max_words: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        max_attempts: Optional[int] = None,
        harmony: Optional[VowelHarmony] = None,
    ):
        spec.validate_against(inventory)
        self.inventory = inventory
        self.spec = spec
        self.mode = GenerationMode(mode)
        self.romanizer = romanizer or RomanizationMap()
        self.max_words = max_words if max_words is not None else get_int_setting(
            'generation.default_max_words', DEFAULT_MAX_WORDS, minimum=0)
        self.max_attempts = max_attempts if max_attempts is not None else get_int_setting(
            'generation.max_attempts', DEFAULT_MAX_ATTEMPTS)
        self.harmony = harmony
        self._rng = rng
        self._enumeration: Optional[SequentialEnumeration] = None
        self._cursor = 0
        self._produced = 0

        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.max_words < 0:
            raise ConfigurationError("max_words must be non-negative")

    @property
    def rng(self) -> RandomSource:
        return self._rng or get_rng()

    # =========================================================================
    # Public API
    # =========================================================================

    def generate(self, syllable_count: Optional[int] = None,
                 starting_class: Optional[Union[PhonemeClass, str]] = None) -> str:
        """
        Generate one word.

        In SEQUENTIAL mode a call without overrides returns the next
        enumerated word; overrides always sample randomly.

        Raises:
            GenerationExhaustedError: no valid candidate within max_attempts
            SequenceExhaustedError: sequential enumeration is finished
        """
        return self.generate_word(syllable_count, starting_class).word

    def generate_phonemes(self, syllable_count: Optional[int] = None,
                          starting_class: Optional[Union[PhonemeClass, str]] = None) -> List[str]:
        return self.generate_word(syllable_count, starting_class).phonemes

    def generate_word(self, syllable_count: Optional[int] = None,
                      starting_class: Optional[Union[PhonemeClass, str]] = None) -> GeneratedWord:
        overridden = syllable_count is not None or starting_class is not None
        if self.mode is GenerationMode.SEQUENTIAL and not overridden:
            result = self._next_sequential_word()
            if result is None:
                raise SequenceExhaustedError(self._produced)
            return result
        if self.mode is GenerationMode.WEIGHTED_RANDOM:
            return self._generate_weighted(syllable_count, starting_class)
        return self._generate_random(syllable_count, starting_class)

    def generate_batch(self, count: int) -> List[str]:
        """Call :meth:`generate` ``count`` times. No deduplication."""
        return [self.generate() for _ in range(count)]

    # =========================================================================
    # Sequential Mode
    # =========================================================================

    @property
    def enumeration(self) -> SequentialEnumeration:
        if self._enumeration is None:
            self._enumeration = SequentialEnumeration(self.inventory, self.spec)
        return self._enumeration

    @property
    def sequential_cursor(self) -> int:
        return self._cursor

    def next_sequential(self) -> Optional[str]:
        """
        Next enumerated word, or ``None`` at end of sequence.

        Raises:
            GenerationExhaustedError: max_attempts consecutive entries were skipped
        """
        result = self._next_sequential_word()
        return result.word if result is not None else None

    def reset_sequential(self) -> None:
        self._cursor = 0
        self._produced = 0

    def iter_sequential(self) -> Iterator[str]:
        """Yield remaining enumerated words from the current cursor."""
        while True:
            word = self.next_sequential()
            if word is None:
                return
            yield word

    def _next_sequential_word(self) -> Optional[GeneratedWord]:
        enumeration = self.enumeration
        skipped = 0
        while self._produced < self.max_words and self._cursor < enumeration.size:
            if skipped >= self.max_attempts:
                logger.warning("No valid enumerated word in %d consecutive indices (cursor %d of %d)",
                               skipped, self._cursor, enumeration.size)
                raise GenerationExhaustedError(skipped)
            decoded = enumeration.decode(self._cursor)
            self._cursor += 1
            if decoded is None:
                skipped += 1
                continue
            phonemes = decoded.phonemes
            word = self.romanizer.romanize(phonemes)
            reason = self._rejection(decoded.syllables, phonemes, word, self.spec.starting_class)
            if reason is not None:
                logger.debug("Skipping enumerated %r (%s)", word, reason)
                skipped += 1
                continue
            self._produced += 1
            return GeneratedWord(
                word=word,
                phonemes=phonemes,
                syllables=decoded.syllables,
                patterns=[p.pattern for p in decoded.patterns],
                mode=GenerationMode.SEQUENTIAL.value,
            )
        return None

    # =========================================================================
    # Random Modes
    # =========================================================================

    def _generate_random(self, syllable_count, starting_class) -> GeneratedWord:
        return self._sample(syllable_count, starting_class, GenerationMode.RANDOM)

    def _generate_weighted(self, syllable_count, starting_class) -> GeneratedWord:
        return self._sample(syllable_count, starting_class, GenerationMode.WEIGHTED_RANDOM)

    def _sample(self, syllable_count, starting_class, mode: GenerationMode) -> GeneratedWord:
        if syllable_count is not None and syllable_count < 1:
            raise ConfigurationError(f"Syllable count must be at least 1, got {syllable_count}")
        if starting_class is None:
            starting_class = self.spec.starting_class
        else:
            starting_class = as_phoneme_class(starting_class)

        rng = self.rng
        for attempt in range(1, self.max_attempts + 1):
            count = syllable_count or self.spec.generate_syllable_count(rng)
            syllables, patterns = self._assemble(count, rng)
            phonemes = [p for syllable in syllables for p in syllable]
            word = self.romanizer.romanize(phonemes)

            reason = self._rejection(syllables, phonemes, word, starting_class)
            if reason is None:
                return GeneratedWord(word, phonemes, syllables, patterns, attempt, mode.value)
            logger.debug("[%s] attempt %d rejected %r: %s", mode.value, attempt, word, reason)

        logger.warning("No valid word after %d attempts; constraints may be unsatisfiable",
                       self.max_attempts)
        raise GenerationExhaustedError(self.max_attempts)

    def _assemble(self, count: int, rng: RandomSource):
        syllables: List[List[str]] = []
        patterns: List[str] = []
        last_vowel: Optional[str] = None
        for i, position in enumerate(positions_for(count)):
            template = self.spec.select_template(position, rng)
            result = template.generate_detailed(
                self.inventory, position, rng,
                starts_word=i == 0,
                ends_word=i == count - 1,
                harmony=self.harmony,
                previous_vowel=last_vowel,
            )
            syllables.append(result.phonemes)
            patterns.append(template.pattern)
            for phoneme in reversed(result.phonemes):
                if self.inventory.is_vowel(phoneme):
                    last_vowel = phoneme
                    break
        return syllables, patterns

    # =========================================================================
    # Word-level Checks
    # =========================================================================

    def _rejection(self, syllables: Sequence[Sequence[str]], phonemes: List[str], word: str,
                   starting_class: Optional[PhonemeClass]) -> Optional[str]:
        """Reason a candidate must be discarded, or ``None`` if it passes."""
        if not phonemes:
            return "empty word"
        if not self.spec.validate_word(phonemes):
            return "word constraint"
        if starting_class is not None and self.inventory.classify(phonemes[0]) is not starting_class:
            return "starting class"

        raw = ''.join(phonemes)
        if self.spec.starts_with and not (raw.startswith(self.spec.starts_with)
                                          or word.startswith(self.spec.starts_with)):
            return "starts_with"
        if self.spec.ends_with and not (raw.endswith(self.spec.ends_with)
                                        or word.endswith(self.spec.ends_with)):
            return "ends_with"

        if self.spec.thematic_vowel is not None:
            vowels = [p for p in phonemes if self.inventory.is_vowel(p)]
            if not vowels or vowels[-1] != self.spec.thematic_vowel:
                return "thematic vowel"

        reason = self._boundary_rejection(syllables)
        if reason:
            return reason

        if not self.romanizer.is_invertible(phonemes, self.inventory.all_symbols):
            return "romanization not invertible"
        return None

    def _boundary_rejection(self, syllables: Sequence[Sequence[str]]) -> Optional[str]:
        for left, right in zip(syllables, syllables[1:]):
            if left and right and left[-1] == right[0]:
                return f"'{left[-1]}' doubled across syllable boundary"

        run_start_syllable = None
        run_length = 0
        for index, syllable in enumerate(syllables):
            for phoneme in syllable:
                if self.inventory.is_vowel(phoneme):
                    if run_length == 0:
                        run_start_syllable = index
                    run_length += 1
                    if run_length >= 3 and run_start_syllable != index:
                        return "three or more vowels across a syllable boundary"
                else:
                    run_length = 0
        return None


__all__ = [
    "GenerationMode",
    "GeneratedWord",
    "WordGenerator",
]
