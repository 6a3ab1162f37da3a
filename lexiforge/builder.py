#!/usr/bin/env python3
"""
Generator Builder
=================
Fluent configuration that ends in ``build() -> WordGenerator``.

Usage:
    gen = (GeneratorBuilder.create()
           .with_phonemes(['p', 't', 'k', 'r'], ['a', 'e', 'i'])
           .with_weights({'r': 3.0})
           .with_syllable_patterns(['CV', 'CVC'])
           .with_syllable_count(SyllableCountPolicy.range(2, 3))
           .with_thematic_vowel('a')
           .build())
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .entropy import RandomSource
from .errors import ConfigurationError
from .generator import GenerationMode, WordGenerator
from .harmony import VowelHarmony
from .phonemes import PhonemeClass, PhonemeInventory, as_phoneme_class
from .romanization import RomanizationMap
from .syllables import SyllablePattern
from .word_spec import SyllableCountPolicy, WordSpec


class GeneratorBuilder:
    """Collects configuration and validates it once, in :meth:`build`."""

    def __init__(self):
        self._consonants: List[str] = []
        self._vowels: List[str] = []
        self._weights: Dict[str, float] = {}
        self._positions: Dict[str, Iterable] = {}
        self._groups: Dict[str, List[str]] = {}
        self._templates: List[SyllablePattern] = []
        self._count: Optional[SyllableCountPolicy] = None
        self._starting_class: Optional[PhonemeClass] = None
        self._thematic_vowel: Optional[str] = None
        self._starts_with: Optional[str] = None
        self._ends_with: Optional[str] = None
        self._constraints: List[str] = []
        self._romanization: Dict[str, str] = {}
        self._gemination: Optional[float] = None
        self._lengthening: Optional[float] = None
        self._hiatus: Optional[float] = None
        self._harmony: Optional[VowelHarmony] = None
        self._mode = GenerationMode.RANDOM
        self._max_words: Optional[int] = None
        self._max_attempts: Optional[int] = None
        self._rng: Optional[RandomSource] = None

    @classmethod
    def create(cls) -> 'GeneratorBuilder':
        return cls()

    # -------------------------------------------------------------------------
    # Phonemes
    # -------------------------------------------------------------------------

    def with_phonemes(self, consonants: Sequence[str], vowels: Sequence[str]) -> 'GeneratorBuilder':
        self._consonants = list(consonants)
        self._vowels = list(vowels)
        return self

    def with_weights(self, weights: Mapping[str, float]) -> 'GeneratorBuilder':
        self._weights.update(weights)
        return self

    def with_positions(self, positions: Mapping[str, Iterable]) -> 'GeneratorBuilder':
        """Restrict symbols to positional tags, e.g. ``{'ŋ': ['word_final']}``."""
        self._positions.update(positions)
        return self

    def with_custom_group(self, group_id: str, members: Sequence[str]) -> 'GeneratorBuilder':
        self._groups[group_id] = list(members)
        return self

    def with_romanization(self, mappings: Mapping[str, str]) -> 'GeneratorBuilder':
        self._romanization.update(mappings)
        return self

    # -------------------------------------------------------------------------
    # Syllables
    # -------------------------------------------------------------------------

    def with_syllable_patterns(self, patterns: Sequence[str],
                               probabilities: Optional[Mapping[str, float]] = None) -> 'GeneratorBuilder':
        probabilities = probabilities or {}
        self._templates = [SyllablePattern(p, selection_probability=probabilities.get(p, 1.0))
                           for p in patterns]
        return self

    def with_syllable_templates(self, templates: Sequence[SyllablePattern]) -> 'GeneratorBuilder':
        self._templates = list(templates)
        return self

    def with_syllable_count(self, count: Union[SyllableCountPolicy, int]) -> 'GeneratorBuilder':
        self._count = SyllableCountPolicy.exact(count) if isinstance(count, int) else count
        return self

    def with_gemination_probability(self, probability: float) -> 'GeneratorBuilder':
        self._gemination = _probability('gemination', probability)
        return self

    def with_vowel_lengthening_probability(self, probability: float) -> 'GeneratorBuilder':
        self._lengthening = _probability('vowel lengthening', probability)
        return self

    def with_hiatus_probability(self, probability: float) -> 'GeneratorBuilder':
        self._hiatus = _probability('hiatus', probability)
        return self

    # -------------------------------------------------------------------------
    # Word rules
    # -------------------------------------------------------------------------

    def starting_with(self, kind: Union[PhonemeClass, str]) -> 'GeneratorBuilder':
        self._starting_class = as_phoneme_class(kind)
        return self

    def with_constraints(self, constraints: Sequence[str]) -> 'GeneratorBuilder':
        self._constraints = list(constraints)
        return self

    def with_thematic_vowel(self, vowel: str) -> 'GeneratorBuilder':
        self._thematic_vowel = vowel
        return self

    def starting_with_sequence(self, sequence: str) -> 'GeneratorBuilder':
        self._starts_with = sequence
        return self

    def ending_with_sequence(self, sequence: str) -> 'GeneratorBuilder':
        self._ends_with = sequence
        return self

    def with_vowel_harmony(self, harmony: VowelHarmony) -> 'GeneratorBuilder':
        self._harmony = harmony
        return self

    def with_analysis(self, analysis, harmony_strength: Optional[float] = None,
                      use_templates: bool = True) -> 'GeneratorBuilder':
        """
        Tune the builder from an :class:`~lexiforge.analysis.Analysis`.

        Sets phoneme weights, syllable-count weights, hiatus and gemination
        probabilities and, when ``use_templates`` is set and no templates were
        given, the recommended patterns. ``harmony_strength`` also derives
        vowel harmony from the observed transitions.
        """
        known = set(self._consonants) | set(self._vowels)
        self._weights.update({p: max(f * 100.0, 0.01) for p, f in analysis.phoneme_frequencies.items()
                              if not known or p in known})
        weights = analysis.optimal_syllable_weights()
        if weights:
            self._count = SyllableCountPolicy.weighted(weights)
        if self._hiatus is None:
            self._hiatus = analysis.recommended_hiatus_probability
        if self._gemination is None:
            self._gemination = analysis.recommended_gemination_probability
        if use_templates and not self._templates:
            self._templates = [SyllablePattern(p) for p in analysis.recommended_templates]
        if harmony_strength is not None:
            self._harmony = analysis.generate_vowel_harmony(harmony_strength)
        return self

    # -------------------------------------------------------------------------
    # Mode and runtime
    # -------------------------------------------------------------------------

    def random_mode(self) -> 'GeneratorBuilder':
        self._mode = GenerationMode.RANDOM
        return self

    def weighted_random_mode(self) -> 'GeneratorBuilder':
        self._mode = GenerationMode.WEIGHTED_RANDOM
        return self

    def sequential_mode(self, max_words: Optional[int] = None) -> 'GeneratorBuilder':
        self._mode = GenerationMode.SEQUENTIAL
        self._max_words = max_words
        return self

    def with_seed(self, seed: int) -> 'GeneratorBuilder':
        self._rng = RandomSource(seed)
        return self

    def with_random_source(self, rng: RandomSource) -> 'GeneratorBuilder':
        self._rng = rng
        return self

    def with_max_attempts(self, attempts: int) -> 'GeneratorBuilder':
        self._max_attempts = attempts
        return self

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def build_inventory(self) -> PhonemeInventory:
        if not self._consonants and not self._vowels:
            raise ConfigurationError("Phonemes must be set (with_phonemes)")
        return PhonemeInventory(
            consonants=self._consonants,
            vowels=self._vowels,
            weights=self._weights,
            positions=self._positions,
            groups=self._groups,
        )

    def build_spec(self) -> WordSpec:
        if not self._templates:
            raise ConfigurationError("Syllable patterns must be set (with_syllable_patterns)")
        if self._count is None:
            raise ConfigurationError("Syllable count must be set (with_syllable_count)")
        return WordSpec(
            count_policy=self._count,
            patterns=[self._apply_defaults(t) for t in self._templates],
            starting_class=self._starting_class,
            thematic_vowel=self._thematic_vowel,
            starts_with=self._starts_with,
            ends_with=self._ends_with,
            word_constraints=self._constraints,
        )

    def _apply_defaults(self, template: SyllablePattern) -> SyllablePattern:
        changes = {}
        if self._gemination is not None and template.gemination_probability == 0:
            changes['gemination_probability'] = self._gemination
        if self._lengthening is not None and template.vowel_lengthening_probability == 0:
            changes['vowel_lengthening_probability'] = self._lengthening
        if self._hiatus is not None and template.hiatus_probability == 0:
            changes['hiatus_probability'] = self._hiatus
        return replace(template, **changes) if changes else template

    def build(self) -> WordGenerator:
        """
        Validate and build.

        Raises:
            ConfigurationError: missing phonemes, patterns or syllable count
            UndefinedGroupError: a pattern uses an undeclared group
            InvalidThematicVowelError: thematic vowel is not a vowel here
            ReservedSymbolError: a group id is ``C`` or ``V``
        """
        inventory = self.build_inventory()
        spec = self.build_spec()
        return WordGenerator(
            inventory,
            spec,
            mode=self._mode,
            romanizer=RomanizationMap(self._romanization),
            max_words=self._max_words,
            rng=self._rng,
            max_attempts=self._max_attempts,
            harmony=self._harmony,
        )


def _probability(name: str, value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} probability must be within [0, 1], got {value}")
    return float(value)


__all__ = ["GeneratorBuilder"]
