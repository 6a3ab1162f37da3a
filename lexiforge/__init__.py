#!/usr/bin/env python3
"""
Lexiforge - Procedural Conlang Word Generator
=============================================

Generates words for constructed languages from a phoneme inventory,
syllable templates and word-level rules, and derives generator settings
from a corpus of existing words.

Quick Start
-----------
    from lexiforge import GeneratorBuilder, SyllableCountPolicy

    gen = (GeneratorBuilder.create()
           .with_phonemes(['p', 't', 'k', 'r', 'l'], ['a', 'e', 'i', 'o'])
           .with_syllable_patterns(['CV', 'CVC'])
           .with_syllable_count(SyllableCountPolicy.range(2, 3))
           .with_seed(42)
           .build())

    gen.generate()          # 'tarel'
    gen.generate_batch(5)

    # Presets
    from lexiforge.languages import builder_for
    builder_for('elvish').build().generate()

Modules
-------
    lexiforge.phonemes     - Phoneme inventory, weights, positions, groups
    lexiforge.syllables    - Syllable templates and assembly
    lexiforge.word_spec    - Syllable-count policies and word rules
    lexiforge.generator    - Random, weighted and sequential generation
    lexiforge.analysis     - Corpus analysis and recommendations
    lexiforge.languages    - YAML language presets

CLI Usage
---------
    python -m lexiforge generate -n 10 --language elvish
    python -m lexiforge analyze thara elen mirion
    python -m lexiforge languages
"""

__version__ = "0.1.0"
__author__ = "Lexiforge"

# =============================================================================
# Core Imports
# =============================================================================

from .errors import (
    LexiforgeError,
    ConfigurationError,
    ReservedSymbolError,
    UndefinedGroupError,
    InvalidThematicVowelError,
    UnknownPhonemeError,
    GenerationError,
    NoCandidatesError,
    UnknownGroupError,
    UnsatisfiableConstraintError,
    GenerationExhaustedError,
    SequenceExhaustedError,
)
from .entropy import RandomSource, get_rng, seed_global
from .phonemes import PhonemeClass, PhonemeInventory, Position
from .romanization import RomanizationMap
from .syllables import SyllablePattern, SyllablePosition
from .word_spec import SyllableCountPolicy, WordSpec
from .harmony import VowelHarmony
from .sequential import SequentialEnumeration
from .generator import GeneratedWord, GenerationMode, WordGenerator
from .builder import GeneratorBuilder

# =============================================================================
# Analysis Imports
# =============================================================================

from .analysis import Analysis, Analyzer, WordAnalysis, WordAnalyzer


__all__ = [
    # Version
    "__version__",
    # Errors
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
    # Randomness
    "RandomSource",
    "get_rng",
    "seed_global",
    # Generation
    "PhonemeClass",
    "PhonemeInventory",
    "Position",
    "RomanizationMap",
    "SyllablePattern",
    "SyllablePosition",
    "SyllableCountPolicy",
    "WordSpec",
    "VowelHarmony",
    "SequentialEnumeration",
    "GeneratedWord",
    "GenerationMode",
    "WordGenerator",
    "GeneratorBuilder",
    # Analysis
    "Analysis",
    "Analyzer",
    "WordAnalysis",
    "WordAnalyzer",
]
