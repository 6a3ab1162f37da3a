#!/usr/bin/env python3
"""
IPA Lookup Tables
=================
Static IPA vowel and consonant tables.

The inventory consults these only for symbols it has not registered itself, so
configured data always wins. Length marks and common secondary articulations
are stripped before lookup: ``aː`` and ``ã`` classify like ``a``, ``tʰ`` like ``t``.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class IPAVowel:
    """Cardinal vowel with its articulatory features."""
    symbol: str
    height: str      # close, near_close, close_mid, mid, open_mid, near_open, open
    backness: str    # front, near_front, central, near_back, back
    rounded: bool


@dataclass(frozen=True)
class IPAConsonant:
    """Pulmonic or non-pulmonic consonant with its articulatory features."""
    symbol: str
    manner: str
    place: str
    voiced: bool


def _vowels(*rows) -> Dict[str, IPAVowel]:
    return {symbol: IPAVowel(symbol, height, backness, rounded)
            for symbol, height, backness, rounded in rows}


def _consonants(*rows) -> Dict[str, IPAConsonant]:
    return {symbol: IPAConsonant(symbol, manner, place, voiced)
            for symbol, manner, place, voiced in rows}


VOWELS: Dict[str, IPAVowel] = _vowels(
    ('i', 'close', 'front', False), ('y', 'close', 'front', True),
    ('ɨ', 'close', 'central', False), ('ʉ', 'close', 'central', True),
    ('ɯ', 'close', 'back', False), ('u', 'close', 'back', True),
    ('ɪ', 'near_close', 'near_front', False), ('ʏ', 'near_close', 'near_front', True),
    ('ʊ', 'near_close', 'near_back', True),
    ('e', 'close_mid', 'front', False), ('ø', 'close_mid', 'front', True),
    ('ɘ', 'close_mid', 'central', False), ('ɵ', 'close_mid', 'central', True),
    ('ɤ', 'close_mid', 'back', False), ('o', 'close_mid', 'back', True),
    ('ə', 'mid', 'central', False),
    ('ɛ', 'open_mid', 'front', False), ('œ', 'open_mid', 'front', True),
    ('ɜ', 'open_mid', 'central', False), ('ɞ', 'open_mid', 'central', True),
    ('ʌ', 'open_mid', 'back', False), ('ɔ', 'open_mid', 'back', True),
    ('æ', 'near_open', 'front', False), ('ɐ', 'near_open', 'central', False),
    ('a', 'open', 'front', False), ('ä', 'open', 'central', False),
    ('ɶ', 'open', 'front', True),
    ('ɑ', 'open', 'back', False), ('ɒ', 'open', 'back', True),
)

CONSONANTS: Dict[str, IPAConsonant] = _consonants(
    # Plosives
    ('p', 'plosive', 'bilabial', False), ('b', 'plosive', 'bilabial', True),
    ('t', 'plosive', 'alveolar', False), ('d', 'plosive', 'alveolar', True),
    ('ʈ', 'plosive', 'retroflex', False), ('ɖ', 'plosive', 'retroflex', True),
    ('c', 'plosive', 'palatal', False), ('ɟ', 'plosive', 'palatal', True),
    ('k', 'plosive', 'velar', False), ('g', 'plosive', 'velar', True),
    ('ɡ', 'plosive', 'velar', True),
    ('q', 'plosive', 'uvular', False), ('ɢ', 'plosive', 'uvular', True),
    ('ʔ', 'plosive', 'glottal', False),
    # Nasals
    ('m', 'nasal', 'bilabial', True), ('ɱ', 'nasal', 'labiodental', True),
    ('n', 'nasal', 'alveolar', True), ('ɳ', 'nasal', 'retroflex', True),
    ('ɲ', 'nasal', 'palatal', True), ('ŋ', 'nasal', 'velar', True),
    ('ɴ', 'nasal', 'uvular', True),
    # Trills and taps
    ('ʙ', 'trill', 'bilabial', True), ('r', 'trill', 'alveolar', True),
    ('ʀ', 'trill', 'uvular', True),
    ('ɾ', 'tap', 'alveolar', True), ('ɽ', 'tap', 'retroflex', True),
    # Fricatives
    ('ɸ', 'fricative', 'bilabial', False), ('β', 'fricative', 'bilabial', True),
    ('f', 'fricative', 'labiodental', False), ('v', 'fricative', 'labiodental', True),
    ('θ', 'fricative', 'dental', False), ('ð', 'fricative', 'dental', True),
    ('s', 'fricative', 'alveolar', False), ('z', 'fricative', 'alveolar', True),
    ('ʃ', 'fricative', 'postalveolar', False), ('ʒ', 'fricative', 'postalveolar', True),
    ('ʂ', 'fricative', 'retroflex', False), ('ʐ', 'fricative', 'retroflex', True),
    ('ç', 'fricative', 'palatal', False), ('ʝ', 'fricative', 'palatal', True),
    ('x', 'fricative', 'velar', False), ('ɣ', 'fricative', 'velar', True),
    ('χ', 'fricative', 'uvular', False), ('ʁ', 'fricative', 'uvular', True),
    ('ħ', 'fricative', 'pharyngeal', False), ('ʕ', 'fricative', 'pharyngeal', True),
    ('h', 'fricative', 'glottal', False), ('ɦ', 'fricative', 'glottal', True),
    ('ɕ', 'fricative', 'alveolopalatal', False), ('ʑ', 'fricative', 'alveolopalatal', True),
    ('ʍ', 'fricative', 'labiovelar', False),
    ('ɬ', 'lateral_fricative', 'alveolar', False), ('ɮ', 'lateral_fricative', 'alveolar', True),
    # Approximants
    ('ʋ', 'approximant', 'labiodental', True), ('ɹ', 'approximant', 'alveolar', True),
    ('ɻ', 'approximant', 'retroflex', True), ('j', 'approximant', 'palatal', True),
    ('ɰ', 'approximant', 'velar', True), ('w', 'approximant', 'labiovelar', True),
    ('ɥ', 'approximant', 'labiopalatal', True),
    ('l', 'lateral_approximant', 'alveolar', True), ('ɭ', 'lateral_approximant', 'retroflex', True),
    ('ʎ', 'lateral_approximant', 'palatal', True), ('ʟ', 'lateral_approximant', 'velar', True),
    # Affricates
    ('t͡s', 'affricate', 'alveolar', False), ('d͡z', 'affricate', 'alveolar', True),
    ('t͡ʃ', 'affricate', 'postalveolar', False), ('d͡ʒ', 'affricate', 'postalveolar', True),
    ('ts', 'affricate', 'alveolar', False), ('dz', 'affricate', 'alveolar', True),
    ('tʃ', 'affricate', 'postalveolar', False), ('dʒ', 'affricate', 'postalveolar', True),
)

# Length marks, nasalization, non-syllabic marks and secondary articulations
DIACRITICS = frozenset('ːˑ̯̩̃ʰʷʲˠˤʼ')


def base_symbol(symbol: str) -> str:
    """Strip diacritics that do not change a symbol's major class."""
    return ''.join(ch for ch in symbol if ch not in DIACRITICS)


def lookup_vowel(symbol: str) -> Optional[IPAVowel]:
    """Return the IPA vowel entry for ``symbol``, if any."""
    return VOWELS.get(symbol) or VOWELS.get(base_symbol(symbol))


def lookup_consonant(symbol: str) -> Optional[IPAConsonant]:
    """Return the IPA consonant entry for ``symbol``, if any."""
    return CONSONANTS.get(symbol) or CONSONANTS.get(base_symbol(symbol))


def is_ipa_vowel(symbol: str) -> bool:
    return lookup_vowel(symbol) is not None


def is_ipa_consonant(symbol: str) -> bool:
    return lookup_consonant(symbol) is not None


__all__ = [
    "IPAVowel",
    "IPAConsonant",
    "VOWELS",
    "CONSONANTS",
    "base_symbol",
    "lookup_vowel",
    "lookup_consonant",
    "is_ipa_vowel",
    "is_ipa_consonant",
]
