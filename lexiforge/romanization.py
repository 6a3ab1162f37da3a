#!/usr/bin/env python3
"""
Romanization
============
Phoneme-to-grapheme substitution table.

``romanize`` maps each symbol and joins the results; unmapped symbols pass
through unchanged. ``segment`` goes the other way, cutting a surface string
back into phonemes longest-match-first.
"""

from typing import Dict, Iterable, List, Mapping, Optional


def longest_match_segment(text: str, table: Mapping[str, str]) -> List[str]:
    """
    Split ``text`` using the keys of ``table``, longest key first.

    Each matched key is replaced by its value. Characters no key covers come
    through as single-character symbols.
    """
    if not table:
        return list(text)
    longest = max(len(key) for key in table)
    result: List[str] = []
    i = 0
    while i < len(text):
        for size in range(min(longest, len(text) - i), 0, -1):
            chunk = text[i:i + size]
            if chunk in table:
                result.append(table[chunk])
                i += size
                break
        else:
            result.append(text[i])
            i += 1
    return result


class RomanizationMap:
    """Ordered phoneme -> romanization table."""

    def __init__(self, mappings: Optional[Mapping[str, str]] = None):
        self.mappings: Dict[str, str] = {}
        for phoneme, romanization in (mappings or {}).items():
            self.add_mapping(phoneme, romanization)

    def add_mapping(self, phoneme: str, romanization: str) -> None:
        if not phoneme:
            raise ValueError("Cannot map an empty phoneme")
        self.mappings[phoneme] = romanization

    def has_mapping(self, phoneme: str) -> bool:
        return phoneme in self.mappings

    def get(self, phoneme: str) -> str:
        return self.mappings.get(phoneme, phoneme)

    def romanize(self, phonemes: Iterable[str]) -> str:
        return ''.join(self.get(p) for p in phonemes)

    def reverse_table(self, known_symbols: Iterable[str] = ()) -> Dict[str, str]:
        """Romanization -> phoneme, plus identity entries for unmapped symbols."""
        table: Dict[str, str] = {}
        for phoneme, romanization in self.mappings.items():
            if romanization and romanization not in table:
                table[romanization] = phoneme
        for symbol in known_symbols:
            if symbol not in self.mappings and symbol not in table:
                table[symbol] = symbol
        return table

    def segment(self, text: str, known_symbols: Iterable[str] = ()) -> List[str]:
        """Cut a romanized string back into phonemes."""
        return longest_match_segment(text, self.reverse_table(known_symbols))

    def is_invertible(self, phonemes: List[str], known_symbols: Iterable[str] = ()) -> bool:
        """True when the romanized form segments back into exactly ``phonemes``."""
        return self.segment(self.romanize(phonemes), known_symbols) == list(phonemes)

    def __len__(self) -> int:
        return len(self.mappings)

    def __repr__(self) -> str:
        return f"RomanizationMap({self.mappings!r})"


__all__ = ["RomanizationMap", "longest_match_segment"]
