#!/usr/bin/env python3
"""
Sequential Enumeration
======================
Exhaustive, deterministic word enumeration as a pure function of an index.

The enumeration is the Cartesian product of:

    syllable counts (policy order, slowest)
      x per syllable: eligible templates (declaration order), each expanded
        into its slot options (phoneme declaration order, last slot fastest)

For a fixed count the per-syllable blocks factor into one mixed-radix number
whose digit for syllable ``i`` ranges over the sum of its templates' sizes.
``decode(index)`` never touches mutable state; the cursor lives with the caller.
Decoded combinations that a random draw could not have produced come back as
``None`` so the caller can skip them.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .phonemes import PhonemeInventory
from .syllables import EnumerationSlot, SyllablePattern
from .word_spec import WordSpec, positions_for


@dataclass(frozen=True)
class _Choice:
    pattern: SyllablePattern
    slots: Tuple[EnumerationSlot, ...]
    size: int


@dataclass(frozen=True)
class _CountBlock:
    count: int
    syllables: Tuple[Tuple[_Choice, ...], ...]
    radices: Tuple[int, ...]
    size: int


@dataclass
class DecodedWord:
    """A combination decoded from an enumeration index."""
    index: int
    syllables: List[List[str]]
    patterns: List[SyllablePattern]

    @property
    def phonemes(self) -> List[str]:
        return [p for syllable in self.syllables for p in syllable]


def _product(values: Sequence[int]) -> int:
    total = 1
    for v in values:
        total *= v
    return total


class SequentialEnumeration:
    """Immutable index space over every word a WordSpec can describe."""

    def __init__(self, inventory: PhonemeInventory, spec: WordSpec):
        self.inventory = inventory
        self.spec = spec
        self._blocks: List[_CountBlock] = [self._block(count) for count in spec.count_policy.counts()]
        self.size = sum(block.size for block in self._blocks)

    def _block(self, count: int) -> _CountBlock:
        positions = positions_for(count)
        syllables = []
        for i, position in enumerate(positions):
            starts_word, ends_word = i == 0, i == count - 1
            choices = []
            for pattern in self.spec.eligible_templates(position):
                slots = tuple(pattern.enumeration_slots(self.inventory, starts_word, ends_word))
                size = _product([len(s.options) for s in slots])
                if size:
                    choices.append(_Choice(pattern, slots, size))
            syllables.append(tuple(choices))
        radices = tuple(sum(c.size for c in choices) for choices in syllables)
        return _CountBlock(count, tuple(syllables), radices, _product(radices))

    def __len__(self) -> int:
        return self.size

    def decode(self, index: int) -> Optional[DecodedWord]:
        """
        Decode ``index`` into a word, or ``None`` if the combination is one a
        random draw would never produce (avoidable repeats, constraint hits).

        Raises:
            IndexError: index outside ``0 <= index < size``
        """
        if not 0 <= index < self.size:
            raise IndexError(f"Enumeration index {index} out of range (size {self.size})")

        offset = index
        for block in self._blocks:
            if offset < block.size:
                break
            offset -= block.size

        digits = [0] * block.count
        for i in reversed(range(block.count)):
            offset, digits[i] = divmod(offset, block.radices[i])

        syllables: List[List[str]] = []
        patterns: List[SyllablePattern] = []
        for choices, digit in zip(block.syllables, digits):
            for choice in choices:
                if digit < choice.size:
                    break
                digit -= choice.size

            picked = [()] * len(choice.slots)
            for j in reversed(range(len(choice.slots))):
                options = choice.slots[j].options
                digit, k = divmod(digit, len(options))
                picked[j] = options[k]

            if not SyllablePattern.accepts_choice(choice.slots, picked):
                return None
            phonemes = [p for option in picked for p in option]
            if not choice.pattern.validate(phonemes):
                return None
            syllables.append(phonemes)
            patterns.append(choice.pattern)

        return DecodedWord(index, syllables, patterns)


__all__ = ["SequentialEnumeration", "DecodedWord"]
