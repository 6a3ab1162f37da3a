"""
Tests for Romanization
======================
Tests for the phoneme-to-grapheme table in lexiforge/romanization.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lexiforge.romanization import RomanizationMap, longest_match_segment


@pytest.fixture
def table():
    """Table with multi-character outputs."""
    return RomanizationMap({'θ': 'th', 'ʃ': 'sh', 'ɑ': 'a'})


class TestRomanize:
    """Tests for romanize."""

    def test_mapped(self, table):
        """Mapped symbols are substituted."""
        assert table.romanize(['θ', 'ɑ', 'ʃ']) == 'thash'

    def test_unmapped_pass_through(self, table):
        """Unmapped symbols pass through unchanged."""
        assert table.romanize(['k', 'ɑ']) == 'ka'

    def test_empty_table(self):
        """An empty table is the identity join."""
        assert RomanizationMap().romanize(['t', 'a']) == 'ta'

    def test_multi_character_symbols(self):
        """Symbols may be longer than one character."""
        assert RomanizationMap({'aː': 'aa'}).romanize(['t', 'aː']) == 'taa'

    def test_mapping_helpers(self, table):
        """has_mapping, get and len."""
        assert table.has_mapping('θ')
        assert not table.has_mapping('k')
        assert table.get('k') == 'k'
        assert len(table) == 3

    def test_empty_phoneme_rejected(self):
        """Mapping an empty phoneme is an error."""
        with pytest.raises(ValueError):
            RomanizationMap({'': 'x'})


class TestSegment:
    """Tests for segment and invertibility."""

    def test_longest_match(self):
        """Longer keys win over shorter prefixes."""
        assert longest_match_segment('tsa', {'t': 't', 'ts': 'ts', 'a': 'a'}) == ['ts', 'a']

    def test_unknown_characters(self):
        """Characters with no key come through singly."""
        assert longest_match_segment('xy', {'ab': 'c'}) == ['x', 'y']

    def test_segment_reverses_romanize(self, table):
        """segment undoes romanize for unambiguous tables."""
        phonemes = ['θ', 'ɑ', 'r', 'ɑ']
        assert table.segment(table.romanize(phonemes), ['θ', 'ɑ', 'r']) == phonemes

    def test_first_mapping_wins(self):
        """When two phonemes share a romanization the first owns it."""
        table = RomanizationMap({'a': 'x', 'b': 'x'})
        assert table.reverse_table() == {'x': 'a'}
        assert table.is_invertible(['a'])
        assert not table.is_invertible(['b'])

    def test_digraph_collision(self):
        """A sequence that reads as a longer symbol is not invertible."""
        table = RomanizationMap()
        known = ['t', 's', 'ts', 'a']
        assert not table.is_invertible(['t', 's', 'a'], known)
        assert table.is_invertible(['ts', 'a'], known)
