"""
Tests for Phoneme Inventory
===========================
Tests for registration, classification, groups and weighted positional
sampling in lexiforge/phonemes.py, plus the IPA tables and random source.
"""

import pytest
import sys
from collections import Counter
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lexiforge.entropy import RandomSource, get_rng, seed_global
from lexiforge.errors import (
    ConfigurationError,
    NoCandidatesError,
    ReservedSymbolError,
    UnknownGroupError,
    UnknownPhonemeError,
)
from lexiforge.ipa import base_symbol, is_ipa_consonant, is_ipa_vowel, lookup_vowel
from lexiforge.phonemes import PhonemeClass, PhonemeInventory, Position, as_positions


@pytest.fixture
def rng():
    """Seeded random source."""
    return RandomSource(42)


@pytest.fixture
def inventory():
    """Small inventory with one position-restricted consonant."""
    inv = PhonemeInventory(consonants=['p', 't', 'k', 'ŋ'], vowels=['a', 'e', 'i'])
    inv.allow_positions('ŋ', [Position.WORD_FINAL])
    return inv


class TestRegistration:
    """Tests for adding phonemes, weights and positions."""

    def test_declaration_order_kept(self, inventory):
        """Consonants and vowels keep declaration order."""
        assert inventory.consonants == ['p', 't', 'k', 'ŋ']
        assert inventory.vowels == ['a', 'e', 'i']

    def test_duplicate_is_ignored(self):
        """Registering a symbol twice keeps one entry."""
        inv = PhonemeInventory(consonants=['p', 'p'], vowels=['a'])
        assert inv.consonants == ['p']

    def test_symbol_in_both_classes_rejected(self):
        """A symbol cannot be both a consonant and a vowel."""
        with pytest.raises(ConfigurationError):
            PhonemeInventory(consonants=['a'], vowels=['a'])

    def test_default_weight(self, inventory):
        """Unweighted symbols weigh 1.0."""
        assert inventory.weight_of('p') == 1.0

    def test_negative_weight_rejected(self, inventory):
        """Negative weights are a configuration error."""
        with pytest.raises(ConfigurationError):
            inventory.set_weight('p', -1.0)

    def test_empty_position_restriction_rejected(self, inventory):
        """An empty allow set is a configuration error."""
        with pytest.raises(ConfigurationError):
            inventory.allow_positions('p', [])

    def test_positions_from_strings(self):
        """Position names are accepted in place of enum members."""
        assert as_positions('word_final') == frozenset({Position.WORD_FINAL})
        assert as_positions(['word_initial', Position.SYLLABLE_FINAL]) == frozenset(
            {Position.WORD_INITIAL, Position.SYLLABLE_FINAL})
        assert as_positions(None) is None


class TestGroups:
    """Tests for custom symbol groups."""

    def test_reserved_ids_rejected(self, inventory):
        """C and V cannot be redefined."""
        with pytest.raises(ReservedSymbolError):
            inventory.add_group('C', ['p'])
        with pytest.raises(ReservedSymbolError):
            inventory.add_group('V', ['a'])

    def test_reserved_error_is_configuration_error(self, inventory):
        """ReservedSymbolError is a ConfigurationError."""
        with pytest.raises(ConfigurationError):
            inventory.add_group('V', ['a'])

    def test_multi_character_id_rejected(self, inventory):
        """Group ids are single characters."""
        with pytest.raises(ConfigurationError):
            inventory.add_group('NN', ['p'])

    def test_unknown_member_rejected(self, inventory):
        """Members must classify as consonant or vowel."""
        with pytest.raises(UnknownPhonemeError):
            inventory.add_group('X', ['#'])

    def test_builtin_groups(self, inventory):
        """C and V resolve to the inventory classes."""
        assert inventory.group_members('C') == inventory.consonants
        assert inventory.group_members('V') == inventory.vowels

    def test_unknown_group(self, inventory):
        """Looking up an undeclared group raises UnknownGroupError."""
        with pytest.raises(UnknownGroupError):
            inventory.group_members('Z')

    def test_vowel_like_group(self):
        """A group of IPA vowels is vowel-like even if they are unregistered."""
        inv = PhonemeInventory(consonants=['t'], vowels=['a'], groups={'O': ['o', 'u'], 'N': ['m', 'n']})
        assert inv.is_vowel_like_group('O')
        assert not inv.is_vowel_like_group('N')
        assert 'o' in inv.all_symbols

    def test_group_sampling_stays_in_group(self, rng):
        """sample_group only returns members."""
        inv = PhonemeInventory(consonants=['t', 'm', 'n'], vowels=['a'], groups={'N': ['m', 'n']})
        for _ in range(50):
            assert inv.sample_group('N', rng=rng) in ('m', 'n')


class TestClassification:
    """Tests for vowel/consonant classification."""

    def test_registered_symbols_win(self):
        """Configured class takes precedence over the IPA table."""
        inv = PhonemeInventory(consonants=['y'], vowels=['a'])
        assert not inv.is_vowel('y')
        assert inv.is_consonant('y')

    def test_ipa_fallback(self, inventory):
        """Unregistered symbols fall back to the IPA table."""
        assert inventory.is_vowel('o')
        assert inventory.is_consonant('ʃ')
        assert inventory.classify('#') is None

    def test_classify(self, inventory):
        """classify returns a PhonemeClass."""
        assert inventory.classify('a') is PhonemeClass.VOWEL
        assert inventory.classify('t') is PhonemeClass.CONSONANT


class TestSampling:
    """Tests for weighted, position-aware sampling."""

    def test_weighted_sampling_prefers_heavy_phoneme(self, rng):
        """A heavily weighted phoneme dominates 100 draws."""
        inv = PhonemeInventory(consonants=['p', 't'], vowels=['a'], weights={'p': 50.0, 't': 1.0})
        counts = Counter(inv.sample(PhonemeClass.CONSONANT, rng=rng) for _ in range(100))
        assert counts['p'] > counts['t']

    def test_zero_weight_never_drawn(self, rng):
        """Zero-weight phonemes are excluded."""
        inv = PhonemeInventory(consonants=['p', 't'], vowels=['a'], weights={'t': 0.0})
        assert {inv.sample('consonant', rng=rng) for _ in range(50)} == {'p'}

    def test_position_filter(self, inventory, rng):
        """A word-final-only phoneme never appears word-initially."""
        for _ in range(100):
            assert inventory.sample(PhonemeClass.CONSONANT, Position.WORD_INITIAL, rng) != 'ŋ'

    def test_position_allows_match(self, inventory):
        """A restricted phoneme is a candidate at its allowed position."""
        assert 'ŋ' in inventory.candidates(PhonemeClass.CONSONANT, Position.WORD_FINAL)
        assert 'ŋ' not in inventory.candidates(PhonemeClass.CONSONANT, Position.WORD_MEDIAL)

    def test_any_tag_qualifies(self, inventory):
        """A phoneme qualifies when any slot tag is in its allow set."""
        tags = [Position.SYLLABLE_FINAL, Position.WORD_FINAL]
        assert inventory.is_allowed('ŋ', tags)

    def test_no_candidates(self):
        """An empty filtered set raises NoCandidatesError."""
        inv = PhonemeInventory(consonants=['ŋ'], vowels=['a'], positions={'ŋ': ['word_final']})
        with pytest.raises(NoCandidatesError):
            inv.sample(PhonemeClass.CONSONANT, Position.WORD_INITIAL)

    def test_exclude(self, rng):
        """Excluded phonemes are avoided while alternatives exist."""
        inv = PhonemeInventory(consonants=['t'], vowels=['a', 'e'])
        assert {inv.sample('vowel', rng=rng, exclude=['a']) for _ in range(30)} == {'e'}

    def test_exclude_everything_falls_back(self, rng):
        """Excluding the only candidate still returns it."""
        inv = PhonemeInventory(consonants=['t'], vowels=['a'])
        assert inv.sample('vowel', rng=rng, exclude=['a']) == 'a'

    def test_bias_scales_weights(self, rng):
        """A zero bias removes a candidate when others remain weighted."""
        inv = PhonemeInventory(consonants=['t'], vowels=['a', 'e'])
        assert {inv.sample('vowel', rng=rng, bias={'a': 0.0}) for _ in range(30)} == {'e'}


class TestIPA:
    """Tests for the static IPA tables."""

    def test_vowels(self):
        """Cardinal vowels are recognized."""
        assert is_ipa_vowel('a')
        assert is_ipa_vowel('ɛ')
        assert not is_ipa_vowel('t')

    def test_consonants(self):
        """Common consonants are recognized."""
        assert is_ipa_consonant('θ')
        assert not is_ipa_consonant('a')

    def test_diacritics_stripped(self):
        """Length marks do not change the class."""
        assert base_symbol('aː') == 'a'
        assert lookup_vowel('aː').symbol == 'a'


class TestRandomSource:
    """Tests for lexiforge/entropy.py."""

    def test_seeded_reproducible(self):
        """Equal seeds give equal sequences."""
        a, b = RandomSource(7), RandomSource(7)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_weighted_choice_skips_zero(self, rng):
        """Zero-weight items are never chosen."""
        assert {rng.weighted_choice([('x', 0.0), ('y', 1.0)]) for _ in range(20)} == {'y'}

    def test_weighted_choice_needs_positive_weight(self, rng):
        """All-zero weights raise ValueError."""
        with pytest.raises(ValueError):
            rng.weighted_choice([('x', 0.0)])

    def test_chance_edges(self, rng):
        """Probabilities 0 and 1 are deterministic."""
        assert not rng.chance(0.0)
        assert rng.chance(1.0)

    def test_choice_empty(self, rng):
        """Choosing from an empty sequence raises IndexError."""
        with pytest.raises(IndexError):
            rng.choice([])

    def test_seed_global(self):
        """seed_global replaces the process-wide source."""
        source = seed_global(3)
        assert get_rng() is source
        assert source.seed == 3
        seed_global(None)
