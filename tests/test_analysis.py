"""
Tests for Word Analysis
=======================
Tests for single-word metrics, corpus statistics, Gusein-Zade smoothing
and vowel harmony in lexiforge/analysis.py and lexiforge/harmony.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lexiforge.analysis import (
    Analysis,
    Analyzer,
    WordAnalyzer,
    gusein_zade_weights,
    smooth_frequencies,
)
from lexiforge.entropy import RandomSource
from lexiforge.errors import ConfigurationError
from lexiforge.harmony import VowelHarmony
from lexiforge.languages import builder_for
from lexiforge.phonemes import PhonemeInventory
from lexiforge.romanization import RomanizationMap
from lexiforge.syllables import SyllablePattern


@pytest.fixture
def analyzer():
    """Analyzer without a romanization table."""
    return WordAnalyzer()


class TestWordAnalyzer:
    """Tests for WordAnalyzer.analyze."""

    def test_open_syllables(self, analyzer):
        """CV.CV words split into two CV syllables."""
        result = analyzer.analyze('tala')
        assert result.phonemes == ['t', 'a', 'l', 'a']
        assert result.syllables == [['t', 'a'], ['l', 'a']]
        assert result.syllable_patterns == ['CV', 'CV']
        assert result.complexity_score == 2

    def test_closed_syllable_split(self, analyzer):
        """VC.CV splits between the consonants."""
        result = analyzer.analyze('kanta')
        assert result.syllable_patterns == ['CVC', 'CV']
        assert result.clusters == ['nt']
        assert result.complexity_score == 7

    def test_hiatus(self, analyzer):
        """Adjacent vowels are a hiatus sequence."""
        result = analyzer.analyze('kae')
        assert result.hiatus_sequences == ['ae']
        assert result.syllable_patterns == ['CVV']
        assert result.has_hiatus
        assert result.complexity_score == 5

    def test_gemination_and_lengthening(self, analyzer):
        """Doubled consonants and vowels are detected."""
        assert analyzer.analyze('kappa').gemination_sequences == ['pp']
        assert analyzer.analyze('taa').vowel_lengthening_sequences == ['aa']
        assert not analyzer.analyze('tala').has_gemination

    def test_romanization_segments(self):
        """Words are re-segmented through the romanization table."""
        result = WordAnalyzer(RomanizationMap({'θ': 'th'})).analyze('thara')
        assert result.phonemes == ['θ', 'a', 'r', 'a']
        assert result.syllable_patterns == ['CV', 'CV']

    def test_positions_and_ngrams(self, analyzer):
        """Positions, bigrams and trigrams are recorded."""
        result = analyzer.analyze('tal')
        assert result.phoneme_positions == {'t': ['initial'], 'a': ['medial'], 'l': ['final']}
        assert result.bigrams == ['ta', 'al']
        assert result.trigrams == ['tal']

    def test_counts(self, analyzer):
        """Consonant and vowel counts."""
        result = analyzer.analyze('strata')
        assert result.consonant_count == 4
        assert result.vowel_count == 2
        assert result.consonant_vowel_ratio == pytest.approx(2.0)


class TestRoundTrip:
    """Tests that generated words re-segment to their phonemes."""

    @pytest.mark.parametrize("language", ['simple', 'elvish', 'finnic'])
    def test_round_trip(self, language):
        """romanize(analyze(word).phonemes) == word for generated words."""
        gen = builder_for(language).with_random_source(RandomSource(42)).build()
        analyzer = WordAnalyzer(gen.romanizer, gen.inventory)
        for _ in range(50):
            result = gen.generate_word()
            analysis = analyzer.analyze(result.word)
            assert analysis.phonemes == result.phonemes
            assert gen.romanizer.romanize(analysis.phonemes) == result.word


class TestGuseinZade:
    """Tests for the rank-frequency model."""

    def test_weights_decreasing(self):
        """Weights decrease with rank and sum to 1."""
        weights = gusein_zade_weights(6)
        assert len(weights) == 6
        assert all(a > b for a, b in zip(weights, weights[1:]))
        assert sum(weights) == pytest.approx(1.0)

    def test_empty(self):
        """No ranks, no weights."""
        assert gusein_zade_weights(0) == []

    def test_smoothing_normalized(self):
        """Smoothed frequencies still sum to 1."""
        smoothed = smooth_frequencies({'a': 0.7, 'b': 0.2, 'c': 0.1}, 0.5)
        assert sum(smoothed.values()) == pytest.approx(1.0)
        assert smoothed['a'] > smoothed['b'] > smoothed['c']

    def test_smoothing_flattens(self):
        """Smoothing pulls an extreme distribution toward the model."""
        raw = {'a': 0.98, 'b': 0.01, 'c': 0.01}
        assert smooth_frequencies(raw, 0.5)['a'] < raw['a']


class TestAnalyzer:
    """Tests for corpus-level Analysis."""

    @pytest.fixture
    def analysis(self):
        """Analysis of a small corpus."""
        words = ['tala', 'kanta', 'lae', 'tappa', 'mira', 'torun']
        return Analyzer().analyze(words)

    def test_empty(self):
        """An empty corpus gives a default Analysis."""
        assert Analyzer().analyze([]) == Analysis()

    def test_frequencies(self, analysis):
        """Phoneme frequencies are relative."""
        assert analysis.word_count == 6
        assert sum(analysis.phoneme_frequencies.values()) == pytest.approx(1.0)
        assert analysis.most_frequent_phonemes(1) == ['a']

    def test_smoothing_option(self):
        """Smoothed frequencies are still normalized."""
        analysis = Analyzer().analyze(['tala', 'kanta'], smoothing=True, smoothing_factor=0.4)
        assert sum(analysis.phoneme_frequencies.values()) == pytest.approx(1.0)

    def test_distributions(self, analysis):
        """Pattern and count distributions sum to 1."""
        assert sum(analysis.syllable_pattern_distribution.values()) == pytest.approx(1.0)
        assert sum(analysis.syllable_count_distribution.values()) == pytest.approx(1.0)
        assert 'CV' in analysis.dominant_patterns

    def test_structures(self, analysis):
        """Clusters, hiatus and gemination are aggregated."""
        assert 'nt' in analysis.cluster_patterns
        assert 'ae' in analysis.hiatus_patterns
        assert 'pp' in analysis.gemination_patterns

    def test_recommendations(self, analysis):
        """Recommendations stay within their bounds."""
        assert 3 <= analysis.recommended_budget <= 15
        assert 'CV' in analysis.recommended_templates
        assert 'CVC' in analysis.recommended_templates
        assert 0.0 <= analysis.recommended_hiatus_probability <= 0.8
        assert 0.0 < analysis.recommended_gemination_probability <= 0.8

    def test_templates_override(self):
        """Known templates replace the pattern-based recommendation."""
        analyzer = Analyzer().with_templates([SyllablePattern('CV', hiatus_probability=0.4)])
        analysis = analyzer.analyze(['tala'])
        assert analysis.recommended_templates == ['CV']
        assert analysis.recommended_hiatus_probability == pytest.approx(0.4)

    def test_positional(self, analysis):
        """Initial and final phoneme lists."""
        assert 't' in analysis.initial_phonemes()
        assert 'a' in analysis.final_phonemes()

    def test_transitions(self, analysis):
        """Phoneme transitions are relative per source."""
        assert analysis.transition_probability('t', 'a') > 0
        assert sum(analysis.phoneme_transitions['t'].values()) == pytest.approx(1.0)

    def test_diversity_and_preference(self, analysis):
        """Entropy is positive and the preference is a known label."""
        assert analysis.phoneme_diversity() > 0
        assert analysis.complexity_preference() in ('simple', 'moderate', 'complex')

    def test_syllable_weights(self, analysis):
        """Optimal syllable weights are normalized."""
        assert sum(analysis.optimal_syllable_weights().values()) == pytest.approx(1.0)

    def test_summary_and_dict(self, analysis):
        """summary and to_dict render."""
        assert "Words analyzed: 6" in analysis.summary()
        assert analysis.to_dict()['word_count'] == 6


class TestVowelHarmony:
    """Tests for VowelHarmony."""

    def test_default_without_rule(self):
        """Transitions without a rule use the default preference."""
        assert VowelHarmony(strength=1.0).transition_weight('a', 'e') == 0.5

    def test_interpolation(self):
        """Strength interpolates between default and rule."""
        harmony = VowelHarmony({'a': {'e': 1.0}}, strength=0.5)
        assert harmony.transition_weight('a', 'e') == pytest.approx(0.75)

    def test_strength_range(self):
        """Strength outside [0, 1] is rejected."""
        with pytest.raises(ConfigurationError):
            VowelHarmony(strength=1.5)

    def test_inactive(self):
        """No rules or zero strength means inactive."""
        assert not VowelHarmony().is_active
        assert not VowelHarmony({'a': {'e': 1.0}}, strength=0.0).is_active

    def test_preferred_and_avoided(self):
        """Rules rank preferred and avoided vowels."""
        harmony = VowelHarmony(strength=1.0)
        harmony.add_rule('a', 'e', 0.9)
        harmony.add_rule('a', 'i', 0.1)
        assert harmony.preferred_vowels('a', 1) == ['e']
        assert harmony.avoided_vowels('a', 1) == ['i']

    def test_bias_steers_sampling(self):
        """A full-strength rule steers inventory sampling through bias."""
        harmony = VowelHarmony({'a': {'a': 0.0, 'e': 1.0}}, strength=1.0)
        inv = PhonemeInventory(consonants=['t'], vowels=['a', 'e'])
        bias = harmony.bias('a', inv.vowels)
        assert bias == {'a': 0.0, 'e': 1.0}
        rng = RandomSource(42)
        assert {inv.sample('vowel', rng=rng, bias=bias) for _ in range(20)} == {'e'}

    def test_from_analysis(self):
        """Harmony rules derive from vowel transitions above the threshold."""
        analysis = Analyzer().analyze(['tale', 'tale', 'tali'])
        harmony = analysis.generate_vowel_harmony(strength=0.7, threshold=0.1)
        assert harmony.is_active
        assert harmony.preferred_vowels('a', 1) == ['e']
