#!/usr/bin/env python3
"""
Word Analysis
=============
Reverse-engineers structure and statistics from romanized words.

WordAnalyzer re-segments a single word into phonemes (longest match first
against the romanization table) and measures its syllables, clusters, hiatus,
gemination and vowel lengthening. Analyzer aggregates many words into an
Analysis: frequency tables, distributions and generation recommendations,
optionally smoothing phoneme frequencies with the Gusein-Zade rank model.

Usage:
    from lexiforge.analysis import Analyzer
    from lexiforge.romanization import RomanizationMap

    analysis = Analyzer(RomanizationMap({'θ': 'th'})).analyze(['thara', 'elen'])
    print(analysis.summary())
"""

import math
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .harmony import VowelHarmony
from .ipa import is_ipa_vowel
from .phonemes import PhonemeInventory
from .romanization import RomanizationMap, longest_match_segment
from .settings import get_setting
from .syllables import SyllablePattern

PATTERN_COMPLEXITY = {
    'CV': 1,
    'CVC': 2,
    'CCV': 3,
    'CVV': 3,
    'CCVC': 4,
    'CVCC': 4,
}


# =============================================================================
# Gusein-Zade
# =============================================================================

def gusein_zade_weights(n: int) -> List[float]:
    """
    Rank-frequency weights ``w_r = ln(n + 1) - ln(r)`` for ranks 1..n,
    normalized to sum to 1.
    """
    if n <= 0:
        return []
    raw = [math.log(n + 1) - math.log(r) for r in range(1, n + 1)]
    total = sum(raw)
    return [w / total for w in raw]


def smooth_frequencies(frequencies: Dict[str, float], smoothing_factor: float) -> Dict[str, float]:
    """Blend empirical frequencies with Gusein-Zade weights by rank, then renormalize."""
    if not frequencies:
        return {}
    factor = min(max(smoothing_factor, 0.0), 1.0)
    ranked = sorted(frequencies, key=lambda p: -frequencies[p])
    theoretical = dict(zip(ranked, gusein_zade_weights(len(ranked))))
    smoothed = {p: (1.0 - factor) * f + factor * theoretical[p] for p, f in frequencies.items()}
    total = sum(smoothed.values())
    if total > 0:
        smoothed = {p: v / total for p, v in smoothed.items()}
    return smoothed


def _relative(counts: Counter) -> Dict:
    total = sum(counts.values())
    if not total:
        return {}
    return {key: count / total for key, count in counts.items()}


def _top(frequencies: Dict, count: int) -> List:
    return [key for key, _ in sorted(frequencies.items(), key=lambda kv: -kv[1])[:count]]


def _entropy(frequencies: Dict[str, float]) -> float:
    return -sum(f * math.log2(f) for f in frequencies.values() if f > 0)


# =============================================================================
# Single Word
# =============================================================================

@dataclass
class WordAnalysis:
    """Structural metrics for one word."""
    word: str
    phonemes: List[str]
    syllables: List[List[str]]
    syllable_patterns: List[str]
    clusters: List[str] = field(default_factory=list)
    hiatus_sequences: List[str] = field(default_factory=list)
    gemination_sequences: List[str] = field(default_factory=list)
    vowel_lengthening_sequences: List[str] = field(default_factory=list)
    consonant_count: int = 0
    vowel_count: int = 0
    complexity_score: int = 0
    phoneme_positions: Dict[str, List[str]] = field(default_factory=dict)
    bigrams: List[str] = field(default_factory=list)
    trigrams: List[str] = field(default_factory=list)

    @property
    def syllable_count(self) -> int:
        return len(self.syllables)

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)

    @property
    def hiatus_count(self) -> int:
        return len(self.hiatus_sequences)

    @property
    def has_clusters(self) -> bool:
        return bool(self.clusters)

    @property
    def has_hiatus(self) -> bool:
        return bool(self.hiatus_sequences)

    @property
    def has_gemination(self) -> bool:
        return bool(self.gemination_sequences)

    @property
    def has_vowel_lengthening(self) -> bool:
        return bool(self.vowel_lengthening_sequences)

    @property
    def consonant_vowel_ratio(self) -> float:
        return self.consonant_count / self.vowel_count if self.vowel_count else 0.0

    @property
    def average_syllable_complexity(self) -> float:
        return self.complexity_score / self.syllable_count if self.syllable_count else 0.0

    @property
    def dominant_pattern(self) -> Optional[str]:
        if not self.syllable_patterns:
            return None
        return Counter(self.syllable_patterns).most_common(1)[0][0]

    def summary(self) -> str:
        return (f"{self.word}: {self.syllable_count} syllables "
                f"({'.'.join(self.syllable_patterns)}), complexity {self.complexity_score}, "
                f"clusters {self.clusters or '-'}, hiatus {self.hiatus_sequences or '-'}")

    def to_dict(self) -> Dict:
        return asdict(self)


class WordAnalyzer:
    """
    Analyzes single romanized words.

    Args:
        romanization: Table used to re-segment surface strings
        inventory: Optional inventory for classification and identity symbols;
            without it the IPA table classifies vowels
    """

    def __init__(self, romanization: Optional[RomanizationMap] = None,
                 inventory: Optional[PhonemeInventory] = None):
        self.romanization = romanization or RomanizationMap()
        self.inventory = inventory
        known = inventory.all_symbols if inventory is not None else ()
        self._table = self.romanization.reverse_table(known)

    def is_vowel(self, phoneme: str) -> bool:
        if self.inventory is not None:
            return self.inventory.is_vowel(phoneme)
        if phoneme in self.romanization.mappings:
            return is_ipa_vowel(phoneme) or is_ipa_vowel(self.romanization.get(phoneme))
        return is_ipa_vowel(phoneme)

    def segment(self, word: str) -> List[str]:
        return longest_match_segment(word, self._table)

    def analyze(self, word: str) -> WordAnalysis:
        phonemes = self.segment(word)
        vowel_flags = [self.is_vowel(p) for p in phonemes]
        syllables = self.syllabify(phonemes, vowel_flags)
        patterns = [''.join('V' if self.is_vowel(p) else 'C' for p in s) for s in syllables]

        clusters = self._runs(phonemes, vowel_flags, want_vowels=False)
        hiatus = self._runs(phonemes, vowel_flags, want_vowels=True)
        gemination = self._doubles(phonemes, vowel_flags, want_vowels=False)
        lengthening = self._doubles(phonemes, vowel_flags, want_vowels=True)

        score = sum(len(run) * 2 for run in clusters)
        score += sum(len(run) for run in hiatus)
        score += sum(PATTERN_COMPLEXITY.get(p, len(p)) for p in patterns)

        positions: Dict[str, List[str]] = defaultdict(list)
        for i, phoneme in enumerate(phonemes):
            if i == 0:
                positions[phoneme].append('initial')
            elif i == len(phonemes) - 1:
                positions[phoneme].append('final')
            else:
                positions[phoneme].append('medial')

        return WordAnalysis(
            word=word,
            phonemes=phonemes,
            syllables=syllables,
            syllable_patterns=patterns,
            clusters=[''.join(run) for run in clusters],
            hiatus_sequences=[''.join(run) for run in hiatus],
            gemination_sequences=gemination,
            vowel_lengthening_sequences=lengthening,
            consonant_count=vowel_flags.count(False),
            vowel_count=vowel_flags.count(True),
            complexity_score=score,
            phoneme_positions=dict(positions),
            bigrams=[''.join(phonemes[i:i + 2]) for i in range(len(phonemes) - 1)],
            trigrams=[''.join(phonemes[i:i + 3]) for i in range(len(phonemes) - 2)],
        )

    @staticmethod
    def syllabify(phonemes: Sequence[str], vowel_flags: Sequence[bool]) -> List[List[str]]:
        """
        Split at V.CV and VC.CV(C...) boundaries. Adjacent vowels share a
        nucleus; leading and trailing consonants join the edge syllables.
        """
        if not phonemes:
            return []
        nuclei: List[Tuple[int, int]] = []
        i = 0
        while i < len(phonemes):
            if vowel_flags[i]:
                start = i
                while i < len(phonemes) and vowel_flags[i]:
                    i += 1
                nuclei.append((start, i))
            else:
                i += 1
        if len(nuclei) <= 1:
            return [list(phonemes)]

        cuts = []
        for (_, end), (next_start, _) in zip(nuclei, nuclei[1:]):
            between = next_start - end
            cuts.append(end if between <= 1 else end + 1)

        syllables = []
        previous = 0
        for cut in cuts:
            syllables.append(list(phonemes[previous:cut]))
            previous = cut
        syllables.append(list(phonemes[previous:]))
        return [s for s in syllables if s]

    @staticmethod
    def _runs(phonemes, vowel_flags, want_vowels: bool) -> List[List[str]]:
        runs: List[List[str]] = []
        current: List[str] = []
        for phoneme, is_vowel in zip(phonemes, vowel_flags):
            if is_vowel == want_vowels:
                current.append(phoneme)
                continue
            if len(current) > 1:
                runs.append(current)
            current = []
        if len(current) > 1:
            runs.append(current)
        return runs

    @staticmethod
    def _doubles(phonemes, vowel_flags, want_vowels: bool) -> List[str]:
        found: List[str] = []
        i = 0
        while i < len(phonemes) - 1:
            j = i + 1
            while j < len(phonemes) and phonemes[j] == phonemes[i]:
                j += 1
            if j - i > 1 and vowel_flags[i] == want_vowels:
                found.append(''.join(phonemes[i:j]))
            i = j
        return found


# =============================================================================
# Aggregate
# =============================================================================

@dataclass
class Analysis:
    """Aggregate statistics over a word list."""
    word_count: int = 0
    phoneme_frequencies: Dict[str, float] = field(default_factory=dict)
    positional_frequencies: Dict[str, Dict[str, float]] = field(default_factory=dict)
    syllable_count_distribution: Dict[int, float] = field(default_factory=dict)
    syllable_pattern_distribution: Dict[str, float] = field(default_factory=dict)
    cluster_patterns: Dict[str, float] = field(default_factory=dict)
    hiatus_patterns: Dict[str, float] = field(default_factory=dict)
    gemination_patterns: Dict[str, float] = field(default_factory=dict)
    vowel_lengthening_patterns: Dict[str, float] = field(default_factory=dict)
    vowel_transitions: Dict[str, Dict[str, float]] = field(default_factory=dict)
    phoneme_transitions: Dict[str, Dict[str, float]] = field(default_factory=dict)
    bigram_frequencies: Dict[str, float] = field(default_factory=dict)
    trigram_frequencies: Dict[str, float] = field(default_factory=dict)
    complexity_distribution: Dict[int, float] = field(default_factory=dict)
    average_complexity: float = 0.0
    average_syllable_count: float = 0.0
    consonant_vowel_ratio: float = 0.0
    recommended_budget: int = 3
    recommended_templates: List[str] = field(default_factory=lambda: ['CV', 'CVC'])
    recommended_hiatus_probability: float = 0.0
    recommended_gemination_probability: float = 0.0
    dominant_patterns: List[str] = field(default_factory=list)

    def most_frequent_phonemes(self, count: int = 10) -> List[str]:
        return _top(self.phoneme_frequencies, count)

    def most_frequent_patterns(self, count: int = 5) -> List[str]:
        return _top(self.syllable_pattern_distribution, count)

    def most_frequent_clusters(self, count: int = 10) -> List[str]:
        return _top(self.cluster_patterns, count)

    def most_frequent_bigrams(self, count: int = 10) -> List[str]:
        return _top(self.bigram_frequencies, count)

    def most_frequent_trigrams(self, count: int = 10) -> List[str]:
        return _top(self.trigram_frequencies, count)

    def _positional(self, position: str, threshold: float) -> List[str]:
        hits = {p: f[position] for p, f in self.positional_frequencies.items()
                if f.get(position, 0.0) >= threshold}
        return _top(hits, len(hits))

    def initial_phonemes(self, threshold: float = 0.1) -> List[str]:
        return self._positional('initial', threshold)

    def final_phonemes(self, threshold: float = 0.1) -> List[str]:
        return self._positional('final', threshold)

    def transition_probability(self, from_phoneme: str, to_phoneme: str) -> float:
        return self.phoneme_transitions.get(from_phoneme, {}).get(to_phoneme, 0.0)

    def phoneme_diversity(self) -> float:
        """Shannon entropy (bits) of the phoneme distribution."""
        return _entropy(self.phoneme_frequencies)

    def structural_complexity(self) -> float:
        return (len(self.cluster_patterns) * 0.3
                + len(self.hiatus_patterns) * 0.2
                + len(self.syllable_pattern_distribution) * 0.1
                + self.average_complexity * 0.1)

    def complexity_preference(self) -> str:
        if self.average_complexity < 4.0:
            return 'simple'
        if self.average_complexity < 8.0:
            return 'moderate'
        return 'complex'

    def optimal_syllable_weights(self) -> Dict[int, float]:
        total = sum(self.syllable_count_distribution.values())
        if not total:
            return {2: 1.0, 3: 1.0}
        return {count: freq / total for count, freq in self.syllable_count_distribution.items()}

    def generate_vowel_harmony(self, strength: Optional[float] = None,
                               threshold: Optional[float] = None) -> VowelHarmony:
        """Harmony rules from vowel transitions at or above ``threshold``."""
        if strength is None:
            strength = get_setting('analysis.harmony_strength', 0.7)
        if threshold is None:
            threshold = get_setting('analysis.harmony_threshold', 0.1)
        rules = {}
        for from_vowel, transitions in self.vowel_transitions.items():
            significant = {v: f for v, f in transitions.items() if f >= threshold}
            if significant:
                rules[from_vowel] = significant
        return VowelHarmony(rules, strength)

    def summary(self) -> str:
        lines = [
            "=== Language Analysis Summary ===",
            f"Words analyzed: {self.word_count}",
            f"Phoneme count: {len(self.phoneme_frequencies)}",
            f"Average syllable count: {self.average_syllable_count:.2f}",
            f"Average complexity: {self.average_complexity:.2f}",
            f"Consonant/vowel ratio: {self.consonant_vowel_ratio:.2f}",
            f"Complexity preference: {self.complexity_preference()}",
            f"Recommended budget: {self.recommended_budget}",
            "",
            f"Most frequent phonemes: {', '.join(self.most_frequent_phonemes(5))}",
            f"Most frequent patterns: {', '.join(self.most_frequent_patterns(3))}",
            f"Most frequent clusters: {', '.join(self.most_frequent_clusters(3))}",
            "",
            f"Structural complexity: {self.structural_complexity():.2f}",
            f"Phoneme diversity: {self.phoneme_diversity():.2f}",
        ]
        return '\n'.join(lines)

    def to_dict(self) -> Dict:
        return asdict(self)


class Analyzer:
    """
    Aggregates WordAnalysis results over a word list.

    Args:
        romanization: Table used to re-segment words
        inventory: Optional inventory for classification
    """

    def __init__(self, romanization: Optional[RomanizationMap] = None,
                 inventory: Optional[PhonemeInventory] = None):
        self.word_analyzer = WordAnalyzer(romanization, inventory)
        self.templates: Optional[List[SyllablePattern]] = None

    def with_templates(self, templates: Sequence[SyllablePattern]) -> 'Analyzer':
        """Use known templates for the template and hiatus recommendations."""
        self.templates = list(templates)
        return self

    def analyze(self, words: Sequence[str], smoothing: bool = False,
                smoothing_factor: Optional[float] = None) -> Analysis:
        if not words:
            return Analysis()
        if smoothing_factor is None:
            smoothing_factor = get_setting('analysis.smoothing_factor', 0.3)

        analyses = [self.word_analyzer.analyze(w) for w in words]
        is_vowel = self.word_analyzer.is_vowel

        phoneme_counts = Counter(p for a in analyses for p in a.phonemes)
        frequencies = _relative(phoneme_counts)
        if smoothing:
            frequencies = smooth_frequencies(frequencies, smoothing_factor)

        positional: Dict[str, Counter] = defaultdict(Counter)
        for a in analyses:
            for phoneme, places in a.phoneme_positions.items():
                positional[phoneme].update(places)

        vowel_pairs: Dict[str, Counter] = defaultdict(Counter)
        phoneme_pairs: Dict[str, Counter] = defaultdict(Counter)
        for a in analyses:
            vowels = [p for p in a.phonemes if is_vowel(p)]
            for left, right in zip(vowels, vowels[1:]):
                vowel_pairs[left][right] += 1
            for left, right in zip(a.phonemes, a.phonemes[1:]):
                phoneme_pairs[left][right] += 1

        patterns = _relative(Counter(p for a in analyses for p in a.syllable_patterns))
        hiatus = _relative(Counter(h for a in analyses for h in a.hiatus_sequences))
        gemination = _relative(Counter(g for a in analyses for g in a.gemination_sequences))

        n = len(analyses)
        average_complexity = sum(a.complexity_score for a in analyses) / n
        consonants = sum(a.consonant_count for a in analyses)
        vowels_total = sum(a.vowel_count for a in analyses)

        if self.templates:
            templates = [t.pattern for t in self.templates]
            hiatus_probability = self._template_hiatus_probability()
        else:
            templates = self._recommended_templates(patterns)
            hiatus_probability = self._recommended_probability(
                sum(a.has_hiatus for a in analyses) / n, len(hiatus), 10.0)

        return Analysis(
            word_count=n,
            phoneme_frequencies=frequencies,
            positional_frequencies={p: _relative(c) for p, c in positional.items()},
            syllable_count_distribution=_relative(Counter(a.syllable_count for a in analyses)),
            syllable_pattern_distribution=patterns,
            cluster_patterns=_relative(Counter(c for a in analyses for c in a.clusters)),
            hiatus_patterns=hiatus,
            gemination_patterns=gemination,
            vowel_lengthening_patterns=_relative(
                Counter(v for a in analyses for v in a.vowel_lengthening_sequences)),
            vowel_transitions={v: _relative(c) for v, c in vowel_pairs.items()},
            phoneme_transitions={p: _relative(c) for p, c in phoneme_pairs.items()},
            bigram_frequencies=_relative(Counter(b for a in analyses for b in a.bigrams)),
            trigram_frequencies=_relative(Counter(t for a in analyses for t in a.trigrams)),
            complexity_distribution=_relative(Counter(a.complexity_score for a in analyses)),
            average_complexity=average_complexity,
            average_syllable_count=sum(a.syllable_count for a in analyses) / n,
            consonant_vowel_ratio=consonants / vowels_total if vowels_total else 0.0,
            recommended_budget=self._recommended_budget(average_complexity),
            recommended_templates=templates,
            recommended_hiatus_probability=hiatus_probability,
            recommended_gemination_probability=self._recommended_probability(
                sum(a.has_gemination for a in analyses) / n, len(gemination), 5.0),
            dominant_patterns=_top(patterns, 3),
        )

    @staticmethod
    def _recommended_budget(average_complexity: float) -> int:
        return max(3, min(round(average_complexity * 1.2), 15))

    @staticmethod
    def _recommended_templates(patterns: Dict[str, float]) -> List[str]:
        frequent = {p: f for p, f in patterns.items() if f > 0.1}
        templates = _top(frequent, 5)
        for basic in ('CV', 'CVC'):
            if basic not in templates:
                templates.append(basic)
        return templates

    @staticmethod
    def _recommended_probability(word_share: float, variety: int, scale: float) -> float:
        probability = word_share
        if variety:
            probability += variety / scale * 0.1
        return max(0.0, min(probability, 0.8))

    def _template_hiatus_probability(self) -> float:
        total_weight = sum(t.selection_probability for t in self.templates)
        if total_weight <= 0:
            return 0.0
        return sum(t.hiatus_probability * t.selection_probability for t in self.templates) / total_weight


__all__ = [
    "WordAnalysis",
    "WordAnalyzer",
    "Analysis",
    "Analyzer",
    "gusein_zade_weights",
    "smooth_frequencies",
]
