"""
Tests for Language Presets and Settings
=======================================
Tests for YAML presets in lexiforge/languages/ and the app settings
loader in lexiforge/settings.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lexiforge.entropy import RandomSource
from lexiforge.errors import ConfigurationError
from lexiforge.languages import (
    available_languages,
    builder_for,
    builder_from_config,
    count_policy_from_config,
    load_language,
    template_from_config,
)
from lexiforge.settings import APP_CONFIG_PATH, get_int_setting, get_setting, load_app_config
from lexiforge.syllables import SyllablePosition
from lexiforge.word_spec import ExactCount, RangeCount, WeightedCount


class TestPresets:
    """Tests for the bundled presets."""

    def test_available(self):
        """All bundled presets are listed."""
        assert {'elvish', 'finnic', 'simple'} <= set(available_languages())

    def test_load(self):
        """A preset loads as a mapping with its required keys."""
        cfg = load_language('elvish')
        for key in ('consonants', 'vowels', 'templates', 'syllable_count'):
            assert key in cfg

    def test_unknown(self):
        """An unknown preset name is a configuration error."""
        with pytest.raises(ConfigurationError):
            load_language('klingon')

    @pytest.mark.parametrize("name", ['simple', 'elvish', 'finnic'])
    def test_builds_and_generates(self, name):
        """Every preset builds a generator that produces words."""
        gen = builder_for(name).with_random_source(RandomSource(42)).build()
        words = gen.generate_batch(20)
        assert len(words) == 20
        assert all(words)

    def test_elvish_clusters(self):
        """Elvish CCV onsets come from its whitelist."""
        gen = builder_for('elvish').with_random_source(RandomSource(1)).build()
        allowed = {('t', 'r'), ('g', 'r'), ('θ', 'r'), ('d', 'r')}
        for _ in range(100):
            result = gen.generate_word()
            for syllable, pattern in zip(result.syllables, result.patterns):
                if pattern == 'CCV':
                    assert tuple(syllable[:2]) in allowed

    def test_finnic_positions(self):
        """Finnic h, j and v never close a syllable."""
        gen = builder_for('finnic').with_random_source(RandomSource(3)).build()
        for _ in range(100):
            result = gen.generate_word()
            for syllable, pattern in zip(result.syllables, result.patterns):
                if pattern == 'CVC':
                    assert syllable[-1] not in ('h', 'j', 'v')

    def test_load_from_path(self, tmp_path):
        """Any YAML file can be loaded by path."""
        path = tmp_path / "tiny.yaml"
        path.write_text(
            "consonants: [t, k]\n"
            "vowels: [a, o]\n"
            "syllable_count: 2\n"
            "templates: [CV]\n"
            "thematic_vowel: o\n",
            encoding="utf-8",
        )
        gen = builder_for(path).with_seed(4).build()
        for _ in range(10):
            assert gen.generate().endswith('o')


class TestConfigParsing:
    """Tests for config-to-object helpers."""

    def test_missing_key(self):
        """A missing required key names its context."""
        with pytest.raises(ConfigurationError, match="lang.consonants must be set"):
            builder_from_config({'vowels': ['a']}, 'lang')

    def test_count_policies(self):
        """Count policies parse from ints and mappings."""
        assert count_policy_from_config(3) == ExactCount(3)
        assert count_policy_from_config({'exact': 2}) == ExactCount(2)
        assert count_policy_from_config({'range': [2, 4]}) == RangeCount(2, 4)
        assert isinstance(count_policy_from_config({'weighted': {2: 1.0, 3: 2.0}}), WeightedCount)

    def test_bad_count_policy(self):
        """Unknown policy kinds are rejected."""
        with pytest.raises(ConfigurationError):
            count_policy_from_config({'poisson': 2})

    def test_template_string(self):
        """A bare string is a plain template."""
        assert template_from_config('CVC').pattern == 'CVC'

    def test_template_mapping(self):
        """Template options are read from a mapping."""
        template = template_from_config({
            'pattern': 'CCV',
            'allowed_onset_clusters': ['tr'],
            'position_weights': {'final': 0.5},
        })
        assert template.allowed_onset_clusters == ('tr',)
        assert template.weight_for(SyllablePosition.FINAL) == pytest.approx(0.5)

    def test_template_unknown_key(self):
        """Unknown template keys are rejected."""
        with pytest.raises(ConfigurationError):
            template_from_config({'pattern': 'CV', 'stress': 1})


class TestSettings:
    """Tests for lexiforge/settings.py."""

    def test_app_config_loads(self):
        """The bundled app config is a mapping."""
        assert isinstance(load_app_config(), dict)

    def test_generation_defaults(self):
        """Generation ceilings are configured."""
        assert get_setting('generation.max_attempts') == 10000
        assert get_setting('generation.syllable_max_attempts') == 1000

    def test_missing_default(self):
        """Missing paths return the default."""
        assert get_setting('generation.nope', 'x') == 'x'
        assert get_setting('nope.nope') is None

    def test_config_path(self):
        """The app config ships inside the package."""
        assert APP_CONFIG_PATH.exists()
        assert APP_CONFIG_PATH.parent.parent.name == 'lexiforge'

    def test_int_setting(self):
        """Integer settings come back as configured."""
        assert get_int_setting('generation.max_attempts', 1) == 10000
        assert get_int_setting('generation.nope', 7) == 7

    @pytest.mark.parametrize("value", [0, -5, "many", True, None])
    def test_int_setting_rejects_bad_values(self, monkeypatch, value):
        """A bad ceiling in the app config is a configuration error naming its key."""
        monkeypatch.setattr('lexiforge.settings.load_app_config',
                            lambda: {'generation': {'max_attempts': value}})
        with pytest.raises(ConfigurationError, match="generation.max_attempts"):
            get_int_setting('generation.max_attempts', 10)
