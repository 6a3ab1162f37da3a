#!/usr/bin/env python3
"""
Language Presets
================
Loads language definitions from YAML files in this directory and turns them
into configured GeneratorBuilder instances.

Usage:
    from lexiforge.languages import available_languages, load_language, builder_for

    available_languages()          # ['elvish', 'finnic', 'simple']
    cfg = load_language('elvish')
    gen = builder_for('elvish').with_seed(7).build()
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..builder import GeneratorBuilder
from ..errors import ConfigurationError
from ..syllables import SyllablePattern
from ..word_spec import SyllableCountPolicy


# =============================================================================
# Configuration Path
# =============================================================================

LANGUAGES_DIR = Path(__file__).parent

TEMPLATE_KEYS = (
    'constraints',
    'hiatus_probability',
    'gemination_probability',
    'vowel_lengthening_probability',
    'allowed_onset_clusters',
    'allowed_coda_clusters',
    'position_weights',
    'selection_probability',
)


def _require(cfg: Dict[str, Any], key: str, context: str) -> Any:
    if key not in cfg or cfg[key] is None:
        raise ConfigurationError(f"{context}.{key} must be set")
    return cfg[key]


# =============================================================================
# Loaders
# =============================================================================

def available_languages() -> List[str]:
    return sorted(p.stem for p in LANGUAGES_DIR.glob('*.yaml'))


@lru_cache(maxsize=16)
def _load_yaml(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_language(name_or_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a preset by name, or any language YAML file by path."""
    path = Path(name_or_path)
    if path.suffix not in ('.yaml', '.yml'):
        path = LANGUAGES_DIR / f"{name_or_path}.yaml"
    if not path.exists():
        raise ConfigurationError(
            f"Unknown language '{name_or_path}' (available: {', '.join(available_languages())})"
        )
    return _load_yaml(str(path.resolve()))


# =============================================================================
# Builders
# =============================================================================

def count_policy_from_config(cfg: Any, context: str = 'syllable_count') -> SyllableCountPolicy:
    if isinstance(cfg, int):
        return SyllableCountPolicy.exact(cfg)
    if not isinstance(cfg, dict) or len(cfg) != 1:
        raise ConfigurationError(f"{context} must be an int or one of exact/range/weighted")
    kind, value = next(iter(cfg.items()))
    if kind == 'exact':
        return SyllableCountPolicy.exact(int(value))
    if kind == 'range':
        minimum, maximum = value
        return SyllableCountPolicy.range(int(minimum), int(maximum))
    if kind == 'weighted':
        return SyllableCountPolicy.weighted({int(k): float(v) for k, v in value.items()})
    raise ConfigurationError(f"{context}: unknown policy '{kind}'")


def template_from_config(cfg: Union[str, Dict[str, Any]], context: str = 'templates') -> SyllablePattern:
    if isinstance(cfg, str):
        return SyllablePattern(cfg)
    pattern = _require(cfg, 'pattern', context)
    unknown = set(cfg) - set(TEMPLATE_KEYS) - {'pattern'}
    if unknown:
        raise ConfigurationError(f"{context}: unknown template keys {sorted(unknown)}")
    options = {key: cfg[key] for key in TEMPLATE_KEYS if key in cfg}
    return SyllablePattern(str(pattern), **options)


def builder_from_config(cfg: Dict[str, Any], context: str = 'language') -> GeneratorBuilder:
    """Fill a GeneratorBuilder from a language mapping."""
    builder = GeneratorBuilder.create().with_phonemes(
        _require(cfg, 'consonants', context),
        _require(cfg, 'vowels', context),
    )
    builder.with_syllable_templates([
        template_from_config(t, f"{context}.templates[{i}]")
        for i, t in enumerate(_require(cfg, 'templates', context))
    ])
    builder.with_syllable_count(count_policy_from_config(
        _require(cfg, 'syllable_count', context), f"{context}.syllable_count"))

    if cfg.get('weights'):
        builder.with_weights(cfg['weights'])
    if cfg.get('positions'):
        builder.with_positions(cfg['positions'])
    for group_id, members in (cfg.get('groups') or {}).items():
        builder.with_custom_group(str(group_id), members)
    if cfg.get('romanization'):
        builder.with_romanization(cfg['romanization'])
    if cfg.get('constraints'):
        builder.with_constraints(cfg['constraints'])
    if cfg.get('starting_class'):
        builder.starting_with(cfg['starting_class'])
    if cfg.get('thematic_vowel'):
        builder.with_thematic_vowel(cfg['thematic_vowel'])
    if cfg.get('starts_with'):
        builder.starting_with_sequence(cfg['starts_with'])
    if cfg.get('ends_with'):
        builder.ending_with_sequence(cfg['ends_with'])
    if cfg.get('gemination_probability') is not None:
        builder.with_gemination_probability(cfg['gemination_probability'])
    if cfg.get('vowel_lengthening_probability') is not None:
        builder.with_vowel_lengthening_probability(cfg['vowel_lengthening_probability'])
    if cfg.get('hiatus_probability') is not None:
        builder.with_hiatus_probability(cfg['hiatus_probability'])
    return builder


def builder_for(name_or_path: Union[str, Path]) -> GeneratorBuilder:
    return builder_from_config(load_language(name_or_path), str(name_or_path))


__all__ = [
    "available_languages",
    "load_language",
    "builder_from_config",
    "builder_for",
    "count_policy_from_config",
    "template_from_config",
    "LANGUAGES_DIR",
]
