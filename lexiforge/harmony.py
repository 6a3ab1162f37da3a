#!/usr/bin/env python3
"""
Vowel Harmony
=============
Soft preferences for which vowel follows which.

Harmony only rescales sampling weights; it never removes a vowel from the
grammar unless its preference is exactly zero at full strength.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .errors import ConfigurationError


@dataclass
class VowelHarmony:
    """
    Vowel transition preferences.

    Args:
        rules: ``{from_vowel: {to_vowel: preference}}``
        strength: 0.0 (ignore rules) to 1.0 (follow them fully)
        default_preference: Weight for transitions without a rule
    """
    rules: Dict[str, Dict[str, float]] = field(default_factory=dict)
    strength: float = 0.0
    default_preference: float = 0.5

    def __post_init__(self):
        if not 0.0 <= self.strength <= 1.0:
            raise ConfigurationError(f"Harmony strength must be within [0, 1], got {self.strength}")
        self.rules = {src: dict(targets) for src, targets in self.rules.items()}

    @property
    def is_active(self) -> bool:
        return bool(self.rules) and self.strength > 0

    def add_rule(self, from_vowel: str, to_vowel: str, preference: float) -> None:
        self.rules.setdefault(from_vowel, {})[to_vowel] = preference

    def transition_weight(self, from_vowel: str, to_vowel: str) -> float:
        """Interpolate between the default and the rule by ``strength``."""
        preference = self.rules.get(from_vowel, {}).get(to_vowel)
        if preference is None or self.strength == 0:
            return self.default_preference
        return self.default_preference + self.strength * (preference - self.default_preference)

    def bias(self, from_vowel: str, candidates: Iterable[str]) -> Dict[str, float]:
        """Weight multipliers for every candidate following ``from_vowel``."""
        return {c: self.transition_weight(from_vowel, c) for c in candidates}

    def preferred_vowels(self, from_vowel: str, count: int = 3) -> List[str]:
        ranked = sorted(self.rules.get(from_vowel, {}).items(), key=lambda kv: -kv[1])
        return [v for v, _ in ranked[:count]]

    def avoided_vowels(self, from_vowel: str, count: int = 3) -> List[str]:
        ranked = sorted(self.rules.get(from_vowel, {}).items(), key=lambda kv: kv[1])
        return [v for v, _ in ranked[:count]]

    def summary(self) -> str:
        if not self.is_active:
            return "Vowel harmony: inactive"
        lines = [f"Vowel harmony (strength {self.strength:.2f}):"]
        for from_vowel in self.rules:
            preferred = ', '.join(self.preferred_vowels(from_vowel))
            lines.append(f"  {from_vowel} -> {preferred}")
        return '\n'.join(lines)


__all__ = ["VowelHarmony"]
