"""
Importance decomposer.

Splits a score into per-feature contributions:

    raw_i   = weight_i * value_i                 (the scorer's own terms, bias excluded)
    total   = sum(|raw_i|), or 1 when that sum is 0
    share_i = round(|raw_i| / total * 100)        (half rounds up)

This is a local linear attribution: it describes how the linear score is
composed at one point. It is not a causal or game-theoretic (e.g. Shapley)
importance measure, and the sign of a contribution depends on the units of
the feature as much as on its effect.

Every share is rounded on its own, so the shares only sum to about 100.
Each non-zero term can be off by half a point, and with ordinary inputs the
total can miss 100 by several points (104 is reachable for "heart").
"""

import typing
from dataclasses import dataclass

from .disease import DiseaseRegistry, get_model
from .features import FEATURE_LABELS, FeatureVector, derive
from .scorer import feature_terms, round_half_up


@dataclass(frozen=True)
class ImportanceEntry:
    """
    Contribution of one derived feature to a score.

    Attributes:
        feature: Derived feature name (e.g. 'cholesterol').
        label: Short display label (e.g. 'Chol').
        raw_contribution: Signed weight * value term of the linear score.
        share_percent: Rounded share of |raw_contribution| in the total, 0-100.
    """

    feature: str
    label: str
    raw_contribution: float
    share_percent: int

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "feature": self.feature,
            "label": self.label,
            "raw_contribution": self.raw_contribution,
            "share_percent": self.share_percent,
        }


def importance(
    features: FeatureVector,
    disease_key: str,
    registry: typing.Optional[DiseaseRegistry] = None,
) -> list[ImportanceEntry]:
    """
    One entry per derived feature, always in the canonical feature order
    regardless of magnitudes. Use rank_importance() for a sorted view.
    """
    model = get_model(disease_key, registry)
    terms = feature_terms(derive(features), model)

    total = sum(abs(raw) for raw in terms.values())
    if total == 0:
        # every share becomes 0%
        total = 1.0

    return [
        ImportanceEntry(
            feature=name,
            label=FEATURE_LABELS[name],
            raw_contribution=raw,
            share_percent=round_half_up(abs(raw) / total * 100),
        )
        for name, raw in terms.items()
    ]


def rank_importance(entries: typing.Iterable[ImportanceEntry]) -> list[ImportanceEntry]:
    """Largest |raw_contribution| first; ties keep their canonical order."""
    return sorted(entries, key=lambda entry: abs(entry.raw_contribution), reverse=True)
