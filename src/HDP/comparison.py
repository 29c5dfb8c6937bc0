"""
A/B scenario comparison.

Runs the full analysis for two scenarios under one disease model:
risk of each, importance of each, and the timeline from A to B.
"""

import typing
from dataclasses import dataclass

from .disease import DiseaseRegistry, get_model
from .features import FeatureVector
from .importance import ImportanceEntry, importance
from .scorer import RiskResult, assess, round_half_up
from .timeline import DEFAULT_STEPS, TimelinePoint, timeline


@dataclass(frozen=True)
class ScenarioComparison:
    """
    Attributes:
        disease_key: Disease model used for every computation.
        disease_label: Display name of that model.
        risk_a: Score of scenario A.
        risk_b: Score of scenario B.
        importance_a: Importance decomposition of scenario A (canonical order).
        importance_b: Importance decomposition of scenario B (canonical order).
        timeline: Scores along the blend from A to B.
    """

    disease_key: str
    disease_label: str
    risk_a: RiskResult
    risk_b: RiskResult
    importance_a: list[ImportanceEntry]
    importance_b: list[ImportanceEntry]
    timeline: list[TimelinePoint]

    @property
    def delta(self) -> float:
        """Risk of B minus risk of A; negative means B is lower."""
        return self.risk_b.probability - self.risk_a.probability

    @property
    def improves(self) -> bool:
        """True when scenario B has the strictly lower risk."""
        return self.risk_b.probability < self.risk_a.probability

    def to_dict(self) -> dict[str, typing.Any]:
        return {
            "disease": self.disease_key,
            "disease_label": self.disease_label,
            "risk_a": self.risk_a.probability,
            "risk_b": self.risk_b.probability,
            "delta": self.delta,
            "improves": self.improves,
            "importance_a": [entry.to_dict() for entry in self.importance_a],
            "importance_b": [entry.to_dict() for entry in self.importance_b],
            "timeline": [point.to_dict() for point in self.timeline],
        }


def format_percent(probability: float) -> str:
    """Render a probability as a whole percentage, e.g. 0.1234 -> '12%'."""
    return f"{round_half_up(probability * 100)}%"


def compare_scenarios(
    scenario_a: FeatureVector,
    scenario_b: FeatureVector,
    disease_key: str,
    steps: int = DEFAULT_STEPS,
    registry: typing.Optional[DiseaseRegistry] = None,
) -> ScenarioComparison:
    model = get_model(disease_key, registry)
    return ScenarioComparison(
        disease_key=model.key,
        disease_label=model.label,
        risk_a=assess(scenario_a, model.key, registry),
        risk_b=assess(scenario_b, model.key, registry),
        importance_a=importance(scenario_a, model.key, registry),
        importance_b=importance(scenario_b, model.key, registry),
        timeline=timeline(scenario_a, scenario_b, model.key, steps, registry),
    )
