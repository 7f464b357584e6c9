"""Domain modules: the pure scoring, comparison and verdict engine."""

from .aggregation import DEFAULT_SCORING_WEIGHTS, Metric, ScoreRecord, compute_scores
from .comparison import MetricComparison, Winner, generate_metric_comparisons
from .insights import Insight, InsightKind, generate_user_insights
from .profiles import CyberDomain, Profile, build_profile, validate_profile
from .titles import CYBER_TITLES, CyberTitle, TitleKey, assign_cyber_title
from .verdict import Verdict, generate_verdict

__all__ = [
    "CYBER_TITLES",
    "DEFAULT_SCORING_WEIGHTS",
    "CyberDomain",
    "CyberTitle",
    "Insight",
    "InsightKind",
    "Metric",
    "MetricComparison",
    "Profile",
    "ScoreRecord",
    "TitleKey",
    "Verdict",
    "Winner",
    "assign_cyber_title",
    "build_profile",
    "compute_scores",
    "generate_metric_comparisons",
    "generate_user_insights",
    "generate_verdict",
    "validate_profile",
]
