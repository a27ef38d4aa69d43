"""
KPI engine constants.

Every fixed number the scoring pipeline relies on lives here: the SLA
main/subtask split, the productivity normalization, the contribution point
values, the rating bands, and the default per-workspace weights.
"""

from __future__ import annotations

from dataclasses import dataclass

from workspace_kpi.models.workspace import WorkspaceKPIWeights

# SLA: combined ratio when both main tasks and subtasks carry due dates
SLA_MAIN_TASK_WEIGHT = 0.7
SLA_SUBTASK_WEIGHT = 0.3

# Productivity: contribution points per task, normalized against a ceiling
ASSIGNED_COMPLETED_POINTS = 1.0
FOLLOWING_COMPLETED_POINTS = 0.5
REVIEWING_COMPLETED_POINTS = 0.3
PRODUCTIVITY_CEILING = 10.0


@dataclass(frozen=True)
class KpiRatingBand:
    label: str
    min_score: int


# Ordered from best to worst; the last band catches everything below.
KPI_RATING_BANDS: tuple[KpiRatingBand, ...] = (
    KpiRatingBand(label="Excellent", min_score=80),
    KpiRatingBand(label="Good", min_score=60),
    KpiRatingBand(label="Average", min_score=40),
    KpiRatingBand(label="Needs Improvement", min_score=0),
)

# A "high performer" is anyone rated Good or better.
HIGH_PERFORMER_THRESHOLD = next(
    band.min_score for band in KPI_RATING_BANDS if band.label == "Good"
)


def get_kpi_rating(kpi_score: float) -> KpiRatingBand:
    """Return the rating band a score falls into."""
    for band in KPI_RATING_BANDS:
        if kpi_score >= band.min_score:
            return band
    return KPI_RATING_BANDS[-1]


def is_high_performer(kpi_score: float) -> bool:
    return kpi_score >= HIGH_PERFORMER_THRESHOLD


_DEFAULT_WEIGHTS_WITH_REVIEW = WorkspaceKPIWeights(
    completion=30.0,
    productivity=20.0,
    sla=20.0,
    collaboration=15.0,
    review=15.0,
)

_DEFAULT_WEIGHTS_WITHOUT_REVIEW = WorkspaceKPIWeights(
    completion=35.0,
    productivity=25.0,
    sla=25.0,
    collaboration=15.0,
    review=0.0,
)


def default_kpi_weights(with_review_stage: bool = True) -> WorkspaceKPIWeights:
    """Default weight preset for a new workspace."""
    preset = _DEFAULT_WEIGHTS_WITH_REVIEW if with_review_stage else _DEFAULT_WEIGHTS_WITHOUT_REVIEW
    return preset.model_copy()
