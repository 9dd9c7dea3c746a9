"""Vedic analyses layered on a computed :class:`~astrostorm.chart.VedicChart`."""

from __future__ import annotations

from .aspects import (
    AspectData,
    AspectMatrix,
    AspectType,
    DrishtiData,
    OrbConfiguration,
    compute_aspect_matrix,
    graha_drishti,
    strength_label,
)
from .conditions import (
    CombustionStatus,
    ConditionAnalysis,
    PlanetCondition,
    RetrogradePeriod,
    RetrogradeStatus,
    analyze_conditions,
    apply_combustion,
    find_next_retrograde,
)
from .dasha import (
    DashaLevel,
    DashaOptions,
    DashaPeriod,
    DashaTimeline,
    active_periods,
    compute_dasha_timeline,
    describe_active,
)
from .panchanga import (
    PanchangaData,
    auspiciousness_score,
    compute_panchanga,
    is_auspicious,
    panchanga_for_chart,
)
from .shadbala import ShadbalaReport, ShadbalaScore, StrengthRating, compute_shadbala
from .transits import (
    GocharaResult,
    TransitAnalysis,
    TransitAspect,
    TransitEffect,
    TransitQuality,
    analyze_transits,
    find_significant_periods,
    gochara,
    transit_aspects,
    transit_chart,
)
from .varga import (
    DivisionalChartData,
    VargaType,
    compute_all_vargas,
    compute_varga,
    divisional_chart,
    mark_vargottama,
)
from .yogas import YogaMatch, detect_yogas

__all__ = [
    "AspectData",
    "AspectMatrix",
    "AspectType",
    "CombustionStatus",
    "ConditionAnalysis",
    "DashaLevel",
    "DashaOptions",
    "DashaPeriod",
    "DashaTimeline",
    "DivisionalChartData",
    "DrishtiData",
    "OrbConfiguration",
    "PanchangaData",
    "GocharaResult",
    "PlanetCondition",
    "RetrogradePeriod",
    "RetrogradeStatus",
    "ShadbalaReport",
    "ShadbalaScore",
    "StrengthRating",
    "TransitAnalysis",
    "TransitAspect",
    "TransitEffect",
    "TransitQuality",
    "VargaType",
    "YogaMatch",
    "active_periods",
    "analyze_conditions",
    "analyze_transits",
    "apply_combustion",
    "auspiciousness_score",
    "compute_all_vargas",
    "compute_aspect_matrix",
    "compute_dasha_timeline",
    "compute_panchanga",
    "compute_shadbala",
    "compute_varga",
    "describe_active",
    "detect_yogas",
    "divisional_chart",
    "find_next_retrograde",
    "find_significant_periods",
    "gochara",
    "graha_drishti",
    "is_auspicious",
    "mark_vargottama",
    "panchanga_for_chart",
    "strength_label",
    "transit_aspects",
    "transit_chart",
]
