from .filters import matches_selection
from .school_report import build_school_report, export_school_report
from .trend import build_trend, TrendSeries
from .comparison import build_comparison, validate_school_selection, Comparison

__all__ = [
    "matches_selection",
    "build_school_report",
    "export_school_report",
    "build_trend",
    "TrendSeries",
    "build_comparison",
    "validate_school_selection",
    "Comparison",
]
