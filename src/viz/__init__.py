from .charts import (
    create_trend_chart,
    create_comparison_chart,
)

__all__ = [
    "create_trend_chart",
    "create_comparison_chart",
]
