# schooldash/views/dashboard.py
from typing import Dict, List

from schooldash.pages.dashboard import DashboardPage
from schooldash.views.blocks import count_kpi, empty_state, error_block, kpis


def overview(page: DashboardPage) -> List[Dict]:
    """Numeric top-level overview fields as KPI cards"""
    if page.resource.error:
        return [error_block("Could not load dashboard", page.resource.error)]
    numbers = [
        count_kpi(key.replace("_", " ").title(), value)
        for key, value in page.overview.items()
        if isinstance(value, (int, float)) and not isinstance(value, bool)
    ]
    return [kpis(numbers)] if numbers else [empty_state("Nothing to show yet")]
