# schooldash/views/blocks.py
from typing import Any, Dict, List, Optional


def text(content: str) -> Dict[str, Any]:
    """Create a text block"""
    return {
        "type": "text",
        "text": content
    }


def kpis(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Create a KPIs block with metric cards"""
    return {
        "type": "kpis",
        "items": items
    }


def count_kpi(label: str, value: int, variant: str = "primary") -> Dict[str, Any]:
    """Helper to create a count KPI item"""
    return {
        "label": label,
        "value": value,
        "format": "integer",
        "variant": variant
    }


def column(key: str, label: str, align: str = "left") -> Dict[str, Any]:
    return {"key": key, "label": label, "align": align}


def status_column(key: str, label: str, status_map: Dict[str, str], align: str = "center") -> Dict[str, Any]:
    """Helper to create a status badge column"""
    return {
        "key": key,
        "label": label,
        "align": align,
        "badge": {
            "map": status_map
        }
    }


def table(title: str, columns: List[Dict], rows: List[Dict], filters: Optional[List] = None) -> Dict[str, Any]:
    """Create a table block"""
    config = {
        "title": title,
        "columns": columns,
        "rows": rows
    }
    if filters:
        config["filters"] = filters

    return {
        "type": "table",
        "config": config
    }


def card(title: str, subtitle: Optional[str] = None, expanded: bool = False,
         children: Optional[List[Dict]] = None, key: Any = None) -> Dict[str, Any]:
    """Create a collapsible card; collapsed cards carry no children"""
    block = {
        "type": "card",
        "title": title,
        "expanded": expanded,
        "children": list(children or []) if expanded else []
    }
    if subtitle:
        block["subtitle"] = subtitle
    if key is not None:
        block["key"] = key
    return block


def empty_state(title: str, hint: Optional[str] = None) -> Dict[str, Any]:
    """Create an empty state block"""
    block = {
        "type": "empty",
        "title": title
    }
    if hint:
        block["hint"] = hint
    return block


def error_block(title: str, detail: Optional[str] = None) -> Dict[str, Any]:
    """Create an error block"""
    block = {
        "type": "error",
        "title": title
    }
    if detail:
        block["detail"] = detail
    return block
