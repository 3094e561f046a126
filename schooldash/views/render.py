# schooldash/views/render.py
from typing import Any, Dict, List


def _table_lines(config: Dict[str, Any]) -> List[str]:
    columns = config["columns"]
    rows = config["rows"]
    widths = [
        max([len(str(c["label"]))] + [len(str(r.get(c["key"], "") or "")) for r in rows])
        for c in columns
    ]
    lines = [f"== {config['title']} =="]
    lines.append(" | ".join(str(c["label"]).ljust(w) for c, w in zip(columns, widths)))
    lines.append("-+-".join("-" * w for w in widths))
    for r in rows:
        lines.append(" | ".join(str(r.get(c["key"], "") or "").ljust(w) for c, w in zip(columns, widths)))
    return lines


def render_block(block: Dict[str, Any], indent: int = 0) -> List[str]:
    pad = "  " * indent
    kind = block.get("type")
    if kind == "text":
        return [pad + line for line in block["text"].splitlines()]
    if kind == "kpis":
        return [pad + "  ".join(f"{i['label']}: {i['value']}" for i in block["items"])]
    if kind == "table":
        return [pad + line for line in _table_lines(block["config"])]
    if kind == "card":
        marker = "v" if block["expanded"] else ">"
        head = f"{pad}{marker} {block['title']}"
        if block.get("subtitle"):
            head += f"  ({block['subtitle']})"
        lines = [head]
        for child in block["children"]:
            lines.extend(render_block(child, indent + 1))
        return lines
    if kind == "empty":
        return [f"{pad}{block['title']}" + (f" - {block['hint']}" if block.get("hint") else "")]
    if kind == "error":
        return [f"{pad}ERROR: {block['title']}" + (f" - {block['detail']}" if block.get("detail") else "")]
    return [f"{pad}[{kind}]"]


def render_text(blocks: List[Dict[str, Any]]) -> str:
    """Plain-text rendering of a list of blocks for terminals"""
    lines: List[str] = []
    for block in blocks:
        lines.extend(render_block(block))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
