from __future__ import annotations

from pathlib import Path
from typing import List, Any, Dict

import yaml

from .exceptions import UnsupportedConfiguration
from .types import Scenario


def load_scenarios(path: str | Path = "scenarios/scenarios.yaml") -> List[Scenario]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Scenario file not found: {p.resolve()}")

    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("scenarios.yaml must be a list")

    out: List[Scenario] = []
    for row in raw:
        if not isinstance(row, dict):
            raise ValueError("Each scenario must be a dict")
        out.append(_to_scenario(row))
    return out


def _to_scenario(d: Dict[str, Any]) -> Scenario:
    required = ["id", "name", "url", "expected_domain", "query", "price_min", "price_max"]
    for k in required:
        if k not in d:
            raise ValueError(f"Missing key '{k}' in scenario: {d}")

    price_min, price_max = int(d["price_min"]), int(d["price_max"])
    if price_min < 0 or price_min > price_max:
        raise UnsupportedConfiguration(f"invalid price range {price_min}..{price_max}: {d.get('id')}")

    top_count = int(d["top_count"]) if d.get("top_count") is not None else 5
    if top_count < 1:
        raise UnsupportedConfiguration(f"top_count must be >= 1: {d.get('id')}")

    return Scenario(
        id=str(d["id"]),
        name=str(d["name"]),
        url=str(d["url"]),
        expected_domain=str(d["expected_domain"]),
        query=str(d["query"]),
        price_min=price_min,
        price_max=price_max,
        top_count=top_count,
    )
