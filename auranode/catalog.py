"""Static game hosting plans shown on the pricing pages."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

import yaml

DEFAULT_PLANS_PATH = Path(__file__).resolve().parent / "data" / "plans.yaml"


@dataclass(frozen=True)
class Plan:
    """One purchasable tier of a game's hosting offer."""

    name: str
    price: Optional[int] = None
    popular: bool = False
    features: Tuple[str, ...] = ()

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "Plan":
        if "name" not in data:
            raise ValueError("Plan entries must define a 'name'")
        price = data.get("price")
        features = data.get("features") or []
        if not isinstance(features, list):
            raise ValueError(f"Features of plan '{data['name']}' must be a list")
        return Plan(
            name=str(data["name"]),
            price=int(price) if price is not None else None,
            popular=bool(data.get("popular", False)),
            features=tuple(str(item) for item in features),
        )


@dataclass(frozen=True)
class GamePlans:
    title: str
    plans: Tuple[Plan, ...]


class GamePlanCatalog:
    """Read-only mapping of game keys to their plans."""

    def __init__(self, games: Mapping[str, GamePlans]) -> None:
        self._games: Mapping[str, GamePlans] = MappingProxyType(dict(games))
        if len(self._games) == 0:
            raise ValueError("Plan catalog must contain at least one game")

    def get(self, key: str) -> Optional[GamePlans]:
        return self._games.get(key)

    def keys(self) -> Iterable[str]:
        return self._games.keys()

    def items(self) -> Iterable[Tuple[str, GamePlans]]:
        return self._games.items()

    def __contains__(self, key: object) -> bool:
        return key in self._games

    def __len__(self) -> int:
        return len(self._games)


def load_catalog(path: Optional[Path] = None) -> GamePlanCatalog:
    """Load the plan catalog from a YAML file."""
    path = path or DEFAULT_PLANS_PATH
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    games_raw = raw.get("games")
    if not isinstance(games_raw, dict) or not games_raw:
        raise ValueError("Plan catalog must define at least one game under the 'games' key")

    games: Dict[str, GamePlans] = {}
    for key, entry in games_raw.items():
        if not isinstance(entry, dict) or "title" not in entry:
            raise ValueError(f"Game '{key}' must define a 'title'")
        plans = tuple(Plan.from_dict(item) for item in entry.get("plans") or [])
        games[str(key)] = GamePlans(title=str(entry["title"]), plans=plans)
    return GamePlanCatalog(games)


__all__ = ["DEFAULT_PLANS_PATH", "GamePlanCatalog", "GamePlans", "Plan", "load_catalog"]
