"""Loaders for the static Axie game tables (classes, stats, breeding costs)."""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

DEFAULT_TABLES_PATH = (Path(__file__).resolve().parent.parent / "references" / "axie-data.yaml").resolve()
TABLES_ENV_VAR = "AXIE_DATA_TABLES"

STAT_KEYS = ("hp", "speed", "skill", "morale")
EXPECTED_CLASS_COUNT = 9
ADVANTAGES_PER_CLASS = 3


@dataclass(frozen=True)
class StatBlock:
    hp: int = 0
    speed: int = 0
    skill: int = 0
    morale: int = 0

    def __add__(self, other: StatBlock) -> StatBlock:
        return StatBlock(
            hp=self.hp + other.hp,
            speed=self.speed + other.speed,
            skill=self.skill + other.skill,
            morale=self.morale + other.morale,
        )

    def to_dict(self) -> dict[str, int]:
        return {key: getattr(self, key) for key in STAT_KEYS}


ZERO_STATS = StatBlock()


@dataclass(frozen=True)
class MmrTier:
    name: str
    min_mmr: int
    max_mmr: int | None

    def contains(self, mmr: float) -> bool:
        if mmr < self.min_mmr:
            return False
        return self.max_mmr is None or mmr <= self.max_mmr


@dataclass(frozen=True)
class AxieTables:
    classes: tuple[str, ...]
    class_advantages: Mapping[str, frozenset[str]]
    strong_multiplier: float
    weak_multiplier: float
    neutral_multiplier: float
    base_stats: Mapping[str, StatBlock]
    part_stat_bonus: Mapping[str, StatBlock]
    axs_per_breed: float
    max_breed_count: int
    adult_stage: int
    no_parent_id: str
    slp_by_breed_count: tuple[int, ...]
    stages: Mapping[int, str]
    mmr_tiers: tuple[MmrTier, ...]
    source: str = "<memory>"

    def summary(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "classes": list(self.classes),
            "class_count": len(self.classes),
            "max_breed_count": self.max_breed_count,
            "axs_per_breed": self.axs_per_breed,
            "slp_by_breed_count": list(self.slp_by_breed_count),
            "mmr_tier_count": len(self.mmr_tiers),
        }


def load_yaml(path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(parsed, dict):
        raise ValueError(f"{path}: tables file must be a YAML mapping")
    return parsed


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_stat_table(raw: Any, *, field: str, classes: list[str]) -> list[str]:
    if not isinstance(raw, dict):
        return [f"{field} must be a mapping of class -> stats"]
    errors: list[str] = []
    for name in classes:
        block = raw.get(name)
        if not isinstance(block, dict):
            errors.append(f"{field}.{name} is missing")
            continue
        for key in STAT_KEYS:
            value = block.get(key)
            if not _is_int(value) or value < 0:
                errors.append(f"{field}.{name}.{key} must be a non-negative integer")
    return errors


def _validate_advantages(raw: Any, classes: list[str]) -> list[str]:
    if not isinstance(raw, dict):
        return ["class_advantages must be a mapping of class -> beaten classes"]
    errors: list[str] = []
    known = set(classes)
    for name in classes:
        beats = raw.get(name)
        if not isinstance(beats, list):
            errors.append(f"class_advantages.{name} must be a list")
            continue
        if len(set(beats)) != ADVANTAGES_PER_CLASS or len(beats) != ADVANTAGES_PER_CLASS:
            errors.append(f"class_advantages.{name} must list {ADVANTAGES_PER_CLASS} distinct classes")
        for other in beats:
            if other not in known:
                errors.append(f"class_advantages.{name} references unknown class '{other}'")
            elif other == name:
                errors.append(f"class_advantages.{name} cannot beat itself")
    if errors:
        return errors
    for name in classes:
        for other in raw[name]:
            if name in raw[other] and name < other:
                errors.append(f"class_advantages: '{name}' and '{other}' beat each other")
    return errors


def _validate_breeding(raw: Any) -> list[str]:
    if not isinstance(raw, dict):
        return ["breeding must be a mapping"]
    errors: list[str] = []
    axs = raw.get("axs_per_breed")
    if isinstance(axs, bool) or not isinstance(axs, (int, float)) or axs <= 0:
        errors.append("breeding.axs_per_breed must be a positive number")
    max_count = raw.get("max_breed_count")
    if not _is_int(max_count) or max_count < 1:
        errors.append("breeding.max_breed_count must be a positive integer")
    if not _is_int(raw.get("adult_stage")):
        errors.append("breeding.adult_stage must be an integer")
    costs = raw.get("slp_by_breed_count")
    if not isinstance(costs, list) or not all(_is_int(c) and c > 0 for c in costs):
        errors.append("breeding.slp_by_breed_count must be a list of positive integers")
    else:
        if _is_int(max_count) and len(costs) != max_count:
            errors.append("breeding.slp_by_breed_count must have max_breed_count entries")
        if any(b <= a for a, b in zip(costs, costs[1:])):
            errors.append("breeding.slp_by_breed_count must be strictly increasing")
    return errors


def validate_tables(raw: dict[str, Any]) -> list[str]:
    classes = raw.get("classes")
    if not isinstance(classes, list) or not all(isinstance(c, str) and c for c in classes):
        return ["classes must be a list of class names"]
    errors: list[str] = []
    if len(set(classes)) != EXPECTED_CLASS_COUNT or len(classes) != EXPECTED_CLASS_COUNT:
        errors.append(f"classes must list {EXPECTED_CLASS_COUNT} distinct names")
    errors.extend(_validate_advantages(raw.get("class_advantages"), classes))
    errors.extend(_validate_stat_table(raw.get("base_stats"), field="base_stats", classes=classes))
    errors.extend(_validate_stat_table(raw.get("part_stat_bonus"), field="part_stat_bonus", classes=classes))
    errors.extend(_validate_breeding(raw.get("breeding")))

    multipliers = raw.get("advantage_multipliers", {})
    if not isinstance(multipliers, dict) or not all(
        isinstance(multipliers.get(k), (int, float)) for k in ("strong", "weak", "neutral")
    ):
        errors.append("advantage_multipliers must define numeric strong, weak and neutral")

    tiers = raw.get("mmr_tiers", [])
    if not isinstance(tiers, list) or not tiers:
        errors.append("mmr_tiers must be a non-empty list")
    else:
        for idx, tier in enumerate(tiers):
            if not isinstance(tier, dict) or not isinstance(tier.get("name"), str) or not _is_int(tier.get("min_mmr")):
                errors.append(f"mmr_tiers[{idx}] must have name and integer min_mmr")
    return errors


def _stat_blocks(raw: dict[str, Any], classes: tuple[str, ...]) -> Mapping[str, StatBlock]:
    return MappingProxyType({name: StatBlock(**{k: int(raw[name][k]) for k in STAT_KEYS}) for name in classes})


def tables_from_dict(raw: dict[str, Any], *, source: str = "<memory>") -> AxieTables:
    errors = validate_tables(raw)
    if errors:
        raise ValueError(f"invalid axie data tables ({source}): " + "; ".join(errors))

    classes = tuple(raw["classes"])
    breeding = raw["breeding"]
    multipliers = raw["advantage_multipliers"]
    stages_raw = raw.get("stages", {}) or {}
    return AxieTables(
        classes=classes,
        class_advantages=MappingProxyType({name: frozenset(raw["class_advantages"][name]) for name in classes}),
        strong_multiplier=float(multipliers["strong"]),
        weak_multiplier=float(multipliers["weak"]),
        neutral_multiplier=float(multipliers["neutral"]),
        base_stats=_stat_blocks(raw["base_stats"], classes),
        part_stat_bonus=_stat_blocks(raw["part_stat_bonus"], classes),
        axs_per_breed=float(breeding["axs_per_breed"]),
        max_breed_count=int(breeding["max_breed_count"]),
        adult_stage=int(breeding["adult_stage"]),
        no_parent_id=str(breeding.get("no_parent_id", "0")),
        slp_by_breed_count=tuple(int(c) for c in breeding["slp_by_breed_count"]),
        stages=MappingProxyType({int(k): str(v) for k, v in stages_raw.items()}),
        mmr_tiers=tuple(
            MmrTier(
                name=str(t["name"]),
                min_mmr=int(t["min_mmr"]),
                max_mmr=None if t.get("max_mmr") is None else int(t["max_mmr"]),
            )
            for t in raw["mmr_tiers"]
        ),
        source=source,
    )


def resolve_tables_path(explicit: str | None = None, env: Mapping[str, str] | None = None) -> Path:
    if explicit:
        return Path(explicit).resolve()
    source_env = os.environ if env is None else env
    from_env = str(source_env.get(TABLES_ENV_VAR, "")).strip()
    if from_env:
        return Path(from_env).resolve()
    return DEFAULT_TABLES_PATH


def load_tables(path: Path | str | None = None) -> AxieTables:
    resolved = Path(path).resolve() if path is not None else DEFAULT_TABLES_PATH
    return tables_from_dict(load_yaml(resolved), source=str(resolved))


@functools.lru_cache(maxsize=None)
def default_tables() -> AxieTables:
    return load_tables(DEFAULT_TABLES_PATH)
