"""Derived Axie numbers: battle stats, purity, class advantage, rankings."""

from __future__ import annotations

from typing import Any

from axie_data import ZERO_STATS, AxieTables, StatBlock, default_tables
from gene_codec import DEFAULT_CLASS, PART_ORDER, DecodedGenes

# Weighted score used by the win-probability estimate.
WIN_SCORE_WEIGHTS = {"hp": 1.0, "speed": 1.2, "skill": 1.1, "morale": 0.9}


def calculate_stats(genes: DecodedGenes, tables: AxieTables | None = None) -> StatBlock:
    """Class base stats plus the bonus of each part's dominant allele class."""
    tables = tables or default_tables()
    stats = tables.base_stats.get(genes.axie_class) or tables.base_stats[DEFAULT_CLASS]
    for name in PART_ORDER:
        dominant = genes.part(name).dominant
        stats = stats + tables.part_stat_bonus.get(dominant.part_class, ZERO_STATS)
    return stats


def calculate_purity(genes: DecodedGenes) -> float:
    matching = sum(1 for name in PART_ORDER if genes.part(name).dominant.part_class == genes.axie_class)
    return (matching / len(PART_ORDER)) * 100


def format_purity(purity: float) -> str:
    return f"{purity:.1f}%"


def get_class_advantage(attacker: str, defender: str, tables: AxieTables | None = None) -> float:
    tables = tables or default_tables()
    if defender in tables.class_advantages.get(attacker, frozenset()):
        return tables.strong_multiplier
    if attacker in tables.class_advantages.get(defender, frozenset()):
        return tables.weak_multiplier
    return tables.neutral_multiplier


def describe_class_advantage(attacker: str, defender: str, tables: AxieTables | None = None) -> dict[str, Any]:
    multiplier = get_class_advantage(attacker, defender, tables)
    advantage = "neutral"
    if multiplier > 1:
        advantage = "strong"
    elif multiplier < 1:
        advantage = "weak"
    modifier = round((multiplier - 1) * 100)
    return {
        "attacker": attacker,
        "defender": defender,
        "multiplier": multiplier,
        "advantage": advantage,
        "damage_modifier": f"{modifier:+d}%" if modifier else "0%",
    }


def _win_score(stats: StatBlock) -> float:
    return sum(getattr(stats, key) * weight for key, weight in WIN_SCORE_WEIGHTS.items())


def estimate_win_probability(stats_a: StatBlock, stats_b: StatBlock) -> float:
    """Percentage chance that side A wins, from weighted stat totals."""
    score_a = _win_score(stats_a)
    total = score_a + _win_score(stats_b)
    if total <= 0:
        return 50.0
    return (score_a / total) * 100


def mmr_tier(mmr: float, tables: AxieTables | None = None) -> dict[str, Any]:
    tables = tables or default_tables()
    for rank, tier in enumerate(tables.mmr_tiers, start=1):
        if tier.contains(mmr):
            return {"name": tier.name, "min_mmr": tier.min_mmr, "max_mmr": tier.max_mmr, "rank": rank}
    first = tables.mmr_tiers[0]
    return {"name": first.name, "min_mmr": first.min_mmr, "max_mmr": first.max_mmr, "rank": 1}


def stage_name(stage: int, tables: AxieTables | None = None) -> str:
    tables = tables or default_tables()
    return tables.stages.get(stage, "Unknown")
