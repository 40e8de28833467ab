"""Breeding rules: per-parent costs, pair eligibility and inheritance odds."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from axie_data import STAT_KEYS, AxieTables, StatBlock, default_tables
from gene_codec import ALLELE_SLOTS, PART_ORDER, DecodedGenes, PartGene
from identifiers import parse_axie_id, parse_nonnegative_count
from trait_calculator import calculate_stats

MIN_STAGE = 1
MAX_STAGE = 4

# Chance that a given parent passes a given allele slot to the child.
# Per parent the weights sum to 0.5, so both parents together sum to 1.
ALLELE_INHERITANCE_WEIGHTS = {
    "dominant": 0.375,
    "recessive1": 0.09375,
    "recessive2": 0.03125,
}

OFFSPRING_STAT_SPREAD = 4
NO_PARENT_ID = "0"


def _parent_id(raw: Any) -> str:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return NO_PARENT_ID
    return parse_axie_id(raw)


@dataclass(frozen=True)
class BreedingParent:
    """Breeding-relevant slice of an Axie record, supplied by the caller."""

    id: str
    breed_count: int
    stage: int
    matron_id: str = NO_PARENT_ID
    sire_id: str = NO_PARENT_ID

    def __post_init__(self) -> None:
        if isinstance(self.breed_count, bool) or not isinstance(self.breed_count, int) or self.breed_count < 0:
            raise ValueError("breed_count must be a non-negative integer")
        if isinstance(self.stage, bool) or not isinstance(self.stage, int):
            raise ValueError("stage must be an integer")
        if not MIN_STAGE <= self.stage <= MAX_STAGE:
            raise ValueError(f"stage must be between {MIN_STAGE} and {MAX_STAGE}")

    @staticmethod
    def from_dict(d: dict[str, Any]) -> BreedingParent:
        """Build from snake_case or camelCase keys; missing parent ids mean no parent."""
        if not isinstance(d, dict):
            raise ValueError("breeding record must be an object")
        if "id" not in d:
            raise ValueError("breeding record requires id")
        axie_id = parse_axie_id(d["id"])
        if "breed_count" not in d and "breedCount" not in d:
            raise ValueError("breeding record requires breed_count")
        raw_count = d["breed_count"] if "breed_count" in d else d["breedCount"]
        ok, breed_count, err = parse_nonnegative_count(raw_count, field="breed_count")
        if not ok:
            raise ValueError(err)
        ok, stage, err = parse_nonnegative_count(d.get("stage"), field="stage")
        if not ok:
            raise ValueError(err)
        return BreedingParent(
            id=axie_id,
            breed_count=breed_count,
            stage=stage,
            matron_id=_parent_id(d.get("matron_id", d.get("matronId"))),
            sire_id=_parent_id(d.get("sire_id", d.get("sireId"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "breed_count": self.breed_count,
            "stage": self.stage,
            "matron_id": self.matron_id,
            "sire_id": self.sire_id,
        }


@dataclass(frozen=True)
class BreedingCost:
    sire_slp: int | None
    matron_slp: int | None
    axs: float

    @property
    def slp_total(self) -> int | None:
        if self.sire_slp is None or self.matron_slp is None:
            return None
        return self.sire_slp + self.matron_slp

    def to_dict(self) -> dict[str, Any]:
        return {
            "sire_slp": self.sire_slp,
            "matron_slp": self.matron_slp,
            "slp_total": self.slp_total,
            "axs": self.axs,
        }


@dataclass(frozen=True)
class BreedingEligibility:
    can_breed: bool
    reasons: tuple[str, ...]
    cost: BreedingCost | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "can_breed": self.can_breed,
            "reasons": list(self.reasons),
            "cost": self.cost.to_dict() if self.cost is not None else None,
        }


def slp_cost(breed_count: int, tables: AxieTables | None = None) -> int | None:
    """SLP a parent pays for its next breed; None once the maximum is reached."""
    tables = tables or default_tables()
    if breed_count < 0:
        raise ValueError("breed_count must be non-negative")
    if breed_count >= tables.max_breed_count:
        return None
    return tables.slp_by_breed_count[breed_count]


def breeding_cost(sire: BreedingParent, matron: BreedingParent, tables: AxieTables | None = None) -> BreedingCost:
    # AXS is charged once per pairing, SLP once per parent.
    tables = tables or default_tables()
    return BreedingCost(
        sire_slp=slp_cost(sire.breed_count, tables),
        matron_slp=slp_cost(matron.breed_count, tables),
        axs=tables.axs_per_breed,
    )


def _parent_reasons(parent: BreedingParent, tables: AxieTables) -> list[str]:
    reasons: list[str] = []
    if parent.breed_count >= tables.max_breed_count:
        reasons.append(f"axie {parent.id} has reached max breed count ({tables.max_breed_count})")
    if parent.stage < tables.adult_stage:
        reasons.append(f"axie {parent.id} must be an adult (stage {tables.adult_stage}) to breed")
    return reasons


def can_breed(parent: BreedingParent, tables: AxieTables | None = None) -> dict[str, Any]:
    tables = tables or default_tables()
    reasons = _parent_reasons(parent, tables)
    if reasons:
        return {"can_breed": False, "axs_cost": 0, "slp_cost": 0, "reasons": reasons}
    return {
        "can_breed": True,
        "axs_cost": tables.axs_per_breed,
        "slp_cost": slp_cost(parent.breed_count, tables),
        "reasons": [],
    }


def _has_parent(parent_id: str, tables: AxieTables) -> bool:
    return bool(parent_id) and parent_id != tables.no_parent_id


def check_breeding_eligibility(
    sire: BreedingParent,
    matron: BreedingParent,
    tables: AxieTables | None = None,
) -> BreedingEligibility:
    """Evaluate every blocking rule and report all of them, not just the first."""
    tables = tables or default_tables()
    reasons: list[str] = []
    if sire.id == matron.id:
        reasons.append("cannot breed axie with itself")

    for parent in (sire, matron):
        for reason in _parent_reasons(parent, tables):
            if reason not in reasons:
                reasons.append(reason)

    if _has_parent(sire.id, tables) and sire.id in (matron.matron_id, matron.sire_id):
        reasons.append(f"cannot breed with parent: axie {sire.id} is a parent of axie {matron.id}")
    if _has_parent(matron.id, tables) and matron.id in (sire.matron_id, sire.sire_id):
        reasons.append(f"cannot breed with parent: axie {matron.id} is a parent of axie {sire.id}")

    if (
        sire.matron_id == matron.matron_id
        and sire.sire_id == matron.sire_id
        and _has_parent(sire.matron_id, tables)
        and _has_parent(sire.sire_id, tables)
    ):
        reasons.append("cannot breed siblings")

    cost = None if reasons else breeding_cost(sire, matron, tables)
    return BreedingEligibility(can_breed=not reasons, reasons=tuple(reasons), cost=cost)


def breed_count_info(parent: BreedingParent, tables: AxieTables | None = None) -> dict[str, Any]:
    tables = tables or default_tables()
    next_slp = slp_cost(parent.breed_count, tables)
    return {
        "axie_id": parent.id,
        "breed_count": parent.breed_count,
        "max_breed_count": tables.max_breed_count,
        "remaining_breeds": max(0, tables.max_breed_count - parent.breed_count),
        "next_breed_cost": None if next_slp is None else {"slp": next_slp, "axs": tables.axs_per_breed},
        "can_breed": next_slp is not None and parent.stage >= tables.adult_stage,
    }


def costs_table(tables: AxieTables | None = None) -> dict[str, Any]:
    tables = tables or default_tables()
    return {
        "axs_per_breed": tables.axs_per_breed,
        "max_breed_count": tables.max_breed_count,
        "costs_by_breed_count": [
            {"breed_count": count, "slp_cost": slp, "axs_cost": tables.axs_per_breed}
            for count, slp in enumerate(tables.slp_by_breed_count)
        ],
    }


def breeding_probability(part_a: PartGene, part_b: PartGene) -> dict[str, float]:
    """Chance of each `class-id` allele showing up in the child's part.

    Six weighted entries (three slots from each parent) collapse onto at most
    six keys; alleles repeated across slots or parents add up.
    """
    probabilities: dict[str, float] = {}
    for part in (part_a, part_b):
        for slot, allele in zip(ALLELE_SLOTS, part.alleles()):
            probabilities[allele.key] = probabilities.get(allele.key, 0.0) + ALLELE_INHERITANCE_WEIGHTS[slot]
    return probabilities


def offspring_part_probabilities(genes_a: DecodedGenes, genes_b: DecodedGenes) -> dict[str, list[dict[str, Any]]]:
    out: dict[str, list[dict[str, Any]]] = {}
    for name in PART_ORDER:
        distribution = breeding_probability(genes_a.part(name), genes_b.part(name))
        rows = []
        for key, probability in distribution.items():
            part_class, _, part_id = key.rpartition("-")
            rows.append({"key": key, "part_class": part_class, "part_id": part_id, "probability": probability})
        rows.sort(key=lambda row: row["probability"], reverse=True)
        out[name] = rows
    return out


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_offspring_stats(
    genes_a: DecodedGenes,
    genes_b: DecodedGenes,
    tables: AxieTables | None = None,
) -> dict[str, StatBlock]:
    """Rough offspring stat band: parent min/max widened by a fixed spread, plus the mean."""
    stats_a = calculate_stats(genes_a, tables)
    stats_b = calculate_stats(genes_b, tables)
    low: dict[str, int] = {}
    high: dict[str, int] = {}
    mean: dict[str, int] = {}
    for key in STAT_KEYS:
        a, b = getattr(stats_a, key), getattr(stats_b, key)
        low[key] = max(0, min(a, b) - OFFSPRING_STAT_SPREAD)
        high[key] = max(a, b) + OFFSPRING_STAT_SPREAD
        mean[key] = _round_half_up((a + b) / 2)
    return {"min": StatBlock(**low), "max": StatBlock(**high), "average": StatBlock(**mean)}
