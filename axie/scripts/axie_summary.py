"""Human-readable Axie summaries built from a fetched Axie record."""

from __future__ import annotations

from typing import Any

from axie_data import AxieTables, default_tables
from gene_codec import decode_genes, dominant_parts
from identifiers import axie_age_days, axie_image_url, axie_market_url, parse_axie_id, parse_nonnegative_count
from trait_calculator import calculate_purity, calculate_stats, format_purity, stage_name


def summarize_axie(record: dict[str, Any], *, now: float | None = None, tables: AxieTables | None = None) -> dict[str, Any]:
    """Structured summary of an Axie record (`id`, `genes`, `stage`, `breed_count`, `born_at`)."""
    tables = tables or default_tables()
    if not isinstance(record, dict):
        raise ValueError("axie record must be an object")
    if "genes" not in record:
        raise ValueError("axie record requires genes")
    axie_id = parse_axie_id(record.get("id", ""))
    genes = decode_genes(record["genes"])
    stats = calculate_stats(genes, tables)
    purity = calculate_purity(genes)

    ok, stage, err = parse_nonnegative_count(record.get("stage", 0), field="stage")
    if not ok:
        raise ValueError(err)
    ok, breed_count, err = parse_nonnegative_count(
        record.get("breed_count", record.get("breedCount", 0)), field="breed_count"
    )
    if not ok:
        raise ValueError(err)
    born_at = record.get("born_at", record.get("bornAt"))

    return {
        "id": axie_id,
        # The record's own class wins over the decoded one when both exist.
        "class": str(record.get("class") or genes.axie_class),
        "decoded_class": genes.axie_class,
        "stage": stage,
        "stage_name": stage_name(stage, tables),
        "age_days": None if born_at is None else axie_age_days(born_at, now),
        "breed_count": breed_count,
        "max_breed_count": tables.max_breed_count,
        "purity": purity,
        "purity_display": format_purity(purity),
        "stats": stats.to_dict(),
        "parts": dominant_parts(genes),
        "image_url": axie_image_url(axie_id),
        "market_url": axie_market_url(axie_id),
    }


def format_axie_summary(summary: dict[str, Any]) -> str:
    stats = summary["stats"]
    age = "unknown" if summary["age_days"] is None else f"{summary['age_days']} days"
    lines = [
        f"Axie #{summary['id']}",
        f"Class: {summary['class']}",
        f"Stage: {summary['stage_name']}",
        f"Age: {age}",
        f"Breed Count: {summary['breed_count']}/{summary['max_breed_count']}",
        f"Purity: {summary['purity_display']}",
        f"Stats: HP {stats['hp']} | Speed {stats['speed']} | Skill {stats['skill']} | Morale {stats['morale']}",
    ]
    return "\n".join(lines)
