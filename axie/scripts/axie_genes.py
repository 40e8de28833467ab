#!/usr/bin/env python3
"""Agent-facing JSON wrapper around Axie gene decoding and breeding rules."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable

# Local imports for script execution (python3 scripts/axie_genes.py ...)
SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from axie_data import AxieTables, load_tables, resolve_tables_path  # noqa: E402
from axie_summary import format_axie_summary, summarize_axie  # noqa: E402
from breeding import (  # noqa: E402
    BreedingParent,
    breed_count_info,
    breeding_cost,
    check_breeding_eligibility,
    costs_table,
    estimate_offspring_stats,
    offspring_part_probabilities,
    slp_cost,
)
from envelopes import build_error_payload, build_ok_payload, json_dump, render_payload  # noqa: E402
from error_map import (  # noqa: E402
    ERR_INTERNAL,
    ERR_INVALID_AXIE_ID,
    ERR_INVALID_BREEDING_RECORD,
    ERR_INVALID_CLASS,
    ERR_INVALID_GENE_FORMAT,
    ERR_INVALID_REQUEST,
    ERR_TABLES_INVALID,
    exit_code_for,
)
from gene_codec import (  # noqa: E402
    GENE_HEX_DIGITS,
    DecodedGenes,
    InvalidGeneFormat,
    decode_genes,
    dominant_parts,
    format_genes_for_display,
    normalize_gene_hex,
)
from trait_calculator import (  # noqa: E402
    calculate_purity,
    calculate_stats,
    describe_class_advantage,
    estimate_win_probability,
    format_purity,
    mmr_tier,
)

GENE_FORMAT_HINT = f"expected a 256-bit hex string ({GENE_HEX_DIGITS} characters, optional 0x prefix)"

Handler = Callable[[dict[str, Any], AxieTables], Any]


class CommandError(Exception):
    def __init__(self, code: str, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.hint = hint


def _require_genes(req: dict[str, Any], key: str) -> DecodedGenes:
    raw = req.get(key)
    if raw is None:
        raise CommandError(ERR_INVALID_REQUEST, f"request.{key} is required")
    try:
        return decode_genes(raw)
    except InvalidGeneFormat as err:
        raise CommandError(ERR_INVALID_GENE_FORMAT, f"{key}: {err}", hint=GENE_FORMAT_HINT) from err


def _require_class(req: dict[str, Any], key: str, tables: AxieTables) -> str:
    raw = req.get(key)
    if not isinstance(raw, str) or not raw.strip():
        raise CommandError(ERR_INVALID_REQUEST, f"request.{key} must be a non-empty string")
    name = raw.strip().lower()
    if name not in tables.classes:
        raise CommandError(
            ERR_INVALID_CLASS,
            f"request.{key}: unknown class '{raw}'",
            hint="known classes: " + ", ".join(tables.classes),
        )
    return name


def _require_parent(req: dict[str, Any], key: str) -> BreedingParent:
    raw = req.get(key)
    if not isinstance(raw, dict):
        raise CommandError(ERR_INVALID_REQUEST, f"request.{key} must be an object")
    try:
        return BreedingParent.from_dict(raw)
    except ValueError as err:
        code = ERR_INVALID_AXIE_ID if "axie id" in str(err) else ERR_INVALID_BREEDING_RECORD
        raise CommandError(code, f"{key}: {err}") from err


def op_decode(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    genes = _require_genes(req, "genes")
    return {
        "genes": normalize_gene_hex(req["genes"]),
        "decoded": genes.to_dict(),
        "dominant_parts": dominant_parts(genes),
    }


def op_validate(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    raw = req.get("genes")
    try:
        genes = decode_genes(raw)
    except InvalidGeneFormat as err:
        return {"genes": raw, "is_valid": False, "message": str(err)}
    purity = calculate_purity(genes)
    return {
        "genes": raw,
        "is_valid": True,
        "class": genes.axie_class,
        "purity": format_purity(purity),
        "purity_value": purity,
    }


def op_stats(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    genes = _require_genes(req, "genes")
    return {"class": genes.axie_class, "stats": calculate_stats(genes, tables).to_dict()}


def op_purity(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    genes = _require_genes(req, "genes")
    purity = calculate_purity(genes)
    return {"class": genes.axie_class, "purity": format_purity(purity), "purity_value": purity}


def op_parts(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    genes = _require_genes(req, "genes")
    return {
        "class": genes.axie_class,
        "parts": dominant_parts(genes),
        "display": format_genes_for_display(genes),
    }


def op_advantage(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    attacker = _require_class(req, "attacker", tables)
    defender = _require_class(req, "defender", tables)
    return describe_class_advantage(attacker, defender, tables)


def op_battle(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    attacker = _require_genes(req, "attacker_genes")
    defender = _require_genes(req, "defender_genes")
    attacker_stats = calculate_stats(attacker, tables)
    defender_stats = calculate_stats(defender, tables)
    return {
        "attacker": {"class": attacker.axie_class, "stats": attacker_stats.to_dict()},
        "defender": {"class": defender.axie_class, "stats": defender_stats.to_dict()},
        "class_advantage": describe_class_advantage(attacker.axie_class, defender.axie_class, tables),
        "attacker_win_probability": estimate_win_probability(attacker_stats, defender_stats),
    }


def op_breed_check(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    sire = _require_parent(req, "sire")
    matron = _require_parent(req, "matron")
    eligibility = check_breeding_eligibility(sire, matron, tables)
    result = eligibility.to_dict()
    result["sire"] = sire.to_dict()
    result["matron"] = matron.to_dict()
    return result


def op_breed_cost(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    sire = _require_parent(req, "sire")
    matron = _require_parent(req, "matron")
    cost = breeding_cost(sire, matron, tables)
    return {
        "sire": {"id": sire.id, "breed_count": sire.breed_count, "slp_cost": cost.sire_slp},
        "matron": {"id": matron.id, "breed_count": matron.breed_count, "slp_cost": cost.matron_slp},
        "total_cost": {"slp": cost.slp_total, "axs": cost.axs},
    }


def op_breed_count(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    return breed_count_info(_require_parent(req, "axie"), tables)


def op_costs_table(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    return costs_table(tables)


def op_offspring(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    sire = _require_genes(req, "sire_genes")
    matron = _require_genes(req, "matron_genes")
    estimate = estimate_offspring_stats(sire, matron, tables)
    return {
        "parts": offspring_part_probabilities(sire, matron),
        "stats": {band: block.to_dict() for band, block in estimate.items()},
    }


def op_mmr_tier(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    mmr = req.get("mmr")
    if isinstance(mmr, bool) or not isinstance(mmr, (int, float)):
        raise CommandError(ERR_INVALID_REQUEST, "request.mmr must be a number")
    return {"mmr": mmr, "tier": mmr_tier(mmr, tables)}


def op_summary(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    record = req.get("axie")
    if not isinstance(record, dict):
        raise CommandError(ERR_INVALID_REQUEST, "request.axie must be an object")
    now = req.get("now")
    try:
        summary = summarize_axie(record, now=now, tables=tables)
    except InvalidGeneFormat as err:
        raise CommandError(ERR_INVALID_GENE_FORMAT, f"axie.genes: {err}", hint=GENE_FORMAT_HINT) from err
    except ValueError as err:
        code = ERR_INVALID_AXIE_ID if "axie id" in str(err) else ERR_INVALID_REQUEST
        raise CommandError(code, str(err)) from err
    summary["text"] = format_axie_summary(summary)
    return summary


def op_tables_summary(req: dict[str, Any], tables: AxieTables) -> dict[str, Any]:
    result = tables.summary()
    result["next_slp_by_breed_count"] = {
        str(count): slp_cost(count, tables) for count in range(tables.max_breed_count + 1)
    }
    return result


OPERATIONS: dict[str, Handler] = {
    "decode": op_decode,
    "validate": op_validate,
    "stats": op_stats,
    "purity": op_purity,
    "parts": op_parts,
    "advantage": op_advantage,
    "battle": op_battle,
    "breed-check": op_breed_check,
    "breed-cost": op_breed_cost,
    "breed-count": op_breed_count,
    "costs-table": op_costs_table,
    "offspring": op_offspring,
    "mmr-tier": op_mmr_tier,
    "summary": op_summary,
    "tables-summary": op_tables_summary,
}


def run_operation(method: str, req: dict[str, Any], tables: AxieTables) -> tuple[int, dict[str, Any]]:
    handler = OPERATIONS.get(method)
    if handler is None:
        return 2, build_error_payload(method=method, code=ERR_INVALID_REQUEST, message=f"unknown operation: {method}")
    try:
        result = handler(req, tables)
    except CommandError as err:
        payload = build_error_payload(method=method, code=err.code, message=err.message, request=req, hint=err.hint)
        return exit_code_for(err.code), payload
    except Exception as err:  # noqa: BLE001
        return 1, build_error_payload(method=method, code=ERR_INTERNAL, message=str(err), request=req)
    return 0, build_ok_payload(method=method, result=result, request=req)


def _parse_request_from_args(args: argparse.Namespace) -> dict[str, Any]:
    if args.request_file:
        with open(args.request_file, encoding="utf-8") as f:
            req = json.load(f)
    elif args.request_json:
        req = json.loads(args.request_json)
    else:
        req = {}
    if not isinstance(req, dict):
        raise ValueError("request must be an object")
    for flag in ("genes", "attacker", "defender", "attacker_genes", "defender_genes", "sire_genes", "matron_genes", "mmr"):
        value = getattr(args, flag, None)
        if value is not None:
            req[flag] = value
    return req


def cmd_operation(args: argparse.Namespace) -> int:
    method = args.command
    try:
        req = _parse_request_from_args(args)
    except Exception as err:  # noqa: BLE001
        print(json_dump(build_error_payload(method=method, code=ERR_INVALID_REQUEST, message=str(err)), pretty=not args.compact))
        return 2

    tables_path = resolve_tables_path(args.tables)
    try:
        tables = load_tables(tables_path)
    except (OSError, ValueError) as err:
        payload = build_error_payload(
            method=method,
            code=ERR_TABLES_INVALID,
            message=str(err),
            hint=f"tables path: {tables_path}",
        )
        print(json_dump(payload, pretty=not args.compact))
        return exit_code_for(ERR_TABLES_INVALID)

    exit_code, payload = run_operation(method, req, tables)
    render_rc = render_payload(payload, compact=args.compact, result_only=args.result_only, select=args.select)
    if render_rc != 0:
        return render_rc
    return exit_code


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tables", help="axie data tables YAML path (default: $AXIE_DATA_TABLES or bundled)")
    parser.add_argument("--request-file", help="request JSON file")
    parser.add_argument("--request-json", help="request JSON string")
    parser.add_argument("--compact", action="store_true", help="compact JSON output")
    parser.add_argument("--result-only", action="store_true", help="print only result field")
    parser.add_argument("--select", help="jsonpath-lite selector (supports $, .key, [index])")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("decode", "Decode a 256-bit gene hex into class, cosmetics and part alleles"),
        ("validate", "Check whether a gene hex is well formed"),
        ("stats", "Compute battle stats from genes"),
        ("purity", "Compute gene purity percentage"),
        ("parts", "List dominant body parts"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--genes", help="gene hex (64 hex chars, optional 0x)")
        _add_common_args(p)

    advantage = sub.add_parser("advantage", help="Class advantage multiplier for attacker vs defender")
    advantage.add_argument("--attacker", help="attacker class")
    advantage.add_argument("--defender", help="defender class")
    _add_common_args(advantage)

    battle = sub.add_parser("battle", help="Compare two Axies by stats and class advantage")
    battle.add_argument("--attacker-genes", dest="attacker_genes", help="attacker gene hex")
    battle.add_argument("--defender-genes", dest="defender_genes", help="defender gene hex")
    _add_common_args(battle)

    offspring = sub.add_parser("offspring", help="Offspring part probabilities and stat band")
    offspring.add_argument("--sire-genes", dest="sire_genes", help="sire gene hex")
    offspring.add_argument("--matron-genes", dest="matron_genes", help="matron gene hex")
    _add_common_args(offspring)

    for name, help_text in (
        ("breed-check", "Check breeding eligibility for request.sire and request.matron"),
        ("breed-cost", "SLP/AXS cost for request.sire and request.matron"),
        ("breed-count", "Breed count details for request.axie"),
        ("costs-table", "SLP cost per breed count"),
        ("summary", "Readable summary for request.axie"),
        ("tables-summary", "Describe the loaded data tables"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_common_args(p)

    mmr = sub.add_parser("mmr-tier", help="Arena tier for an MMR rating")
    mmr.add_argument("--mmr", type=float, help="MMR rating")
    _add_common_args(mmr)

    for name in OPERATIONS:
        sub.choices[name].set_defaults(func=cmd_operation)
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
