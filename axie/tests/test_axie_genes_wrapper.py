from __future__ import annotations

import json
from pathlib import Path

from ._axie_helpers import GENES_ALL_ONE, GENES_ALL_ZERO, _run_cmd, _run_request


def test_decode_all_one_genes():
    proc = _run_cmd("decode", ["--genes", GENES_ALL_ONE])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    payload = json.loads(proc.stdout)
    assert payload["ok"] is True
    assert payload["method"] == "decode"
    result = payload["result"]
    assert result["genes"] == "1" * 64
    assert result["decoded"]["class"] == "bug"
    assert result["decoded"]["eyes"]["dominant"] == {"part_class": "bug", "part_id": "4", "name": "part-4"}
    assert len(result["dominant_parts"]) == 6


def test_decode_rejects_malformed_genes():
    proc = _run_cmd("decode", ["--genes", "0x1234"])
    assert proc.returncode == 2
    payload = json.loads(proc.stdout)
    assert payload["ok"] is False
    assert payload["error_code"] == "INVALID_GENE_FORMAT"
    assert "64" in payload["hint"]


def test_validate_never_fails():
    proc = _run_cmd("validate", ["--genes", "invalid"])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert result["is_valid"] is False

    proc = _run_cmd("validate", ["--genes", GENES_ALL_ONE])
    result = json.loads(proc.stdout)["result"]
    assert result["is_valid"] is True
    assert result["purity"] == "100.0%"


def test_stats_and_purity_result_only():
    proc = _run_cmd("stats", ["--genes", GENES_ALL_ZERO, "--result-only", "--compact"])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert json.loads(proc.stdout) == {"class": "beast", "stats": {"hp": 31, "speed": 41, "skill": 31, "morale": 61}}

    proc = _run_cmd("purity", ["--genes", GENES_ALL_ONE, "--select", "$.result.purity_value"])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert float(proc.stdout.strip()) == 100.0


def test_advantage_command():
    proc = _run_cmd("advantage", ["--attacker", "Aquatic", "--defender", "beast"])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert result["multiplier"] == 1.15
    assert result["advantage"] == "strong"

    proc = _run_cmd("advantage", ["--attacker", "dragon", "--defender", "beast"])
    assert proc.returncode == 2
    payload = json.loads(proc.stdout)
    assert payload["error_code"] == "INVALID_CLASS"


def test_breed_check_eligible_pair():
    request = {
        "sire": {"id": "100", "breed_count": 0, "stage": 4},
        "matron": {"id": "200", "breed_count": 0, "stage": 4},
    }
    proc = _run_request("breed-check", request)
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert result["can_breed"] is True
    assert result["cost"]["slp_total"] == 1800
    assert result["cost"]["axs"] == 0.5


def test_breed_check_reports_all_reasons():
    request = {
        "sire": {"id": "100", "breedCount": 7, "stage": 4},
        "matron": {"id": "200", "breedCount": 1, "stage": 2, "matronId": "100"},
    }
    proc = _run_request("breed-check", request)
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert result["can_breed"] is False
    assert result["cost"] is None
    assert len(result["reasons"]) == 3
    assert "max breed count" in result["reasons"][0]


def test_breed_check_rejects_bad_records():
    request = {
        "sire": {"id": "1", "breed_count": 0, "stage": 9},
        "matron": {"id": "2", "breed_count": 0, "stage": 4},
    }
    proc = _run_request("breed-check", request)
    assert proc.returncode == 2
    assert json.loads(proc.stdout)["error_code"] == "INVALID_BREEDING_RECORD"

    request = {
        "sire": {"id": "abc", "breed_count": 0, "stage": 4},
        "matron": {"id": "2", "breed_count": 0, "stage": 4},
    }
    proc = _run_request("breed-check", request)
    assert proc.returncode == 2
    assert json.loads(proc.stdout)["error_code"] == "INVALID_AXIE_ID"

    request = {"sire": {"id": "1", "stage": 4}, "matron": {"id": "2", "breed_count": 0, "stage": 4}}
    proc = _run_request("breed-check", request)
    assert proc.returncode == 2
    payload = json.loads(proc.stdout)
    assert payload["error_code"] == "INVALID_BREEDING_RECORD"
    assert "requires breed_count" in payload["error_message"]


def test_breed_check_matches_parent_given_as_url():
    url = "https://app.axieinfinity.com/marketplace/axies/10"
    request = {
        "sire": {"id": url, "breedCount": 0, "stage": 4},
        "matron": {"id": "#11", "breedCount": 0, "stage": 4, "matronId": url, "sireId": "#9"},
    }
    proc = _run_request("breed-check", request)
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert result["can_breed"] is False
    assert result["reasons"] == ["cannot breed with parent: axie 10 is a parent of axie 11"]
    assert result["matron"]["matron_id"] == "10"
    assert result["matron"]["sire_id"] == "9"


def test_breed_cost_and_costs_table():
    request = {
        "sire": {"id": "1", "breed_count": 6, "stage": 4},
        "matron": {"id": "2", "breed_count": 0, "stage": 4},
    }
    proc = _run_request("breed-cost", request, extra_args=["--result-only"])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    assert json.loads(proc.stdout)["total_cost"] == {"slp": 16200, "axs": 0.5}

    proc = _run_cmd("costs-table", ["--select", "$.result.costs_by_breed_count[6].slp_cost"])
    assert proc.stdout.strip() == "15300"


def test_offspring_and_battle():
    proc = _run_cmd("offspring", ["--sire-genes", GENES_ALL_ZERO, "--matron-genes", GENES_ALL_ONE])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert [row["key"] for row in result["parts"]["tail"]] == ["beast-0", "bug-4"]
    assert result["stats"]["average"]["hp"] == 36

    proc = _run_cmd("battle", ["--attacker-genes", GENES_ALL_ONE, "--defender-genes", GENES_ALL_ONE])
    result = json.loads(proc.stdout)["result"]
    assert result["attacker_win_probability"] == 50.0
    assert result["class_advantage"]["advantage"] == "neutral"


def test_summary_and_mmr_tier():
    request = {"axie": {"id": "42", "genes": GENES_ALL_ONE, "stage": 4, "breed_count": 1, "born_at": 0}, "now": 86400}
    proc = _run_request("summary", request)
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)["result"]
    assert result["text"].startswith("Axie #42\nClass: bug")
    assert result["age_days"] == 1

    proc = _run_cmd("mmr-tier", ["--mmr", "2150", "--result-only"])
    assert json.loads(proc.stdout)["tier"]["name"] == "Dragon"


def test_missing_genes_is_invalid_request():
    proc = _run_request("stats", {})
    assert proc.returncode == 2
    assert json.loads(proc.stdout)["error_code"] == "INVALID_REQUEST"


def test_malformed_request_json():
    proc = _run_cmd("stats", ["--request-json", "{not json"])
    assert proc.returncode == 2
    assert json.loads(proc.stdout)["error_code"] == "INVALID_REQUEST"


def test_tables_env_override(tmp_path: Path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("classes: [beast]\n", encoding="utf-8")
    proc = _run_cmd("tables-summary", [], extra_env={"AXIE_DATA_TABLES": str(bad)})
    assert proc.returncode == 1
    payload = json.loads(proc.stdout)
    assert payload["error_code"] == "TABLES_INVALID"
    assert bad.name in payload["hint"]

    proc = _run_cmd("tables-summary", ["--result-only"])
    assert proc.returncode == 0, proc.stdout + proc.stderr
    result = json.loads(proc.stdout)
    assert result["class_count"] == 9
    assert result["next_slp_by_breed_count"]["7"] is None
