from __future__ import annotations

import copy
from pathlib import Path

import pytest
import yaml

from ._axie_helpers import TABLES, _load_module

axie_data = _load_module("axie_data")


@pytest.fixture
def raw_tables():
    return axie_data.load_yaml(TABLES)


def test_bundled_tables_load():
    tables = axie_data.default_tables()
    assert tables.classes == ("beast", "bug", "bird", "plant", "aquatic", "reptile", "mech", "dawn", "dusk")
    assert tables.slp_by_breed_count == (900, 1350, 2250, 3600, 5850, 9450, 15300)
    assert tables.max_breed_count == 7
    assert tables.axs_per_breed == 0.5
    assert tables.base_stats["beast"] == axie_data.StatBlock(hp=31, speed=35, skill=31, morale=43)
    assert tables.stages[4] == "Adult"


def test_loaded_tables_are_read_only():
    tables = axie_data.default_tables()
    with pytest.raises(TypeError):
        tables.base_stats["beast"] = axie_data.ZERO_STATS
    with pytest.raises(AttributeError):
        tables.max_breed_count = 10


def test_mutual_advantage_is_rejected(raw_tables):
    raw = copy.deepcopy(raw_tables)
    raw["class_advantages"]["dusk"] = ["aquatic", "bird", "beast"]
    with pytest.raises(ValueError, match="beat each other"):
        axie_data.tables_from_dict(raw)


def test_advantage_lists_need_three_known_classes(raw_tables):
    raw = copy.deepcopy(raw_tables)
    raw["class_advantages"]["beast"] = ["plant", "reptile"]
    raw["class_advantages"]["bug"] = ["plant", "reptile", "dragon"]
    errors = axie_data.validate_tables(raw)
    assert "class_advantages.beast must list 3 distinct classes" in errors
    assert "class_advantages.bug references unknown class 'dragon'" in errors


def test_breeding_costs_must_increase(raw_tables):
    raw = copy.deepcopy(raw_tables)
    raw["breeding"]["slp_by_breed_count"] = [900, 900, 2250, 3600, 5850, 9450, 15300]
    with pytest.raises(ValueError, match="strictly increasing"):
        axie_data.tables_from_dict(raw)


def test_breeding_costs_must_cover_max_breed_count(raw_tables):
    raw = copy.deepcopy(raw_tables)
    raw["breeding"]["slp_by_breed_count"] = [900, 1350]
    errors = axie_data.validate_tables(raw)
    assert "breeding.slp_by_breed_count must have max_breed_count entries" in errors


def test_missing_stats_are_reported(raw_tables):
    raw = copy.deepcopy(raw_tables)
    del raw["base_stats"]["dawn"]
    raw["part_stat_bonus"]["mech"]["skill"] = -3
    errors = axie_data.validate_tables(raw)
    assert "base_stats.dawn is missing" in errors
    assert "part_stat_bonus.mech.skill must be a non-negative integer" in errors


def test_resolve_tables_path_precedence(tmp_path: Path):
    explicit = tmp_path / "explicit.yaml"
    from_env = tmp_path / "env.yaml"
    env = {axie_data.TABLES_ENV_VAR: str(from_env)}
    assert axie_data.resolve_tables_path(str(explicit), env) == explicit.resolve()
    assert axie_data.resolve_tables_path(None, env) == from_env.resolve()
    assert axie_data.resolve_tables_path(None, {}) == axie_data.DEFAULT_TABLES_PATH


def test_load_tables_from_custom_file(tmp_path: Path, raw_tables):
    raw = copy.deepcopy(raw_tables)
    raw["breeding"]["axs_per_breed"] = 1.25
    path = tmp_path / "tables.yaml"
    path.write_text(yaml.safe_dump(raw), encoding="utf-8")
    tables = axie_data.load_tables(path)
    assert tables.axs_per_breed == 1.25
    assert tables.source == str(path.resolve())


def test_non_mapping_file_is_rejected(tmp_path: Path):
    path = tmp_path / "tables.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError, match="YAML mapping"):
        axie_data.load_tables(path)
