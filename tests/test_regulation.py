import sys
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

sys.path.append(str(Path(__file__).resolve().parents[1]))

from salarymm.core.calculator import PayrollInput, calculate_payroll, calculate_pit
from salarymm.core.regulation import (
    DEFAULT_REGULATION_FILE,
    RegulationParams,
    get_regulation,
    load_regulation,
    reset_regulation_cache,
)
from salarymm.core.validation import RegulationError


@pytest.fixture(autouse=True)
def clear_cache():
    reset_regulation_cache()
    yield
    reset_regulation_cache()


def _default_data() -> dict:
    with DEFAULT_REGULATION_FILE.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp)


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "regulation.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_bundled_regulation_constants():
    regulation = load_regulation()

    assert regulation.version == "vn-2025-07"
    assert regulation.social_insurance_rate == Decimal("0.08")
    assert regulation.health_insurance_rate == Decimal("0.015")
    assert regulation.unemployment_insurance_rate == Decimal("0.01")
    assert regulation.max_insurance_salary == Decimal("46800000")
    assert regulation.personal_deduction == Decimal("11000000")
    assert regulation.dependent_deduction == Decimal("4400000")
    assert len(regulation.brackets) == 7
    assert regulation.brackets[-1].upper is None
    assert regulation.brackets[-1].rate == Decimal("0.35")


def test_get_regulation_is_cached():
    assert get_regulation() is get_regulation()


def test_regulation_is_immutable():
    regulation = get_regulation()
    with pytest.raises(Exception):
        regulation.personal_deduction = Decimal("0")


def test_env_override_selects_another_file(tmp_path, monkeypatch):
    data = _default_data()
    data["version"] = "vn-2026-01"
    data["deductions"]["personal"] = 15_500_000
    data["deductions"]["dependent"] = 6_200_000
    monkeypatch.setenv("SALARYMM_REGULATION_FILE", str(_write(tmp_path, data)))

    regulation = get_regulation()
    assert regulation.version == "vn-2026-01"

    result = calculate_payroll(PayrollInput(base_salary=20_000_000, total_allowances=2_000_000, total_bonus=1_000_000))
    # taxable 23M - 2.1M - 15.5M = 5.4M
    assert result.personal_income_tax == 290_000


def test_new_bracket_table_changes_tax_without_code_changes(tmp_path):
    data = _default_data()
    data["pit_brackets"] = [
        {"lower": 0, "upper": 10_000_000, "rate": 0.05},
        {"lower": 10_000_000, "upper": None, "rate": 0.2},
    ]
    regulation = load_regulation(_write(tmp_path, data))

    assert calculate_pit(12_000_000, regulation) == 900_000


def test_missing_file_raises(tmp_path):
    with pytest.raises(RegulationError):
        load_regulation(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "mutate",
    [
        lambda data: data["pit_brackets"].pop(),
        lambda data: data["pit_brackets"].pop(0),
        lambda data: data["pit_brackets"].__setitem__(1, {"lower": 6_000_000, "upper": 10_000_000, "rate": 0.1}),
        lambda data: data["pit_brackets"].__setitem__(0, {"lower": 0, "upper": None, "rate": 0.05}),
        lambda data: data["pit_brackets"].__setitem__(0, {"lower": 0, "upper": 5_000_000, "rate": 1.5}),
        lambda data: data["pit_brackets"].clear(),
        lambda data: data["insurance"].__setitem__("social_rate", -0.08),
        lambda data: data["insurance"].__setitem__("max_salary", None),
        lambda data: data["deductions"].__setitem__("personal", "eleven million"),
        lambda data: data["deductions"].__setitem__("dependent", -1),
        lambda data: data.__setitem__("insurance", [0.08, 0.015, 0.01]),
        lambda data: data.__setitem__("deductions", "11000000"),
        lambda data: data["pit_brackets"].__setitem__(2, [10_000_000, 18_000_000, 0.15]),
        lambda data: data.__setitem__("pit_brackets", {"lower": 0, "rate": 0.05}),
    ],
)
def test_malformed_regulation_is_rejected(tmp_path, mutate):
    data = _default_data()
    mutate(data)
    with pytest.raises(RegulationError):
        load_regulation(_write(tmp_path, data))


def test_from_mapping_requires_mapping():
    with pytest.raises(RegulationError):
        RegulationParams.from_mapping(["not", "a", "mapping"])


def test_unparseable_yaml_raises_regulation_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("version: vn-broken\ninsurance: {social_rate: 0.08\n", encoding="utf-8")
    with pytest.raises(RegulationError):
        load_regulation(path)
