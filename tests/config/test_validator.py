import pytest

from perutax.backend.config import year_config
from perutax.backend.config.validator import (
    main,
    validate_all_years,
    validate_year_configuration,
)
from perutax.backend.config.year_config import BracketTable, load_year_configuration


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert all(not issues for issues in results.values()), results


def test_validator_flags_bounded_final_bracket() -> None:
    config = load_year_configuration(2021)
    bounded = BracketTable(brackets=config.brackets.brackets[:-1])
    broken = config.model_copy(update={"brackets": bounded})

    errors = validate_year_configuration(broken)

    assert any("45 units would not be taxed" in error for error in errors)


def test_validator_flags_invalid_rate() -> None:
    config = load_year_configuration(2021)
    brackets = list(config.brackets.brackets)
    brackets[0] = brackets[0].model_copy(update={"rate": 1.5})
    broken = config.model_copy(
        update={"brackets": config.brackets.model_copy(update={"brackets": tuple(brackets)})}
    )

    errors = validate_year_configuration(broken)

    assert any("brackets[0]" in error and "between 0 and 1" in error for error in errors)


def test_validator_flags_non_positive_unit_value() -> None:
    config = load_year_configuration(2021)
    broken = config.model_copy(update={"unit_value": 0})

    errors = validate_year_configuration(broken)

    assert any(error.startswith("uit:") for error in errors)


def test_validator_flags_deduction_parameters() -> None:
    config = load_year_configuration(2021)
    first = config.deductions.first.model_copy(update={"percentage": 1.2})
    second = config.deductions.second.model_copy(update={"amount_in_units": 0})
    deductions = config.deductions.model_copy(update={"first": first, "second": second})
    broken = config.model_copy(update={"deductions": deductions})

    errors = validate_year_configuration(broken)

    assert any(error.startswith("deductions.first") for error in errors)
    assert any(error.startswith("deductions.second") for error in errors)


def test_cli_reports_each_year(capsys) -> None:
    exit_code = main(["2021", "2022"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "[2021] OK (UIT 4400)" in output
    assert "[2022] OK (UIT 4600)" in output


def test_cli_reports_unknown_years(capsys) -> None:
    exit_code = main(["1999"])

    assert exit_code == 1
    assert "[1999] failed to load configuration" in capsys.readouterr().out


_VALID_YEAR = """\
year: 2021
uit: 4400
brackets:
  - width: 5
    rate: 0.08
  - width: null
    rate: 0.30
"""


@pytest.fixture()
def config_directory(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point the loader at an empty directory and reset its caches."""

    monkeypatch.setattr(year_config, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(year_config, "MANIFEST_FILE", tmp_path / "manifest.yaml")
    year_config.load_manifest.cache_clear()
    year_config.load_year_configuration.cache_clear()
    yield tmp_path
    year_config.load_manifest.cache_clear()
    year_config.load_year_configuration.cache_clear()


def test_cli_reports_duplicate_manifest_years(config_directory, capsys) -> None:
    (config_directory / "manifest.yaml").write_text(
        "years:\n  - year: 2021\n  - year: 2021\n", encoding="utf-8"
    )
    (config_directory / "2021.yaml").write_text(_VALID_YEAR, encoding="utf-8")

    exit_code = main([])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "[manifest] failed to load configuration manifest" in output
    assert "Duplicate year 2021" in output


def test_cli_reports_open_bracket_before_last(config_directory, capsys) -> None:
    (config_directory / "manifest.yaml").write_text(
        "years:\n  - year: 2021\n", encoding="utf-8"
    )
    (config_directory / "2021.yaml").write_text(
        "year: 2021\nuit: 4400\nbrackets:\n"
        "  - width: null\n    rate: 0.08\n"
        "  - width: 5\n    rate: 0.30\n",
        encoding="utf-8",
    )

    exit_code = main(["2021"])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "[2021] failed to load configuration" in output
    assert "Only the final tax bracket may have an open upper bound" in output


def test_cli_reports_out_of_range_rate(config_directory, capsys) -> None:
    (config_directory / "manifest.yaml").write_text(
        "years:\n  - year: 2021\n", encoding="utf-8"
    )
    (config_directory / "2021.yaml").write_text(
        _VALID_YEAR.replace("rate: 0.30", "rate: 1.30"), encoding="utf-8"
    )

    exit_code = main(["2021"])

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "Tax rates must be between 0 and 1" in output


def test_validate_all_years_collects_load_failures(config_directory) -> None:
    (config_directory / "manifest.yaml").write_text(
        "years:\n  - year: 2020\n  - year: 2021\n", encoding="utf-8"
    )
    (config_directory / "2020.yaml").write_text(
        _VALID_YEAR.replace("year: 2021", "year: 2020"), encoding="utf-8"
    )
    (config_directory / "2021.yaml").write_text(
        _VALID_YEAR.replace("uit: 4400", "uit: 0"), encoding="utf-8"
    )

    results = validate_all_years()

    assert results[2020] == []
    assert len(results[2021]) == 1
    assert "Configuration validation failed for 2021" in results[2021][0]
