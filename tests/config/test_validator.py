from statutax.backend.config.rule_tables import Jurisdiction, load_fiscal_year
from statutax.backend.config.validator import (
    main,
    validate_all_fiscal_years,
    validate_fiscal_year_configuration,
)


def _replace_jurisdiction(config, member, **updates):
    entry = config.jurisdictions[member].model_copy(update=updates)
    jurisdictions = dict(config.jurisdictions)
    jurisdictions[member] = entry
    return config.model_copy(update={"jurisdictions": jurisdictions})


def test_current_configurations_are_valid() -> None:
    results = validate_all_fiscal_years()
    assert all(not issues for issues in results.values()), results


def test_validator_flags_invalid_contribution_rate() -> None:
    config = load_fiscal_year("2023-24")
    payroll = config.jurisdictions[Jurisdiction.INDIA].payroll
    broken_payroll = payroll.model_copy(
        update={
            "provident_fund": payroll.provident_fund.model_copy(
                update={"employee_rate": 1.5}
            )
        }
    )
    broken = _replace_jurisdiction(config, Jurisdiction.INDIA, payroll=broken_payroll)

    errors = validate_fiscal_year_configuration(broken)

    assert any(
        "provident_fund" in error and "between 0 and 1" in error for error in errors
    )


def test_validator_flags_regime_order() -> None:
    config = load_fiscal_year("2023-24")
    individual = tuple(reversed(config.jurisdictions[Jurisdiction.INDIA].individual))
    broken = _replace_jurisdiction(config, Jurisdiction.INDIA, individual=individual)

    errors = validate_fiscal_year_configuration(broken)

    assert any("India.individual" in error and "listed first" in error for error in errors)


def test_validator_flags_missing_wage_ceiling() -> None:
    config = load_fiscal_year("2023-24")
    payroll = config.jurisdictions[Jurisdiction.INDIA].payroll
    broken_payroll = payroll.model_copy(
        update={
            "provident_fund": payroll.provident_fund.model_copy(
                update={"monthly_salary_cap": None}
            )
        }
    )
    broken = _replace_jurisdiction(config, Jurisdiction.INDIA, payroll=broken_payroll)

    errors = validate_fiscal_year_configuration(broken)

    assert "India.payroll.provident_fund: a monthly wage ceiling is required" in errors


def test_validator_flags_non_iso_currency() -> None:
    config = load_fiscal_year("2023-24")
    broken = _replace_jurisdiction(config, Jurisdiction.UK, currency="Pounds")

    errors = validate_fiscal_year_configuration(broken)

    assert any(error.startswith("UK:") and "ISO" in error for error in errors)


def test_cli_reports_ok(capsys) -> None:
    exit_code = main(["2023-24"])

    assert exit_code == 0
    assert "[2023-24] OK" in capsys.readouterr().out


def test_cli_reports_unknown_fiscal_year(capsys) -> None:
    exit_code = main(["1999-00"])

    assert exit_code == 1
    assert "failed to load configuration" in capsys.readouterr().out
