"""Licence unit calculator tests."""

import logging

import pytest

from dblicence_api.models.domain import (
    CoreFactor,
    Database,
    DatabaseLicense,
    Host,
    LicenseMetric,
    LicenseType,
    Technology,
)
from dblicence_api.services.license_unit_service import (
    LicenseUnitCalculator,
    build_catalogue,
    resolve_license_type,
)

XEON_FACTORS = [
    CoreFactor(processor_pattern="SPARC", factor=0.25),
    CoreFactor(processor_pattern="Xeon", factor=0.5),
    CoreFactor(processor_pattern="Intel", factor=1.0),
]


def _license_type(metric: LicenseMetric = LicenseMetric.PROCESSOR, **kwargs) -> LicenseType:
    return LicenseType(
        id=kwargs.pop("id", "A90611"),
        item_description="Oracle Database Enterprise Edition",
        metric=metric,
        core_factors=kwargs.pop("core_factors", XEON_FACTORS),
        **kwargs,
    )


def _host(cpu_model: str = "Intel(R) Xeon(R) Gold 6248 CPU", cores: int = 8, sockets: int = 2) -> Host:
    return Host(hostname="ora01", cpu_model=cpu_model, cpu_cores=cores, cpu_sockets=sockets)


class TestCoreFactor:
    """Core factor lookup."""

    def test_first_matching_pattern_in_stored_order_wins(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        # "Intel" also matches, but "Xeon" comes first
        assert calculator.core_factor(_license_type(), _host()) == 0.5

    def test_match_is_case_insensitive(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        host = _host(cpu_model="sparc-t8")
        assert calculator.core_factor(_license_type(), host) == 0.25

    def test_falls_back_to_license_type_default(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        license_type = _license_type(default_core_factor=0.75)
        assert calculator.core_factor(license_type, _host(cpu_model="AMD EPYC 7543")) == 0.75

    def test_falls_back_to_configured_default_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        with caplog.at_level(logging.WARNING, logger="dblicence_api.services.license_unit_service"):
            factor = calculator.core_factor(_license_type(), _host(cpu_model="AMD EPYC 7543"))
            calculator.core_factor(_license_type(), _host(cpu_model="AMD EPYC 7543"))

        assert factor == 0.5
        warnings = [r for r in caplog.records if "AMD EPYC 7543" in r.getMessage()]
        assert len(warnings) == 1

    def test_default_comes_from_settings(self) -> None:
        assert LicenseUnitCalculator().default_core_factor == 0.5


class TestUnits:
    """Units consumed per metric."""

    @pytest.mark.parametrize(
        "metric,expected",
        [
            (LicenseMetric.PROCESSOR, 4.0),  # 8 cores x 0.5
            (LicenseMetric.PER_CORE, 8.0),
            (LicenseMetric.PER_SOCKET, 2.0),
            (LicenseMetric.NAMED_USER_PLUS, 25.0),
        ],
    )
    def test_metric(self, metric: LicenseMetric, expected: float) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        entry = DatabaseLicense(license_type_id="A90611", count=25)
        assert calculator.units(entry, _host(), _license_type(metric)) == expected

    def test_ignored_entry_consumes_nothing(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        entry = DatabaseLicense(license_type_id="A90611", count=1, ignored=True, ignored_comment="test db")
        assert calculator.units(entry, _host(), _license_type()) == 0.0

    def test_unused_entry_consumes_nothing(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        entry = DatabaseLicense(license_type_id="A90611", count=0)
        assert calculator.units(entry, _host(), _license_type()) == 0.0

    def test_unknown_license_type_keeps_observed_count(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        entry = DatabaseLicense(license_type_id="UNKNOWN", count=3)
        assert calculator.units(entry, _host(), None) == 3.0


class TestRecalculateHost:
    """Whole-host recalculation."""

    def test_returns_new_host_and_leaves_input_untouched(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        host = _host().model_copy(
            update={
                "databases": [
                    Database(
                        name="ERP",
                        db_id="1",
                        technology=Technology.ORACLE,
                        licenses=[DatabaseLicense(license_type_id="A90611", count=1)],
                    )
                ]
            }
        )

        result = calculator.recalculate_host(host, build_catalogue([_license_type()]))

        assert result.databases[0].licenses[0].count == 4.0
        assert host.databases[0].licenses[0].count == 1.0

    def test_alias_resolves_to_part_identifier(self) -> None:
        calculator = LicenseUnitCalculator(default_core_factor=0.5)
        license_type = _license_type(aliases=["Oracle EE"])
        host = _host().model_copy(
            update={
                "databases": [
                    Database(
                        name="ERP",
                        db_id="1",
                        technology=Technology.ORACLE,
                        licenses=[DatabaseLicense(license_type_id="legacy", name="Oracle EE", count=1)],
                    )
                ]
            }
        )

        entry = calculator.recalculate_host(host, build_catalogue([license_type])).databases[0].licenses[0]

        assert entry.license_type_id == "A90611"
        assert entry.count == 4.0

    def test_part_identifier_wins_over_alias(self) -> None:
        first = _license_type(id="A90611")
        second = _license_type(id="L76084", aliases=["A90611"])
        catalogue = build_catalogue([first, second])

        resolved = resolve_license_type(DatabaseLicense(license_type_id="A90611", count=1), catalogue)

        assert resolved is not None
        assert resolved.id == "A90611"
