"""Integration Test - Menguji integrasi antar engine, orchestrator dan services.

File ini menguji workflow lengkap end-to-end:
1. Pilih engine lewat DiagnosisOrchestrator
2. Probabilitas sintetis (frequency & rule-based)
3. Koreksi DNS berbasis pengukuran mentah (fuzzy)
4. Request JSON -> DiagnosisService -> response + log + report

Jalankan dengan: python tests/test_integration.py
"""

import sys
import os
import logging
import tempfile
import shutil
from pathlib import Path

# Tambahkan app/ ke Python path
app_dir = Path(__file__).parent.parent
sys.path.insert(0, str(app_dir))

import pytest

from netdiag.core.fuzzy_engine import FuzzyEngine, FuzzyRule
from netdiag.core.models import Cause, CauseResult, DiagnosisResult, FuzzyInput, Symptom, SystemType
from netdiag.core.orchestrator import DiagnosisOrchestrator, OrchestratorSettings
from netdiag.knowledge import GENERAL_PROBLEM
from netdiag.services.api import DiagnosisService
from netdiag.services.config import DEFAULT_CONFIG, deep_merge
from netdiag.services.logging_service import LoggingService
from netdiag.services.reporting import ReportingService

DNS = Cause.BAD_DNS_CONFIG.label
SERVER = Cause.SERVER_OVERLOAD.label


def server_only_engine():
    """Fuzzy engine dengan satu aturan: latency tinggi -> server overload."""
    rule = FuzzyRule(1, (("server_latency", "high"),), ((Cause.SERVER_OVERLOAD, "high"),))
    return FuzzyEngine(rules=[rule])


class TestOrchestrator:
    """Test pemilihan engine dan adaptasi hasil."""

    def setup_method(self):
        self.orchestrator = DiagnosisOrchestrator()

    def test_rank_probabilities_decay_to_floor(self):
        result = self.orchestrator.diagnose(list(Symptom), SystemType.FREQUENCY)
        probabilities = [c.probability for c in result.causes]
        assert probabilities == [90, 75, 60, 45, 30, 20, 20, 20, 20]
        assert result.certainty == 90.0
        print("✓ Rank probabilities: 90, 75, 60, 45, 30, then floor 20")

    def test_rule_based_probabilities(self):
        result = self.orchestrator.diagnose([Symptom.NO_INTERNET], SystemType.RULE_BASED)
        assert result.cause_labels() == [
            DNS,
            Cause.ROUTER_FAILURE.label,
            Cause.NETWORK_CONGESTION.label,
            Cause.MALWARE.label,
        ]
        assert [c.probability for c in result.causes] == [90, 75, 60, 45]
        assert result.applied_rules

    def test_default_system_from_settings(self):
        orchestrator = DiagnosisOrchestrator(OrchestratorSettings(default_system=SystemType.RULE_BASED))
        result = orchestrator.diagnose([Symptom.DNS_ERROR])
        assert result.system_type is SystemType.RULE_BASED

    def test_general_result_gets_probability(self):
        result = self.orchestrator.diagnose([], SystemType.FREQUENCY)
        assert result.cause_labels() == [GENERAL_PROBLEM]
        assert result.causes[0].probability == 90

    def test_fuzzy_without_symptoms_returns_general_result(self):
        result = self.orchestrator.diagnose([], SystemType.FUZZY)
        assert result.cause_labels() == [GENERAL_PROBLEM]
        assert result.causes[0].probability is None
        assert result.certainty is None

    def test_fuzzy_dns_symptom_puts_dns_first(self):
        result = self.orchestrator.diagnose([Symptom.DNS_ERROR], SystemType.FUZZY)
        assert result.causes[0].cause == DNS
        assert sum(c.probability for c in result.causes) in (99, 100, 101)

    def test_fuzzy_dns_inserted_from_raw_measurement(self):
        orchestrator = DiagnosisOrchestrator(fuzzy_engine=server_only_engine())
        inputs = FuzzyInput(server_latency=1500, dns_errors=9)
        result = orchestrator.diagnose(inputs, SystemType.FUZZY)
        assert result.cause_labels()[:2] == [DNS, SERVER]
        assert len(result.causes) == len(Cause)
        assert result.causes[0].probability == 85
        assert result.causes[0].actions
        assert result.causes[1].probability == 100
        print("✓ DNS inserted at the front when dns_errors > threshold")

    def test_fuzzy_dns_threshold_is_exclusive(self):
        orchestrator = DiagnosisOrchestrator(fuzzy_engine=server_only_engine())
        result = orchestrator.diagnose(FuzzyInput(server_latency=1500, dns_errors=5.0), SystemType.FUZZY)
        assert result.causes[0].cause == SERVER
        dns = [c for c in result.causes if c.cause == DNS]
        assert dns[0].probability == 0

    def test_dns_correction_moves_existing_entry(self):
        result = DiagnosisResult(
            system_type=SystemType.FUZZY,
            causes=[CauseResult(SERVER, (), 70), CauseResult(DNS, (), 30)],
            certainty=70.0,
        )
        corrected = self.orchestrator.apply_dns_correction(result, FuzzyInput(dns_errors=7))
        assert corrected.cause_labels() == [DNS, SERVER]
        assert corrected.causes[0].probability == 30
        assert corrected.certainty == 70.0
        # hasil asli tidak diubah
        assert result.cause_labels() == [SERVER, DNS]

    def test_dns_correction_replaces_zero_entry(self):
        result = DiagnosisResult(
            system_type=SystemType.FUZZY,
            causes=[CauseResult(SERVER, (), 100), CauseResult(DNS, (), 0)],
            certainty=100.0,
        )
        corrected = self.orchestrator.apply_dns_correction(result, FuzzyInput(dns_errors=9))
        assert corrected.cause_labels() == [DNS, SERVER]
        assert corrected.causes[0].probability == 85
        assert corrected.causes[0].actions

    def test_dns_correction_ignores_nan(self):
        result = DiagnosisResult(system_type=SystemType.FUZZY, causes=[CauseResult(SERVER, (), 100)])
        corrected = self.orchestrator.apply_dns_correction(result, FuzzyInput(dns_errors=float("nan")))
        assert corrected.cause_labels() == [SERVER]

    def test_fuzzy_input_rejected_for_symbolic_engines(self):
        with pytest.raises(TypeError):
            self.orchestrator.diagnose(FuzzyInput(), SystemType.FREQUENCY)
        with pytest.raises(TypeError):
            self.orchestrator.diagnose(FuzzyInput(), SystemType.RULE_BASED)

    def test_settings_from_config(self):
        config = deep_merge(DEFAULT_CONFIG, {
            "diagnosis": {
                "default_system": "fuzzy",
                "rank_probability": {"start": 80, "step": 10, "floor": 50},
                "fuzzy_dns": {"threshold": 3, "probability": 70},
            }
        })
        settings = OrchestratorSettings.from_config(config)
        assert settings.default_system is SystemType.FUZZY
        assert settings.dns_threshold == 3.0
        orchestrator = DiagnosisOrchestrator(settings)
        assert [orchestrator.rank_probability(i) for i in range(5)] == [80, 70, 60, 50, 50]

    def test_settings_defaults_from_empty_config(self):
        assert OrchestratorSettings.from_config({}) == OrchestratorSettings()


class TestFullWorkflow:
    """Test complete workflow dari request sampai report."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.logger_name = "IntegrationTest_" + os.path.basename(self.temp_dir)
        config = deep_merge(DEFAULT_CONFIG, {"logging": {"dir": self.temp_dir, "file": "test.log"}})
        self.logging_service = LoggingService(logger_name=self.logger_name, log_config=config["logging"])
        self.service = DiagnosisService(logging_service=self.logging_service, config=config)
        self.reporting = ReportingService(output_dir=self.temp_dir)

    def teardown_method(self):
        logger = logging.getLogger(self.logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_each_engine_end_to_end(self):
        payload = {"sintomas": ["No internet", "Packet loss"]}
        for system in ("bayesian", "rule-based", "fuzzy"):
            status, body = self.service.handle(dict(payload, systemType=system))
            assert status == 200, body
            assert body["sistema"] == system
            assert body["causas"], system
            assert all(c["acciones"] for c in body["causas"])

        stats = self.logging_service.get_statistics()
        assert stats["total_diagnoses"] == 3
        assert stats["system_usage"] == {"bayesian": 1, "rule-based": 1, "fuzzy": 1}
        print("✓ All three engines answer the same request")

    def test_frequency_workflow(self):
        status, body = self.service.handle({"sintomas": ["No internet", "Packet loss"]})
        assert status == 200
        assert [c["causa"] for c in body["causas"]] == [
            Cause.ROUTER_FAILURE.label,
            Cause.ISP_PROBLEMS.label,
            Cause.DEFECTIVE_HARDWARE.label,
            Cause.INFRASTRUCTURE_FAILURE.label,
            Cause.NETWORK_CONGESTION.label,
        ]
        assert "reglasAplicadas" not in body
        assert "pertenencias" not in body

    def test_rule_based_response_has_applied_rules(self):
        status, body = self.service.handle({"sintomas": ["DNS error"], "systemType": "rule-based"})
        assert status == 200
        assert body["causas"][0]["causa"] == DNS
        rules = body["reglasAplicadas"]
        assert rules[0]["rule"] == "R13"
        assert rules[0]["match"] == "exact"

    def test_fuzzy_response_has_memberships(self):
        status, body = self.service.handle({"sintomas": ["Slow internal server"], "systemType": "fuzzy"})
        assert status == 200
        assert body["causas"][0]["causa"] == SERVER
        assert set(body["pertenencias"]) == {
            "connectivity", "throughput", "packet_loss", "dns_errors",
            "wifi_signal", "page_load", "server_latency",
        }

    def test_fuzzy_measurements_trigger_dns_override(self):
        status, body = self.service.handle({
            "sintomas": ["Slow internal server"],
            "systemType": "fuzzy",
            "mediciones": {"dns_errors": 9},
        })
        assert status == 200
        assert body["causas"][0]["causa"] == DNS

    def test_fuzzy_empty_request_returns_general_problem(self):
        status, body = self.service.handle({"sintomas": [], "systemType": "fuzzy"})
        assert status == 200
        assert body["causas"][0]["causa"] == GENERAL_PROBLEM
        assert "certeza" not in body

    def test_result_to_reports(self):
        symptoms = [Symptom.WEAK_WIFI, Symptom.INTERMITTENT]
        result = self.service.orchestrator.diagnose(symptoms, SystemType.RULE_BASED)
        assert result.causes[0].cause == Cause.WIFI_INTERFERENCE.label

        txt_path = self.reporting.generate_txt_report(result, symptoms)
        csv_path = self.reporting.generate_csv_report(result)
        pdf_path = self.reporting.generate_pdf_report(result, symptoms)
        for path in (txt_path, csv_path, pdf_path):
            assert os.path.exists(path)
            assert os.path.getsize(path) > 0
        print("✓ Reports generated from a diagnosis result")


def run_all_tests():
    """Run all integration tests."""
    print("=" * 60)
    print("Running Integration Tests")
    print("=" * 60)

    test_classes = [TestOrchestrator, TestFullWorkflow]
    total_tests = 0
    passed_tests = 0
    failed_tests = []

    for test_class in test_classes:
        print(f"\n--- {test_class.__name__} ---")
        instance = test_class()
        test_methods = [m for m in dir(instance) if m.startswith('test_')]

        for method_name in test_methods:
            total_tests += 1
            try:
                if hasattr(instance, 'setup_method'):
                    instance.setup_method()
                getattr(instance, method_name)()
                passed_tests += 1
            except Exception as e:
                failed_tests.append((test_class.__name__, method_name, str(e)))
                print(f"✗ {method_name} FAILED: {e}")
            finally:
                if hasattr(instance, 'teardown_method'):
                    instance.teardown_method()

    print("\n" + "=" * 60)
    print("Test Summary")
    print("=" * 60)
    print(f"Total tests: {total_tests}")
    print(f"Passed: {passed_tests}")
    print(f"Failed: {len(failed_tests)}")

    if failed_tests:
        print("\nFailed tests:")
        for class_name, method_name, error in failed_tests:
            print(f"  - {class_name}.{method_name}: {error}")
        return False

    print("\n✅ All integration tests passed!")
    return True


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)
