"""Test untuk netdiag/knowledge/knowledge_base.py.

File ini menguji:
- Invariant knowledge base (gejala, penyebab, aksi)
- Tabel read-only
- Reverse lookup

Jalankan dengan: python -m pytest app/tests/test_knowledge.py -v
Atau: python app/tests/test_knowledge.py (standalone)
"""

import sys
from pathlib import Path

app_dir = Path(__file__).parent.parent
sys.path.insert(0, str(app_dir))

import pytest

from netdiag.core.models import Cause, Symptom
from netdiag.knowledge import (
    ACTIONS, GENERAL_ACTIONS, SYMPTOM_CAUSES, KnowledgeBaseError,
    actions_for, causes_for, symptoms_for, validate_knowledge_base,
)


class TestKnowledgeBase:
    """Test suite untuk knowledge base statis."""

    def test_every_symptom_has_causes(self):
        for symptom in Symptom:
            assert causes_for(symptom), f"{symptom.label} has no causes"
        print(f"✓ {len(Symptom)} symptoms all have candidate causes")

    def test_every_cause_has_actions(self):
        for cause in Cause:
            assert actions_for(cause), f"{cause.label} has no actions"
        assert len(GENERAL_ACTIONS) == 3

    def test_every_cause_is_reachable(self):
        for cause in Cause:
            assert symptoms_for(cause), f"{cause.label} is unreachable"

    def test_candidate_lists_have_no_duplicates(self):
        for symptom, causes in SYMPTOM_CAUSES.items():
            assert len(causes) == len(set(causes)), symptom.label

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            SYMPTOM_CAUSES[Symptom.DNS_ERROR] = ()
        with pytest.raises(TypeError):
            ACTIONS[Cause.MALWARE] = ()
        print("✓ Knowledge base tables are immutable")

    def test_reverse_lookup(self):
        assert symptoms_for(Cause.BAD_DNS_CONFIG) == [Symptom.DNS_ERROR]
        assert Symptom.NO_INTERNET in symptoms_for(Cause.ROUTER_FAILURE)

    def test_validate_default_tables(self):
        validate_knowledge_base()

    def test_validate_detects_symptom_without_causes(self):
        broken = dict(SYMPTOM_CAUSES)
        broken[Symptom.WEAK_WIFI] = ()
        with pytest.raises(KnowledgeBaseError) as excinfo:
            validate_knowledge_base(symptom_causes=broken)
        assert "Weak Wi-Fi signal" in str(excinfo.value)

    def test_validate_detects_unreachable_cause(self):
        broken = {
            symptom: tuple(c for c in causes if c is not Cause.BAD_DNS_CONFIG)
            for symptom, causes in SYMPTOM_CAUSES.items()
        }
        with pytest.raises(KnowledgeBaseError) as excinfo:
            validate_knowledge_base(symptom_causes=broken)
        assert "not reachable" in str(excinfo.value)

    def test_validate_detects_missing_actions(self):
        broken = dict(ACTIONS)
        del broken[Cause.MALWARE]
        with pytest.raises(KnowledgeBaseError) as excinfo:
            validate_knowledge_base(actions=broken)
        assert "Malware on devices" in str(excinfo.value)
        assert isinstance(excinfo.value, ValueError)


def run_all_tests():
    """Jalankan semua test dan report hasilnya."""
    print("=" * 60)
    print("Testing Knowledge Base")
    print("=" * 60)

    instance = TestKnowledgeBase()
    test_methods = [m for m in dir(instance) if m.startswith('test_')]
    total_tests = len(test_methods)
    failed_tests = []

    for method_name in test_methods:
        try:
            getattr(instance, method_name)()
        except Exception as e:
            failed_tests.append((method_name, str(e)))
            print(f"✗ {method_name} FAILED: {e}")

    print("\n" + "=" * 60)
    print("Test Summary")
    print("=" * 60)
    print(f"Total tests: {total_tests}")
    print(f"Passed: {total_tests - len(failed_tests)}")
    print(f"Failed: {len(failed_tests)}")

    if failed_tests:
        return False
    print("\n✅ All tests passed!")
    return True


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)
