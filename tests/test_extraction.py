"""
Tests for structured extraction of provider output.
"""

import pytest

from core.errors import ExtractionError
from core.extraction import extract_structured, parse_json_object, strip_code_fences
from services.analysis.models import ComplianceVerdict, ScriptAnalysis

from conftest import BASIC_ANALYSIS, compliance_verdict, fenced


class TestStripCodeFences:

    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence_returns_stripped_text(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestParseJsonObject:

    def test_prose_around_object(self):
        text = 'Sure! Here you go: {"title": "Case"} Let me know if you need more.'
        assert parse_json_object(text) == {"title": "Case"}

    def test_empty_response(self):
        with pytest.raises(ExtractionError) as exc_info:
            parse_json_object("   ", source="openai")
        assert exc_info.value.reason_code == "EMPTY_RESPONSE"

    def test_malformed_json(self):
        with pytest.raises(ExtractionError) as exc_info:
            parse_json_object('```json\n{"title": "Case",\n```')
        assert exc_info.value.reason_code == "MALFORMED_JSON"

    def test_array_is_rejected(self):
        with pytest.raises(ExtractionError) as exc_info:
            parse_json_object("[1, 2, 3]")
        assert exc_info.value.reason_code == "UNEXPECTED_SHAPE"


class TestExtractStructured:

    def test_fenced_analysis(self):
        analysis = extract_structured(fenced(BASIC_ANALYSIS), ScriptAnalysis)

        assert analysis.episode_title == "The Vanishing of Sarah Mitchell"
        assert analysis.master_location == "Downtown Portland parking garage"
        assert [s.name for s in analysis.segments] == ["Sarah Mitchell", "Robert Johnson", "Mark Stevens"]
        assert analysis.segments[0].role.value == "victim"

    def test_missing_fields_are_named(self):
        data = dict(BASIC_ANALYSIS)
        del data["masterLocation"]

        with pytest.raises(ExtractionError) as exc_info:
            extract_structured(fenced(data), ScriptAnalysis, source="script analysis")

        error = exc_info.value
        assert error.reason_code == "SCHEMA_MISMATCH"
        assert "masterLocation: missing" in error.fields
        assert "masterLocation" in str(error)

    def test_invalid_role_is_named(self):
        data = dict(BASIC_ANALYSIS)
        data["segments"] = [dict(BASIC_ANALYSIS["segments"][0], role="bystander")]

        with pytest.raises(ExtractionError) as exc_info:
            extract_structured(fenced(data), ScriptAnalysis)

        assert any(field.startswith("segments.0.role") for field in exc_info.value.fields)

    def test_no_default_substitution(self):
        """A missing title is an error, never an invented placeholder."""
        data = dict(BASIC_ANALYSIS)
        del data["episodeTitle"]

        with pytest.raises(ExtractionError):
            extract_structured(fenced(data), ScriptAnalysis)

    def test_compliance_levels_are_normalized(self):
        verdict = extract_structured(fenced(compliance_verdict("WARNING")), ComplianceVerdict)
        assert verdict.overall_compliance == "warning"
        assert not verdict.failed

    def test_unknown_compliance_level_rejected(self):
        with pytest.raises(ExtractionError):
            extract_structured(fenced(compliance_verdict("maybe")), ComplianceVerdict)
