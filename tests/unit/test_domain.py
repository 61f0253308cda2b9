from datetime import date

from audit_rag.models.domain import AuditRecord, DateRange, ExtractedFilters


def test_record_from_camel_case_document():
    record = AuditRecord.from_dict(
        {
            "auditResultId": 42,
            "projectName": "Grand Hotel",
            "projectId": "P-9",
            "year": 2024,
            "department": "Finance",
            "riskArea": "Revenue",
            "descriptions": "Late invoices",
            "code": "FIN-9",
            "nilai": "12.0",
            "bobot": 3,
            "kadar": 4,
            "sh": "SH2",
        }
    )

    assert record.audit_result_id == "42"
    assert record.project_id == "P-9"
    assert record.description == "Late invoices"
    assert record.subholding == "SH2"
    assert record.nilai == 12
    assert isinstance(record.nilai, int)


def test_record_from_snake_case_and_missing_fields():
    record = AuditRecord.from_dict({"audit_result_id": "A", "nilai": "n/a", "description": None})
    assert record.audit_result_id == "A"
    assert record.nilai == 0
    assert record.description == ""
    assert record.project_id is None


def test_searchable_text(sample_records):
    text = sample_records[1].searchable_text()
    assert "Sunrise Apartment" in text
    assert "IT-02" in text


def test_filters_specific_and_empty():
    assert ExtractedFilters().is_empty
    assert not ExtractedFilters().has_specific_filters
    assert not ExtractedFilters(severity=["High"]).has_specific_filters
    assert not ExtractedFilters(severity=["High"]).is_empty
    assert ExtractedFilters(year="2024").has_specific_filters
    assert ExtractedFilters(project_type="Mall").has_specific_filters


def test_filters_to_dict_uses_camel_case_and_skips_empty():
    filters = ExtractedFilters(
        project_type="Hotel",
        keywords=["PPJB"],
        date_range=DateRange(start=date(2024, 1, 1)),
    )
    assert filters.to_dict() == {
        "projectType": "Hotel",
        "keywords": ["PPJB"],
        "dateRange": {"start": "2024-01-01", "end": None},
    }
