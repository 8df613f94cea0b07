"""Tests for searchable text extraction and document adaptation."""

import pytest

from fast_search.config import SearchSettings
from fast_search.documents import Document, MappingDocument, as_document, extract_searchable_text
from fast_search.errors import IndexBuildError


@pytest.mark.unit
class TestExtractSearchableText:
    def test_field_priority_order(self, settings):
        record = {
            "summary": "S",
            "extra": "E",
            "title": "T",
            "text": "primary",
            "name": "N",
        }

        assert extract_searchable_text(record, settings) == "primary T S N E"

    def test_excluded_and_non_string_fields_are_skipped(self, settings):
        record = {"text": "body", "cluster": "c7", "doc_id": "d1", "count": 3, "tags": ["a"]}

        assert extract_searchable_text(record, settings) == "body"

    def test_long_extra_fields_are_skipped(self, settings):
        record = {"text": "body", "blob": "x" * 500, "note": "short"}

        assert extract_searchable_text(record, settings) == "body short"

    def test_record_without_strings(self, settings):
        assert extract_searchable_text({"x": 1, "y": 2}, settings) == ""

    def test_configured_fields(self):
        settings = SearchSettings(primary_field="body", secondary_fields=["heading"], excluded_fields=["text"])
        record = {"text": "ignored", "heading": "H", "body": "B"}

        assert extract_searchable_text(record, settings) == "B H"


@pytest.mark.unit
class TestAsDocument:
    def test_mappings_are_wrapped(self, settings):
        record = {"text": "hello"}
        document = as_document(record, settings)

        assert isinstance(document, MappingDocument)
        assert isinstance(document, Document)
        assert document.record is record
        assert document.searchable_text() == "hello"

    def test_objects_with_searchable_text_pass_through(self, settings):
        class Note:
            def searchable_text(self):
                return "note"

        note = Note()

        assert as_document(note, settings) is note

    def test_other_objects_are_rejected(self, settings):
        with pytest.raises(IndexBuildError, match="unsupported document type 'str'"):
            as_document("plain string", settings, document_id=3)

    def test_mapping_document_reads_live_record(self, settings):
        record = {"text": "before"}
        document = MappingDocument(record, settings)
        record["text"] = "after"

        assert document.searchable_text() == "after"
