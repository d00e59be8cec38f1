"""Tests for document partitioning."""

import copy

from dbkit.schema.partition import partition_document


class TestPartitionDocument:
    """Test splitting documents into collections and connections."""

    def test_splits_by_type(self, relations_document: dict) -> None:
        parts = partition_document(relations_document)
        assert list(parts.collections) == ["User", "Schedule", "Project"]
        assert list(parts.connections) == ["UserProject"]

    def test_strips_discriminator(self, relations_document: dict) -> None:
        """The type key is removed from every declaration."""
        parts = partition_document(relations_document)
        assert "type" not in parts.collections["User"]
        assert parts.connections["UserProject"] == {
            "parent": "$User",
            "child": "$Project",
            "accessor": "projects",
        }

    def test_does_not_mutate_input(self, relations_document: dict) -> None:
        original = copy.deepcopy(relations_document)
        partition_document(relations_document)
        assert relations_document == original

    def test_unknown_discriminator_dropped(self) -> None:
        """Entries with other types are silently skipped."""
        parts = partition_document(
            {
                "User": {"type": "collection", "fields": {}},
                "Audit": {"type": "view"},
                "Note": {"fields": {}},
                "Version": 3,
            }
        )
        assert list(parts.collections) == ["User"]
        assert parts.connections == {}

    def test_empty_document(self) -> None:
        parts = partition_document({})
        assert parts.collections == {}
        assert parts.connections == {}
