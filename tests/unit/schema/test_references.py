"""Tests for reference resolution."""

import pytest

from dbkit.core.exceptions import UnknownCollectionError
from dbkit.schema.collections import normalize_collection
from dbkit.schema.references import build_reference_field, resolve_references


def normalize_all(raw: dict) -> dict:
    return {name: normalize_collection(name, body) for name, body in raw.items()}


class TestResolveReferences:
    """Test `$Collection` expansion."""

    def test_reference_uses_target_primary_key(self) -> None:
        collections = normalize_all(
            {
                "User": {"fields": {"email": "string", "schedule": "$Schedule"}},
                "Schedule": {"fields": {"startDate": "date"}},
            }
        )

        resolve_references(collections)

        field = collections["User"].fields["schedule"]
        assert field.type == "INT"
        assert field.reference.collection == "Schedule"
        assert field.reference.field == "id"
        assert field.primary is False
        assert field.auto_increment is False
        assert field.read_only is False
        assert field.service is False
        assert field.optional is True
        assert collections["User"].dependencies == ["Schedule"]

    def test_type_follows_declared_primary_key(self) -> None:
        """The foreign key copies a non-INT primary key type."""
        collections = normalize_all(
            {
                "Address": {"fields": {"country": "$Country"}},
                "Country": {"fields": {"code": {"type": "string", "primary": True, "length": 2}}},
            }
        )

        resolve_references(collections)

        field = collections["Address"].fields["country"]
        assert field.type == "STRING"
        assert field.length == 2
        assert field.reference.field == "code"

    def test_field_order_preserved(self) -> None:
        collections = normalize_all(
            {
                "User": {"fields": {"email": "string", "schedule": "$Schedule", "bio": "text"}},
                "Schedule": {"fields": {}},
            }
        )

        resolve_references(collections)

        assert list(collections["User"].fields) == ["email", "schedule", "bio", "id"]

    def test_dependencies_deduplicated_in_order(self) -> None:
        collections = normalize_all(
            {
                "Task": {
                    "fields": {
                        "owner": "$User",
                        "team": "$Team",
                        "reviewer": "$User",
                    }
                },
                "User": {"fields": {}},
                "Team": {"fields": {}},
            }
        )

        resolve_references(collections)

        assert collections["Task"].dependencies == ["User", "Team"]

    def test_self_reference(self) -> None:
        """A collection may reference itself, e.g. for trees."""
        collections = normalize_all(
            {"Category": {"fields": {"parent": "$Category"}, "options": {"isTree": True}}}
        )

        resolve_references(collections)

        assert collections["Category"].fields["parent"].reference.collection == "Category"
        assert collections["Category"].dependencies == ["Category"]

    def test_reference_to_collection_declared_later(self) -> None:
        """Targets declared after the referencing collection resolve too."""
        collections = normalize_all(
            {
                "A": {"fields": {"b": "$B"}},
                "B": {"fields": {"c": "$C"}},
                "C": {"fields": {}},
            }
        )

        resolve_references(collections)

        assert collections["A"].fields["b"].reference.collection == "B"
        assert collections["B"].fields["c"].reference.collection == "C"

    def test_unknown_collection(self) -> None:
        collections = normalize_all({"User": {"fields": {"schedule": "$Schedule"}}})

        with pytest.raises(UnknownCollectionError) as exc_info:
            resolve_references(collections)

        assert exc_info.value.name == "Schedule"
        assert exc_info.value.referenced_by == "User.schedule"

    def test_optional_policy_applied(self) -> None:
        collections = normalize_all(
            {"User": {"fields": {"team": "$Team"}}, "Team": {"fields": {}}}
        )

        resolve_references(collections, optional_by_default=False)

        assert collections["User"].fields["team"].optional is False


class TestBuildReferenceField:
    """Test foreign key field construction."""

    def test_builds_from_target(self) -> None:
        target = normalize_collection("Team", {"fields": {}})
        field = build_reference_field(target)
        assert field.type == "INT"
        assert field.reference.collection == "Team"
        assert field.reference.field == "id"
