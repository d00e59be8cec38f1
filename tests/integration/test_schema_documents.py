"""End-to-end normalization of the YAML schema fixtures."""

import asyncio
from pathlib import Path

import pytest

from dbkit import CURRENT_TIMESTAMP, SchemaKit, UnknownTypeError
from dbkit.schema.pipeline import dependency_order


def service_field(**overrides) -> dict:
    field = {
        "type": "TIMESTAMP",
        "primary": False,
        "autoIncrement": False,
        "optional": False,
        "readOnly": True,
        "hidden": False,
        "service": True,
        "multilang": False,
    }
    field.update(overrides)
    return field


def declared_field(type_name: str, **overrides) -> dict:
    field = {
        "type": type_name,
        "primary": False,
        "autoIncrement": False,
        "optional": True,
        "readOnly": False,
        "hidden": False,
        "service": False,
        "multilang": False,
    }
    field.update(overrides)
    return field


ID_FIELD = service_field(type="INT", primary=True, autoIncrement=True)
CREATED_AT_FIELD = service_field()
UPDATED_AT_FIELD = service_field(default=CURRENT_TIMESTAMP, onUpdate=CURRENT_TIMESTAMP)


class TestMinimalUser:
    """A single collection with one field and timestamps."""

    def test_user_with_email(self, kit: SchemaKit) -> None:
        schema = kit.normalize(
            {
                "User": {
                    "type": "collection",
                    "fields": {"email": "string"},
                    "options": {"timestamps": True},
                }
            }
        )
        user = schema.get_collection("User")

        assert list(user.fields) == ["email", "id", "createdAt", "updatedAt"]
        assert user.fields["email"].type == "STRING"
        assert user.fields["email"].length == 255
        assert user.options.to_dict() == {
            "timestamps": True,
            "collectionName": "User",
            "tableName": "User",
            "createdAt": "createdAt",
            "updatedAt": "updatedAt",
            "isTree": False,
        }


class TestSingleCollection:
    """schema-single.yml"""

    def test_normalized_user(self, kit: SchemaKit, schemas_dir: Path) -> None:
        schema = kit.load(schemas_dir / "schema-single.yml")
        user = schema.get_collection("User").to_dict()

        assert user["primaryKey"] == "id"
        assert user["dependencies"] == []
        assert user["fields"] == {
            "email": declared_field("STRING", length=255),
            "password": declared_field("STRING", length=50),
            "birthdate": declared_field("DATE"),
            "active": declared_field("BOOL"),
            "firstName": declared_field("STRING", length=255),
            "lastName": declared_field("STRING", length=255),
            "bio": declared_field("TEXT"),
            "balance": declared_field("DOUBLE"),
            "id": ID_FIELD,
            "createdAt": CREATED_AT_FIELD,
            "updatedAt": UPDATED_AT_FIELD,
        }
        assert list(user["fields"])[-3:] == ["id", "createdAt", "updatedAt"]


class TestReferences:
    """schema-relations.yml"""

    def test_reference_field(self, kit: SchemaKit, schemas_dir: Path) -> None:
        schema = kit.load(schemas_dir / "schema-relations.yml")
        user = schema.get_collection("User")
        schedule = schema.get_collection("Schedule")

        assert user.fields["schedule"].type == schedule.primary_field.type == "INT"
        assert user.fields["schedule"].to_dict() == declared_field(
            "INT", reference={"collection": "Schedule", "field": "id"}
        )
        assert user.dependencies == ["Schedule"]
        assert schedule.dependencies == []

    def test_field_named_type(self, kit: SchemaKit, schemas_dir: Path) -> None:
        """A field called `type` is an ordinary field."""
        schema = kit.load(schemas_dir / "schema-relations.yml")
        assert schema.get_collection("Schedule").fields["type"].type == "STRING"

    def test_dependency_order(self, kit: SchemaKit, schemas_dir: Path) -> None:
        schema = kit.load(schemas_dir / "schema-relations.yml")
        assert dependency_order(schema) == ["Schedule", "User"]


class TestConnections:
    """schema-relations-many.yml"""

    def test_accessor_and_links(self, kit: SchemaKit, schemas_dir: Path) -> None:
        schema = kit.load(schemas_dir / "schema-relations-many.yml")
        user = schema.get_collection("User")
        project = schema.get_collection("Project")
        conn = schema.connections["UserProject"]

        assert user.options.accessors["projects"].child == "Project"
        assert user.options.links["Project"] is conn
        assert project.options.links["User"] is conn
        assert conn.to_dict() == {
            "parent": "User",
            "child": "Project",
            "accessor": "projects",
            "tableName": "link_user_projects",
        }

    def test_connection_not_a_collection(self, kit: SchemaKit, schemas_dir: Path) -> None:
        schema = kit.load(schemas_dir / "schema-relations-many.yml")
        assert list(schema.collections) == ["User", "Project"]

    def test_async_load(self, kit: SchemaKit, schemas_dir: Path) -> None:
        """Async loading yields the same normalized model."""
        path = schemas_dir / "schema-relations-many.yml"
        assert asyncio.run(kit.aload(path)).to_dict() == kit.load(path).to_dict()


class TestFailures:
    """Documents that must not normalize."""

    def test_unknown_type_yields_no_schema(self, kit: SchemaKit, tmp_path: Path) -> None:
        path = tmp_path / "money.yml"
        path.write_text(
            "Account:\n  type: collection\n  fields:\n    balance: money\n"
        )

        with pytest.raises(UnknownTypeError) as exc_info:
            kit.load(path)

        assert exc_info.value.collection == "Account"
        assert exc_info.value.field == "balance"
