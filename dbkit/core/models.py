"""Core data models for dbkit."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from dbkit.core.exceptions import UnknownCollectionError

# Sentinel for auto-managed timestamp columns
CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"


class DbKitBaseModel(BaseModel):
    """Base model accepting both snake_case names and camelCase document keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class DataType(DbKitBaseModel):
    """Canonical metadata for a registered field type."""

    name: str
    length: Optional[int] = None

    model_config = {"frozen": True}


class FieldReference(DbKitBaseModel):
    """Foreign key target of a reference field."""

    collection: str
    field: str


class SchemaField(DbKitBaseModel):
    """A normalized field of a collection."""

    type: str
    primary: bool = False
    auto_increment: bool = False
    optional: bool = True
    read_only: bool = False
    hidden: bool = False
    service: bool = False
    multilang: bool = False
    default: Optional[Any] = None
    length: Optional[int] = None
    on_update: Optional[str] = None
    reference: Optional[FieldReference] = None

    @property
    def is_reference(self) -> bool:
        """Check if this field is a foreign key."""
        return self.reference is not None

    def to_dict(self) -> Dict[str, Any]:
        """Render the field with document keys, omitting absent attributes."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Connection(DbKitBaseModel):
    """A named parent/child relationship between two collections.

    Endpoints are stored as collection names; the collections themselves
    live in the owning NormalizedSchema.
    """

    name: str
    parent: str
    child: str
    accessor: str
    table_name: str

    model_config = {"frozen": True}

    def other_end(self, collection_name: str) -> str:
        """Return the endpoint opposite to the given collection."""
        return self.child if collection_name == self.parent else self.parent

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"name"})


class Accessor(DbKitBaseModel):
    """Child collection reachable from a parent under an accessor name."""

    child: str
    connection: Connection


class CollectionOptions(DbKitBaseModel):
    """Normalized collection-level settings."""

    collection_name: str
    table_name: str
    timestamps: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    is_tree: bool = False
    links: Dict[str, Connection] = Field(default_factory=dict)
    accessors: Dict[str, Accessor] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"links", "accessors"},
        )
        if self.links:
            data["links"] = {name: conn.name for name, conn in self.links.items()}
        if self.accessors:
            data["accessors"] = {
                name: {"child": acc.child, "connection": acc.connection.name}
                for name, acc in self.accessors.items()
            }
        return data


class Collection(DbKitBaseModel):
    """A normalized collection: ordered fields, options and dependencies."""

    name: str
    fields: Dict[str, SchemaField] = Field(default_factory=dict)
    options: CollectionOptions
    primary_key: str = "id"
    dependencies: List[str] = Field(default_factory=list)

    # Reference shorthands awaiting resolution, field name -> target collection
    _pending_references: Dict[str, str] = PrivateAttr(default_factory=dict)
    # Declared field order, including pending references
    _field_order: List[str] = PrivateAttr(default_factory=list)

    @property
    def primary_field(self) -> SchemaField:
        """Return the primary key field."""
        return self.fields[self.primary_key]

    @property
    def has_pending_references(self) -> bool:
        return bool(self._pending_references)

    def add_field(self, name: str, field: SchemaField) -> None:
        """Append a normalized field."""
        self.fields[name] = field
        if name not in self._field_order:
            self._field_order.append(name)

    def defer_reference(self, name: str, target: str) -> None:
        """Hold a $Target shorthand in place until references are resolved."""
        self._pending_references[name] = target
        self._field_order.append(name)

    def pending_references(self) -> Dict[str, str]:
        """Return unresolved reference shorthands in declaration order."""
        return dict(self._pending_references)

    def complete_references(self, resolved: Dict[str, SchemaField]) -> None:
        """Replace pending shorthands with resolved fields, keeping field order."""
        missing = set(self._pending_references) - set(resolved)
        if missing:
            raise ValueError(f"Unresolved references in {self.name}: {sorted(missing)}")
        self.fields = {
            name: resolved[name] if name in resolved else self.fields[name]
            for name in self._field_order
        }
        self._pending_references = {}

    def declared_fields(self) -> Dict[str, SchemaField]:
        """Fields written by the document author."""
        return {name: f for name, f in self.fields.items() if not f.service}

    def service_fields(self) -> Dict[str, SchemaField]:
        """Fields synthesized during normalization."""
        return {name: f for name, f in self.fields.items() if f.service}

    def add_dependency(self, collection_name: str) -> None:
        """Record a referenced collection, keeping first-reference order."""
        if collection_name not in self.dependencies:
            self.dependencies.append(collection_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": {name: f.to_dict() for name, f in self.fields.items()},
            "options": self.options.to_dict(),
            "primaryKey": self.primary_key,
            "dependencies": list(self.dependencies),
        }


class NormalizedSchema(BaseModel):
    """Result of the normalization pipeline."""

    collections: Dict[str, Collection] = Field(default_factory=dict)
    connections: Dict[str, Connection] = Field(default_factory=dict)

    def get_collection(self, name: str) -> Collection:
        """
        Get a collection by its declared name.

        Raises:
            UnknownCollectionError: If no such collection exists
        """
        try:
            return self.collections[name]
        except KeyError:
            raise UnknownCollectionError(name) from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collections": {
                name: collection.to_dict() for name, collection in self.collections.items()
            },
            "connections": {
                name: connection.to_dict() for name, connection in self.connections.items()
            },
        }
