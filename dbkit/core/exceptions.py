"""Custom exceptions for dbkit."""

from __future__ import annotations

from typing import Any, List, Optional


class DbKitError(Exception):
    """Base exception for all dbkit errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(DbKitError):
    """Raised when there's a configuration error."""

    pass


# =============================================================================
# Document loading
# =============================================================================


class DocumentError(DbKitError):
    """Raised when a schema document cannot be loaded."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.path = path
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class DocumentNotFoundError(DocumentError):
    """Raised when the document path does not resolve to readable content."""

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Schema document not found: {path}", path=path)


class DocumentParseError(DocumentError):
    """Raised when the document is not well-formed."""

    def __init__(self, path: str, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid schema document: {reason}", path=path)


# =============================================================================
# Normalization
# =============================================================================


class SchemaError(DbKitError):
    """Raised when there's a schema-related error."""

    pass


class UnknownTypeError(SchemaError):
    """Raised when a field declares a type missing from the type registry."""

    def __init__(
        self,
        type_name: str,
        collection: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        self.type_name = type_name
        self.collection = collection
        self.field = field
        details: dict[str, Any] = {"type": type_name}
        if collection:
            details["collection"] = collection
        if field:
            details["field"] = field
        super().__init__(f"Unknown type: {type_name}", details)


class UnknownCollectionError(SchemaError):
    """Raised when a reference or connection names a collection that does not exist."""

    def __init__(self, name: str, referenced_by: Optional[str] = None) -> None:
        self.name = name
        self.referenced_by = referenced_by
        details: dict[str, Any] = {"collection": name}
        if referenced_by:
            details["referenced_by"] = referenced_by
        super().__init__(f"Unknown collection: {name}", details)


class MissingConnectionFieldError(SchemaError):
    """Raised when a connection lacks parent, child or accessor."""

    def __init__(self, connection: str, field: str) -> None:
        self.connection = connection
        self.field = field
        super().__init__(
            f"Connection '{connection}' is missing '{field}'",
            {"connection": connection, "field": field},
        )


class InvalidSigilError(SchemaError):
    """Raised when a connection endpoint is not written as $CollectionName."""

    def __init__(self, connection: str, field: str, value: Any) -> None:
        self.connection = connection
        self.field = field
        self.value = value
        super().__init__(
            f"Connection '{connection}' {field} must start with '$'",
            {"connection": connection, "field": field, "value": value},
        )


class FieldNameCollisionError(SchemaError):
    """Raised when a service field would replace a declared field."""

    def __init__(self, collection: str, field: str) -> None:
        self.collection = collection
        self.field = field
        super().__init__(
            f"Field '{field}' in '{collection}' collides with a service field",
            {"collection": collection, "field": field},
        )


class DuplicatePrimaryKeyError(SchemaError):
    """Raised when more than one field is declared primary."""

    def __init__(self, collection: str, fields: List[str]) -> None:
        self.collection = collection
        self.fields = fields
        super().__init__(
            f"Collection '{collection}' declares more than one primary key",
            {"collection": collection, "fields": fields},
        )


class InvalidFieldDeclarationError(SchemaError):
    """Raised when a field declaration is neither a string nor a mapping."""

    def __init__(self, collection: str, field: str, declaration: Any) -> None:
        self.collection = collection
        self.field = field
        self.declaration = declaration
        super().__init__(
            f"Invalid declaration for field '{field}' in '{collection}'",
            {"collection": collection, "field": field, "declaration": repr(declaration)},
        )
