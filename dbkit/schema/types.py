"""Registry of field types known to the normalizer."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from dbkit.core.exceptions import UnknownTypeError
from dbkit.core.models import DataType

STRING = "STRING"
TEXT = "TEXT"
INT = "INT"
DOUBLE = "DOUBLE"
BOOL = "BOOL"
DATE = "DATE"
DATETIME = "DATETIME"
TIMESTAMP = "TIMESTAMP"

DEFAULT_DATA_TYPES: Dict[str, DataType] = {
    STRING: DataType(name="string", length=255),
    TEXT: DataType(name="text"),
    INT: DataType(name="int"),
    DOUBLE: DataType(name="double"),
    BOOL: DataType(name="bool"),
    DATE: DataType(name="date"),
    DATETIME: DataType(name="datetime"),
    TIMESTAMP: DataType(name="timestamp"),
}


class TypeRegistry:
    """
    Read-only lookup from type name to its canonical metadata.

    Names are matched case-insensitively; keys are stored upper-cased.

    Example usage:
        registry = TypeRegistry()
        registry.lookup("string")  # DataType(name='string', length=255)
    """

    def __init__(self, types: Optional[Mapping[str, DataType]] = None) -> None:
        source = DEFAULT_DATA_TYPES if types is None else types
        self._types = MappingProxyType({name.upper(): dt for name, dt in source.items()})

    def get(self, type_name: str) -> Optional[DataType]:
        """Return the metadata for a type, or None if it is not registered."""
        if not isinstance(type_name, str):
            return None
        return self._types.get(type_name.upper())

    def lookup(self, type_name: str) -> DataType:
        """
        Return the metadata for a type.

        Raises:
            UnknownTypeError: If the upper-cased name is not registered
        """
        data_type = self.get(type_name)
        if data_type is None:
            raise UnknownTypeError(str(type_name))
        return data_type

    def names(self) -> List[str]:
        """Registered type names, in registration order."""
        return list(self._types)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and type_name.upper() in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)


DEFAULT_TYPE_REGISTRY = TypeRegistry()
