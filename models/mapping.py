"""
Column mapping schemas.

A mapping assigns file columns (by 0-based index) to the fixed set of
import fields. Mapping templates persist that assignment per tenant.
"""

from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from pydantic import Field, field_validator

from models.base import BaseSchema, TenantMixin, TimestampMixin
from exceptions import InvalidFieldKeyError


class FieldKey(str, Enum):
    """Target fields a column can be mapped to."""
    CUSTOMER_NUMBER = "customer_number"
    NAME = "name"
    ORG_NR = "org_nr"
    ADDRESS = "address"
    POSTAL_CODE = "postal_code"
    CITY = "city"
    PHONE = "phone"
    EMAIL = "email"
    CONTACT_PERSON = "contact_person"
    CONTACT_PHONE = "contact_phone"
    CONTACT_EMAIL = "contact_email"
    TOTAL_SALES = "total_sales"
    TOTAL_COST = "total_cost"
    TOTAL_PROFIT = "total_profit"
    MARGIN_PERCENT = "margin_percent"
    ORDER_COUNT = "order_count"


FIELD_LABELS: dict[FieldKey, str] = {
    FieldKey.CUSTOMER_NUMBER: "Kundenummer (internt)",
    FieldKey.NAME: "Kundenavn *",
    FieldKey.ORG_NR: "Org.nr (tom = privatkunde)",
    FieldKey.ADDRESS: "Adresse",
    FieldKey.POSTAL_CODE: "Postnummer",
    FieldKey.CITY: "Poststed",
    FieldKey.PHONE: "Telefon (bedrift)",
    FieldKey.EMAIL: "E-post (bedrift)",
    FieldKey.CONTACT_PERSON: "Kontaktperson",
    FieldKey.CONTACT_PHONE: "Telefon (kontakt)",
    FieldKey.CONTACT_EMAIL: "E-post (kontakt)",
    FieldKey.TOTAL_SALES: "Omsetning (salg)",
    FieldKey.TOTAL_COST: "Varekost",
    FieldKey.TOTAL_PROFIT: "Fortjeneste",
    FieldKey.MARGIN_PERCENT: "Margin %",
    FieldKey.ORDER_COUNT: "Antall ordre",
}


def to_field_key(value: Union[FieldKey, str, None]) -> Optional[FieldKey]:
    """
    Coerce a raw field value to a FieldKey.

    "" and None mean "do not import this column".

    Raises:
        InvalidFieldKeyError: If the value is not a known field
    """
    if value is None or value == "":
        return None
    if isinstance(value, FieldKey):
        return value
    try:
        return FieldKey(value)
    except ValueError:
        raise InvalidFieldKeyError(str(value), [f.value for f in FieldKey])


class ColumnMapping:
    """
    Column index → field assignment with row access.

    Assigning a field to a column does not clear other columns holding the
    same field unless exclusive=True. When several columns share a field,
    the most recently assigned one is read.
    """

    def __init__(self, assignments: Optional[Mapping[int, Union[FieldKey, str, None]]] = None):
        self._assignments: dict[int, FieldKey] = {}
        for index, field_key in (assignments or {}).items():
            self.assign(index, field_key)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[Any, Union[FieldKey, str, None]]]) -> "ColumnMapping":
        """Build from a JSON-style dict with string indices ({"0": "org_nr"})."""
        mapping = cls()
        for index, field_key in (data or {}).items():
            try:
                column = int(index)
            except (TypeError, ValueError):
                raise InvalidFieldKeyError(str(index), [f.value for f in FieldKey])
            if column < 0:
                continue
            mapping.assign(column, field_key)
        return mapping

    def assign(
        self,
        index: int,
        field_key: Union[FieldKey, str, None],
        exclusive: bool = False,
    ) -> None:
        """Map a column to a field, or unmap it with None/""."""
        field = to_field_key(field_key)

        # Re-inserting moves the column to the end: latest assignment last
        self._assignments.pop(index, None)
        if field is None:
            return

        if exclusive:
            for other in [i for i, f in self._assignments.items() if f == field]:
                del self._assignments[other]

        self._assignments[index] = field

    def column_for(self, field_key: FieldKey) -> Optional[int]:
        """Column index currently feeding the field, or None if unmapped."""
        for index in reversed(self._assignments):
            if self._assignments[index] == field_key:
                return index
        return None

    def get(self, row: Sequence[str], field_key: FieldKey) -> Optional[str]:
        """
        Read a field from a parsed row.

        Returns None for unmapped fields, short rows and empty cells.
        """
        index = self.column_for(field_key)
        if index is None or index >= len(row):
            return None
        return row[index] or None

    def has_field(self, field_key: FieldKey) -> bool:
        return field_key in self._assignments.values()

    def mapped_fields(self) -> set[FieldKey]:
        return set(self._assignments.values())

    def field_at(self, index: int) -> Optional[FieldKey]:
        return self._assignments.get(index)

    def items(self) -> list[tuple[int, FieldKey]]:
        return sorted(self._assignments.items())

    def to_dict(self) -> dict[str, str]:
        """JSON-friendly form, keyed by string index."""
        return {str(index): field.value for index, field in self.items()}

    def __len__(self) -> int:
        return len(self._assignments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnMapping):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        return f"ColumnMapping({self.to_dict()})"


def _validate_mapping_dict(value: Optional[dict]) -> dict[str, str]:
    """Normalize a request mapping and reject unknown field keys."""
    try:
        return ColumnMapping.from_dict(value).to_dict()
    except InvalidFieldKeyError as e:
        raise ValueError(e.message) from e


class MappingTemplateCreate(BaseSchema):
    """Save the current mapping under a name."""

    name: str = Field(..., min_length=1, max_length=100, description="Template name")
    mapping: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Column index → field key",
        examples=[{"0": "org_nr", "1": "name", "4": "total_sales"}]
    )
    column_count: int = Field(..., ge=1, description="Columns in the file the mapping was made for")

    @field_validator("mapping")
    @classmethod
    def known_fields(cls, v):
        """Drop unmapped columns, reject unknown fields."""
        return _validate_mapping_dict(v)


class MappingTemplateResponse(TenantMixin, TimestampMixin, BaseSchema):
    """Persisted mapping template."""

    id: str
    name: str
    mapping: dict[str, str] = Field(default_factory=dict)
    column_count: int

    def to_column_mapping(self) -> ColumnMapping:
        return ColumnMapping.from_dict(self.mapping)


class AppliedMappingResponse(BaseSchema):
    """Template mapping intersected with the current file's columns."""

    template: str
    column_count: int
    mapping: dict[str, str]
    dropped_columns: list[int] = Field(default_factory=list)


class MappableField(BaseSchema):
    """A field offered in the mapping dropdown."""

    key: FieldKey
    label: str


def mappable_fields(fields: Iterable[FieldKey] = tuple(FieldKey)) -> list[MappableField]:
    return [MappableField(key=f, label=FIELD_LABELS[f]) for f in fields]
