"""
Column mapping rules.

Header keyword suggestions, pre-flight validation and template
application. The ColumnMapping itself lives in models.mapping.
"""

from typing import Mapping, Optional, Sequence, Union

import structlog

from models.mapping import ColumnMapping, FieldKey
from exceptions import MappingValidationError

logger = structlog.get_logger(__name__)


# ===================
# HEADER KEYWORDS
# ===================

# Checked in order; the first group whose keyword occurs in the header wins.
# Specific groups come before the generic ones they contain
# ("kontakt e-post" before "e-post", "bedriftsnavn" is a name before it is "bedrift").
HEADER_KEYWORDS: list[tuple[FieldKey, tuple[str, ...]]] = [
    (FieldKey.CONTACT_EMAIL, ("kontakt e-post", "kontakt epost", "kontakt email", "kontaktepost", "contact email")),
    (FieldKey.CONTACT_PHONE, ("kontakt tlf", "kontakt telefon", "kontakttelefon", "contact phone")),
    (FieldKey.CONTACT_PERSON, ("kontaktperson", "kontakt", "contact")),
    (FieldKey.CUSTOMER_NUMBER, ("kundenr", "kundenummer", "kunde nr", "customer no", "customer number")),
    (FieldKey.NAME, ("navn", "name")),
    (FieldKey.ORG_NR, ("org", "bedrift")),
    (FieldKey.EMAIL, ("e-post", "epost", "email", "e-mail")),
    (FieldKey.PHONE, ("telefon", "tlf", "mobil", "phone")),
    (FieldKey.POSTAL_CODE, ("postnr", "postnummer", "zip")),
    (FieldKey.CITY, ("poststed", "sted", "city", "by")),
    (FieldKey.ADDRESS, ("adresse", "address", "gate")),
    (FieldKey.MARGIN_PERCENT, ("margin", "dg", "db%")),
    (FieldKey.TOTAL_PROFIT, ("fortjeneste", "dekningsbidrag", "profit", "db")),
    (FieldKey.TOTAL_COST, ("varekost", "kostpris", "kost", "cost")),
    (FieldKey.TOTAL_SALES, ("omsetning", "salg", "sum", "beløp", "belop", "sales", "total")),
    (FieldKey.ORDER_COUNT, ("ordre", "antall", "orders")),
]

# Short keywords that only count as whole words ("by" must not match "bygg")
_WHOLE_WORD_KEYWORDS = frozenset({"by", "db", "dg", "sum"})


def _matches(header: str, keyword: str) -> bool:
    if keyword in _WHOLE_WORD_KEYWORDS:
        words = header.replace(".", " ").replace("_", " ").replace("-", " ").split()
        return keyword in words
    return keyword in header


def suggest_field(header: str) -> Optional[FieldKey]:
    """Best field for a single header label, or None."""
    lowered = (header or "").strip().lower()
    if not lowered:
        return None
    for field_key, keywords in HEADER_KEYWORDS:
        if any(_matches(lowered, kw) for kw in keywords):
            return field_key
    return None


def suggest_mapping(labels: Sequence[str]) -> ColumnMapping:
    """
    Suggest a mapping from header labels.

    Each field is suggested for at most one column (the first match).

    Args:
        labels: Header row cells

    Returns:
        ColumnMapping with the suggested assignments
    """
    mapping = ColumnMapping()
    used: set[FieldKey] = set()

    for index, label in enumerate(labels):
        field_key = suggest_field(label)
        if field_key is None or field_key in used:
            continue
        mapping.assign(index, field_key)
        used.add(field_key)

    logger.debug("mapping_suggested", columns=len(labels), suggested=len(mapping))
    return mapping


# ===================
# VALIDATION
# ===================

def validate_mapping(mapping: ColumnMapping) -> None:
    """
    Check a mapping can identify customers.

    Org.nr is optional (rows without one become private customers), but at
    least org.nr or name must be mapped.

    Raises:
        MappingValidationError: If neither org_nr nor name is mapped
    """
    if mapping.has_field(FieldKey.ORG_NR) or mapping.has_field(FieldKey.NAME):
        return

    mapped = sorted(f.value for f in mapping.mapped_fields())
    logger.warning("mapping_rejected", mapped_fields=mapped)
    raise MappingValidationError(mapped)


# ===================
# TEMPLATES
# ===================

def apply_template(
    template_mapping: Union[ColumnMapping, Mapping[str, Optional[str]]],
    column_count: int,
) -> ColumnMapping:
    """
    Fit a saved mapping to a file with `column_count` columns.

    Saved columns beyond the file's width are dropped; columns the template
    does not cover stay unmapped.
    """
    saved = (
        template_mapping
        if isinstance(template_mapping, ColumnMapping)
        else ColumnMapping.from_dict(template_mapping)
    )

    applied = ColumnMapping()
    for index, field_key in saved.items():
        if index < column_count:
            applied.assign(index, field_key)

    return applied


def dropped_columns(
    template_mapping: Union[ColumnMapping, Mapping[str, Optional[str]]],
    column_count: int,
) -> list[int]:
    """Saved column indices that do not exist in a file of this width."""
    saved = (
        template_mapping
        if isinstance(template_mapping, ColumnMapping)
        else ColumnMapping.from_dict(template_mapping)
    )
    return [index for index, _ in saved.items() if index >= column_count]
