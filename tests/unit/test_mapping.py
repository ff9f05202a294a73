"""
Unit tests for column mappings and mapping rules.
"""

import pytest

from models.mapping import (
    ColumnMapping,
    FieldKey,
    FIELD_LABELS,
    MappingTemplateCreate,
    mappable_fields,
)
from services.mapping_service import (
    suggest_field,
    suggest_mapping,
    validate_mapping,
    apply_template,
    dropped_columns,
)
from exceptions import InvalidFieldKeyError, MappingValidationError


# ===================
# COLUMN MAPPING
# ===================

class TestColumnMapping:
    """Tests for ColumnMapping."""

    def test_get_reads_mapped_column(self):
        mapping = ColumnMapping({0: FieldKey.ORG_NR, 2: "total_sales"})
        row = ["987654321", "Acme AS", "10 000"]

        assert mapping.get(row, FieldKey.ORG_NR) == "987654321"
        assert mapping.get(row, FieldKey.TOTAL_SALES) == "10 000"
        assert mapping.get(row, FieldKey.NAME) is None

    def test_short_row_reads_none(self):
        mapping = ColumnMapping({5: FieldKey.EMAIL})
        assert mapping.get(["a", "b"], FieldKey.EMAIL) is None

    def test_empty_cell_reads_none(self):
        mapping = ColumnMapping({0: FieldKey.NAME})
        assert mapping.get([""], FieldKey.NAME) is None

    def test_unmap_with_empty_value(self):
        mapping = ColumnMapping({0: FieldKey.NAME})
        mapping.assign(0, "")
        assert len(mapping) == 0

    def test_latest_assignment_wins(self):
        """Two columns on one field: the one assigned last is read."""
        mapping = ColumnMapping()
        mapping.assign(0, FieldKey.ORG_NR)
        mapping.assign(3, FieldKey.ORG_NR)
        row = ["111111111", "", "", "222222222"]

        assert mapping.get(row, FieldKey.ORG_NR) == "222222222"
        assert mapping.field_at(0) == FieldKey.ORG_NR

        mapping.assign(0, FieldKey.ORG_NR)
        assert mapping.get(row, FieldKey.ORG_NR) == "111111111"

    def test_exclusive_assignment_clears_previous_owner(self):
        mapping = ColumnMapping({0: FieldKey.ORG_NR})
        mapping.assign(3, FieldKey.ORG_NR, exclusive=True)

        assert mapping.field_at(0) is None
        assert mapping.column_for(FieldKey.ORG_NR) == 3

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidFieldKeyError):
            ColumnMapping({0: "vat_number"})

    def test_from_dict_and_to_dict(self):
        mapping = ColumnMapping.from_dict({"1": "name", "0": "org_nr", "2": None})
        assert mapping.to_dict() == {"0": "org_nr", "1": "name"}
        assert mapping == ColumnMapping({0: "org_nr", 1: "name"})

    def test_from_dict_rejects_non_numeric_index(self):
        with pytest.raises(InvalidFieldKeyError):
            ColumnMapping.from_dict({"first": "name"})


# ===================
# SUGGESTIONS
# ===================

class TestSuggestMapping:
    """Tests for header keyword suggestions."""

    @pytest.mark.parametrize("header, expected", [
        ("Org.nr", FieldKey.ORG_NR),
        ("Kundenavn", FieldKey.NAME),
        ("Kundenr", FieldKey.CUSTOMER_NUMBER),
        ("Adresse", FieldKey.ADDRESS),
        ("Postnr", FieldKey.POSTAL_CODE),
        ("Poststed", FieldKey.CITY),
        ("By", FieldKey.CITY),
        ("E-post", FieldKey.EMAIL),
        ("Kontakt e-post", FieldKey.CONTACT_EMAIL),
        ("Kontaktperson", FieldKey.CONTACT_PERSON),
        ("Telefon", FieldKey.PHONE),
        ("Omsetning", FieldKey.TOTAL_SALES),
        ("Varekost", FieldKey.TOTAL_COST),
        ("Fortjeneste", FieldKey.TOTAL_PROFIT),
        ("DB", FieldKey.TOTAL_PROFIT),
        ("Margin %", FieldKey.MARGIN_PERCENT),
        ("Antall ordre", FieldKey.ORDER_COUNT),
        ("Bedriftsnavn", FieldKey.NAME),
        ("Organisasjonsnavn", FieldKey.NAME),
        ("Firmanavn", FieldKey.NAME),
        ("Organisasjonsnummer", FieldKey.ORG_NR),
    ])
    def test_suggest_field(self, header, expected):
        assert suggest_field(header) == expected

    def test_short_keyword_needs_whole_word(self):
        """'by' must not match inside other words."""
        assert suggest_field("Bygg") is None

    def test_unknown_header(self):
        assert suggest_field("Kolonne X") is None
        assert suggest_field("") is None

    def test_each_field_suggested_once(self):
        mapping = suggest_mapping(["Org.nr", "Navn", "Omsetning", "Salg"])
        assert mapping.to_dict() == {"0": "org_nr", "1": "name", "2": "total_sales"}

    def test_company_name_header_leaves_org_nr_for_its_column(self):
        mapping = suggest_mapping(["Bedriftsnavn", "Org.nr", "Omsetning"])
        assert mapping.to_dict() == {"0": "name", "1": "org_nr", "2": "total_sales"}


# ===================
# VALIDATION
# ===================

class TestValidateMapping:

    def test_org_nr_only_is_enough(self):
        validate_mapping(ColumnMapping({0: FieldKey.ORG_NR}))

    def test_name_only_is_enough(self):
        validate_mapping(ColumnMapping({0: FieldKey.NAME}))

    def test_missing_identity_rejected(self):
        with pytest.raises(MappingValidationError) as exc:
            validate_mapping(ColumnMapping({0: FieldKey.TOTAL_SALES}))

        assert exc.value.code == "MAPPING_MISSING_IDENTITY"
        assert exc.value.message == "Du må mappe enten Org.nr eller Kundenavn for å kunne importere"
        assert exc.value.details["mapped_fields"] == ["total_sales"]

    def test_empty_mapping_rejected(self):
        with pytest.raises(MappingValidationError):
            validate_mapping(ColumnMapping())


# ===================
# TEMPLATES
# ===================

class TestApplyTemplate:

    SAVED = {"0": "org_nr", "1": "name", "2": "address", "3": "city", "4": "total_sales", "5": "total_profit"}

    def test_same_width_reproduces_mapping(self):
        applied = apply_template(self.SAVED, column_count=6)
        assert applied.to_dict() == self.SAVED

    def test_narrower_file_drops_trailing_columns(self):
        applied = apply_template(self.SAVED, column_count=4)

        assert applied.to_dict() == {"0": "org_nr", "1": "name", "2": "address", "3": "city"}
        assert dropped_columns(self.SAVED, 4) == [4, 5]

    def test_wider_file_leaves_extra_columns_unmapped(self):
        applied = apply_template(self.SAVED, column_count=8)
        assert applied.field_at(6) is None
        assert len(applied) == 6


class TestTemplateSchema:

    def test_unmapped_columns_dropped(self):
        data = MappingTemplateCreate(name="Kasse", mapping={"0": "org_nr", "1": ""}, column_count=2)
        assert data.mapping == {"0": "org_nr"}

    def test_unknown_field_is_validation_error(self):
        from pydantic import ValidationError as PydanticValidationError

        with pytest.raises(PydanticValidationError):
            MappingTemplateCreate(name="Kasse", mapping={"0": "vat"}, column_count=1)


class TestMappableFields:

    def test_every_field_has_a_label(self):
        fields = mappable_fields()
        assert len(fields) == len(FieldKey)
        assert {f.key for f in fields} == set(FIELD_LABELS)
