"""
Brønnøysund Enhetsregisteret schemas.
"""

from typing import Any, Optional

from pydantic import Field

from models.base import BaseSchema


class RegistryCompany(BaseSchema):
    """The parts of an Enhetsregisteret unit an import can use."""

    org_nr: str
    name: Optional[str] = None
    address_lines: list[str] = Field(default_factory=list)
    postal_code: Optional[str] = None
    city: Optional[str] = None
    industry_description: Optional[str] = None
    employee_count: Optional[int] = None
    website: Optional[str] = None

    @property
    def street(self) -> Optional[str]:
        """First address line, as stored on the customer."""
        return self.address_lines[0] if self.address_lines else None

    @classmethod
    def from_enhet(cls, enhet: dict[str, Any]) -> "RegistryCompany":
        """
        Build from an /enheter/{orgnr} payload.

        Business address is preferred; postal address is the fallback.
        """
        address = enhet.get("forretningsadresse") or enhet.get("postadresse") or {}
        industry = enhet.get("naeringskode1") or {}

        return cls(
            org_nr=str(enhet.get("organisasjonsnummer") or ""),
            name=enhet.get("navn"),
            address_lines=[line for line in (address.get("adresse") or []) if line],
            postal_code=address.get("postnummer"),
            city=address.get("poststed"),
            industry_description=industry.get("beskrivelse"),
            employee_count=enhet.get("antallAnsatte"),
            website=enhet.get("hjemmeside"),
        )
