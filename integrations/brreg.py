"""
Brønnøysund Enhetsregisteret integration.

Looks up organization numbers to fill in details for newly created
business customers. Docs: https://data.brreg.no/enhetsregisteret/api/docs/index.html
"""

from typing import Optional, Protocol
import re

import requests
import structlog

from config import settings
from models.registry import RegistryCompany
from exceptions import RegistryLookupError

logger = structlog.get_logger(__name__)

ORG_NR_PATTERN = re.compile(r"^\d{9}$")


class RegistryLookup(Protocol):
    """Anything that can look up a company by organization number."""

    def lookup(self, org_nr: str) -> Optional[RegistryCompany]:
        ...


class NullRegistry:
    """Registry that never finds anything. Used when lookups are disabled."""

    def lookup(self, org_nr: str) -> Optional[RegistryCompany]:
        return None


class BrregClient:
    """
    HTTP client for /enheter/{orgnr}.

    One blocking GET per lookup with a hard timeout, no retry.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.brreg_base_url).rstrip("/")
        self.timeout = timeout or settings.brreg_timeout_seconds
        self.session = session or requests.Session()

    def lookup(self, org_nr: str) -> Optional[RegistryCompany]:
        """
        Look up a unit by organization number.

        Args:
            org_nr: 9-digit organization number (spaces allowed)

        Returns:
            RegistryCompany, or None if the number is malformed or unknown

        Raises:
            RegistryLookupError: On timeout, connection failure or bad response
        """
        clean = (org_nr or "").replace(" ", "")
        if not ORG_NR_PATTERN.match(clean):
            logger.debug("brreg_lookup_skipped", org_nr=org_nr, reason="not_9_digits")
            return None

        url = f"{self.base_url}/enheter/{clean}"

        try:
            response = self.session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning("brreg_lookup_timeout", org_nr=clean, timeout=self.timeout)
            raise RegistryLookupError(clean, "timeout")
        except requests.exceptions.RequestException as e:
            logger.warning("brreg_lookup_failed", org_nr=clean, error=str(e))
            raise RegistryLookupError(clean, str(e))

        # 410 Gone: unit deleted from the register
        if response.status_code in (404, 410):
            logger.info("brreg_unit_not_found", org_nr=clean, status=response.status_code)
            return None

        if response.status_code != 200:
            logger.warning("brreg_unexpected_status", org_nr=clean, status=response.status_code)
            raise RegistryLookupError(clean, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryLookupError(clean, f"invalid JSON: {e}")

        company = RegistryCompany.from_enhet(payload)
        logger.info("brreg_unit_found", org_nr=clean, name=company.name)
        return company


def get_registry() -> RegistryLookup:
    """Registry used by imports, honouring BRREG_ENABLED."""
    if not settings.brreg_enabled:
        return NullRegistry()
    return BrregClient()
