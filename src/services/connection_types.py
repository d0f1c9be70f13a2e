"""Shared types and constants for carrier connection settings.

Neutral module with no service-layer imports. Used by config loading,
the DHL transport and the DHL shipment service.
"""

from dataclasses import dataclass

from src.services.dhl_constants import DHL_BASE_URLS


# --- Shared Constants ---

VALID_ENVIRONMENTS: frozenset[str] = frozenset(DHL_BASE_URLS)


# --- Credential Dataclasses ---


@dataclass(frozen=True)
class DHLCredentials:
    """Typed credentials for the DHL XML-PI service.

    Attributes:
        site_id: XML-PI site identifier (ServiceHeader.SiteID).
        password: XML-PI password (ServiceHeader.Password).
        account_number: DHL account billed for shipping and, when the
            sender pays, for duties.
    """

    site_id: str
    password: str
    account_number: str

    def __repr__(self) -> str:
        return (
            f"DHLCredentials(site_id={self.site_id!r}, password='***', "
            f"account_number={self.account_number!r})"
        )


def resolve_base_url(environment: str) -> str:
    """Return the XML-PI endpoint for an environment name.

    Raises:
        ValueError: If the environment is not 'test' or 'production'.
    """
    if environment not in VALID_ENVIRONMENTS:
        raise ValueError(
            f"Unknown DHL environment '{environment}'. "
            f"Expected one of: {', '.join(sorted(VALID_ENVIRONMENTS))}"
        )
    return DHL_BASE_URLS[environment]
