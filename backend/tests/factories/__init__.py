# =============================================================================
# ASSETDESK - TEST FACTORIES
# =============================================================================
# Factory Boy factories for test payloads
# =============================================================================

from .users import UserFactory
from .crm import CompanyFactory, AssetFactory, TicketFactory

__all__ = [
    "UserFactory",
    "CompanyFactory",
    "AssetFactory",
    "TicketFactory",
]
