# =============================================================================
# ASSETDESK - CRM FACTORIES
# =============================================================================
# Payloads for companies, assets and tickets
# =============================================================================

import factory


class CompanyFactory(factory.Factory):
    """
    Payload for creating a company.
    """

    class Meta:
        model = dict

    name = factory.Sequence(lambda n: f"Test Company {n}")
    contact_person = factory.Sequence(lambda n: f"Contact {n}")
    contact_email = factory.Sequence(lambda n: f"it-{n}@company.test")
    contact_phone = "+1 555 0100"
    address = factory.Sequence(lambda n: f"{n} Test Street")


class AssetFactory(factory.Factory):
    """
    Payload for an asset (company_id supplied by the caller).
    """

    class Meta:
        model = dict

    asset_name = factory.Sequence(lambda n: f"LAPTOP-{n:03d}")
    description = "Office laptop"
    serial_number = factory.Sequence(lambda n: f"SN-{n:06d}")
    status = "In Use"
    device_type = "Laptop"
    owner_location = "Head office"
    brand = factory.Iterator(["Dell", "Lenovo", "HP"])
    model = "Standard 14"
    operating_system = "Windows 11"


class TicketFactory(factory.Factory):
    """
    Payload for opening a ticket (company_id supplied by the caller).
    """

    class Meta:
        model = dict

    title = factory.Sequence(lambda n: f"Printer offline #{n}")
    description = "The office printer does not respond since this morning."
    priority = "Normal"
