"""
Domain constants - ticket statuses and priorities, asset statuses.
"""


class TicketStatus:
    """Ticket lifecycle statuses"""
    OPEN = 'Open'
    IN_PROGRESS = 'In Progress'
    RESOLVED = 'Resolved'
    CLOSED = 'Closed'

    ALL = [OPEN, IN_PROGRESS, RESOLVED, CLOSED]

    # Status set by the server whenever a reply is added
    ON_REPLY = IN_PROGRESS


class TicketPriority:
    """Ticket priorities"""
    LOW = 'Low'
    NORMAL = 'Normal'
    HIGH = 'High'
    URGENT = 'Urgent'

    ALL = [LOW, NORMAL, HIGH, URGENT]

    DEFAULT = NORMAL


class AssetStatus:
    """Asset register statuses"""
    IN_USE = 'In Use'
    IN_STORAGE = 'In Storage'
    UNDER_REPAIR = 'Under Repair'
    BROKEN = 'Broken'
    END_OF_LIFE = 'End of Life'
    DISPOSED = 'Disposed'

    ALL = [IN_USE, IN_STORAGE, UNDER_REPAIR, BROKEN, END_OF_LIFE, DISPOSED]

    DEFAULT = IN_USE


# Columns an asset carries besides id/company_id/created_at, in export order
ASSET_FIELDS = [
    'asset_name',
    'description',
    'serial_number',
    'status',
    'device_type',
    'owner_location',
    'brand',
    'model',
    'operating_system',
]

COMPANY_FIELDS = [
    'name',
    'contact_person',
    'contact_email',
    'contact_phone',
    'address',
]
