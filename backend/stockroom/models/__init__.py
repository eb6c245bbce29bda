from .catalog import Item, Vendor, Chef, new_id
from .ledger import StockMovement, MOVEMENT_KINDS
from .audit import AuditEntry, AUDIT_ACTIONS, AUDIT_SCOPES

__all__ = [
    'Item', 'Vendor', 'Chef', 'new_id',
    'StockMovement', 'MOVEMENT_KINDS',
    'AuditEntry', 'AUDIT_ACTIONS', 'AUDIT_SCOPES',
]
