from .inventory import Product, Supplier, Transaction
from .activity import Activity
from .auth import User

__all__ = [
    'Product', 'Supplier', 'Transaction',
    'Activity',
    'User',
]
