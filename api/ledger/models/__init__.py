from .base import Base
from .transaction import Transaction, Addition
from .share import Share
from .audit import AuditLog

__all__ = ["Base", "Transaction", "Addition", "Share", "AuditLog"]
