# Models package init
"""
Importing this package registers every table with Base.metadata.
"""

from biztime.models.company import Company
from biztime.models.invoice import Invoice

__all__ = ["Company", "Invoice"]
