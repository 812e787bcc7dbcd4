"""
Shared module - Base model and helpers used by every feature module.
"""

from app.modules.shared.models import BaseModel
from app.modules.shared.schemas import MAX_AMOUNT, MoneyAmount, money_amount
from app.modules.shared.time import local_today

__all__ = ["MAX_AMOUNT", "BaseModel", "MoneyAmount", "local_today", "money_amount"]
