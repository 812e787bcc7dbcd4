"""
Core module - Configuration, database, money, security, and utilities.
"""

from app.core.config import get_settings, settings
from app.core.database import Base, close_db, get_db, init_db
from app.core.money import CurrencyFormat, InvalidConfiguration, MoneyFormatter, get_money_formatter
from app.core.security import create_access_token, decode_token

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Money
    "CurrencyFormat",
    "InvalidConfiguration",
    "MoneyFormatter",
    "get_money_formatter",
    # Security
    "create_access_token",
    "decode_token",
]
