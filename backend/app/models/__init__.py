from app.models.log import AggregateKey, Environment, Level, Log, Status
from app.models.user import User

__all__ = [
    "AggregateKey",
    "Environment",
    "Level",
    "Log",
    "Status",
    "User",
]
