from .base import Base, BaseModel, TimeStamp
from .occasion import AliasIndex, Occasion
from .event import Event
from .guest import Guest, SubGuest
from .tag import Tag
from .email_log import EmailLog

__all__ = [
    "Base",
    "BaseModel",
    "TimeStamp",
    "Occasion",
    "AliasIndex",
    "Event",
    "Guest",
    "SubGuest",
    "Tag",
    "EmailLog",
]
