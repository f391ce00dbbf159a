# SQLModel definitions: imported here to ensure metadata is populated.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .session import Session  # noqa: F401
from .organization import Organization  # noqa: F401
from .membership import Membership  # noqa: F401
from .assistant import Assistant, AssistantStatus  # noqa: F401
from .knowledge import KnowledgeEntry  # noqa: F401
from .tool import Tool  # noqa: F401
from .log_entry import LogEntry, LogLevel  # noqa: F401
