# ============================================
# tracker/models/__init__.py
# ============================================
from .project import Project
from .ticket import Ticket
from .ticket_type import TicketType

__all__ = [
    'Project',
    'Ticket',
    'TicketType',
]
