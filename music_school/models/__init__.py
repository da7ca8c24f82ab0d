from .user import SessionUser, RoleType
from .catalog import (
    ContactStatus, ConsultationStatus, WorkshopEnrollmentStatus,
    ResourceType, EventType, AttendanceStatus, DEMO_COURSES
)

__all__ = [
    'SessionUser', 'RoleType',
    'ContactStatus', 'ConsultationStatus', 'WorkshopEnrollmentStatus',
    'ResourceType', 'EventType', 'AttendanceStatus', 'DEMO_COURSES'
]
