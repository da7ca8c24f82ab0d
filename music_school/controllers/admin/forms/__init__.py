# forms/__init__.py
"""Forms package for the admin console."""

from .admin_forms import (
    RecordForm,
    CourseForm,
    TeacherForm,
    FaqForm,
    WorkshopForm,
    ResourceForm,
    ScheduleForm,
    EventForm,
    ManualEnrollmentForm,
    AttendanceForm,
    course_choices,
    student_choices,
)

__all__ = [
    'RecordForm',
    'CourseForm',
    'TeacherForm',
    'FaqForm',
    'WorkshopForm',
    'ResourceForm',
    'ScheduleForm',
    'EventForm',
    'ManualEnrollmentForm',
    'AttendanceForm',
    'course_choices',
    'student_choices',
]
