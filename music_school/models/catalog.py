# models/catalog.py
"""Status and type constants for records owned by the REST API."""


class ContactStatus:
    """Contact message states."""
    NEW = 'new'
    READ = 'read'
    REPLIED = 'replied'

    ALL = (NEW, READ, REPLIED)


class ConsultationStatus:
    """Consultation request states."""
    NEW = 'new'
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    ALL = (NEW, SCHEDULED, COMPLETED, CANCELLED)


class WorkshopEnrollmentStatus:
    """Workshop enrollment states."""
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    ALL = (PENDING, APPROVED, REJECTED)


class ResourceType:
    """Course resource kinds."""
    VIDEO = 'video'
    PDF = 'pdf'
    DOCUMENT = 'document'

    ALL = (VIDEO, PDF, DOCUMENT)


class EventType:
    """Calendar event kinds."""
    CLASS = 'class'
    EXAM = 'exam'
    HOLIDAY = 'holiday'
    EVENT = 'event'

    ALL = (CLASS, EXAM, HOLIDAY, EVENT)


class AttendanceStatus:
    """Attendance marks for one student on one day."""
    PRESENT = 'present'
    ABSENT = 'absent'
    WAIVED = 'waived'

    ALL = (PRESENT, ABSENT, WAIVED)


# Form field choices that can be imported elsewhere
COURSE_LEVEL_CHOICES = [
    ('Beginner', 'Beginner'),
    ('Intermediate', 'Intermediate'),
    ('Advanced', 'Advanced'),
    ('All Levels', 'All Levels')
]

RESOURCE_TYPE_CHOICES = [
    (ResourceType.VIDEO, 'Video'),
    (ResourceType.PDF, 'PDF'),
    (ResourceType.DOCUMENT, 'Document')
]

EVENT_TYPE_CHOICES = [
    (EventType.CLASS, 'Class'),
    (EventType.EXAM, 'Exam'),
    (EventType.HOLIDAY, 'Holiday'),
    (EventType.EVENT, 'Event')
]

ATTENDANCE_STATUS_CHOICES = [
    (AttendanceStatus.PRESENT, 'Present'),
    (AttendanceStatus.ABSENT, 'Absent'),
    (AttendanceStatus.WAIVED, 'Waived')
]

PREFERRED_TIME_CHOICES = [
    ('', 'Select a time'),
    ('10:00 AM', '10:00 AM'),
    ('12:00 PM', '12:00 PM'),
    ('2:00 PM', '2:00 PM'),
    ('4:00 PM', '4:00 PM'),
    ('6:00 PM', '6:00 PM')
]

# Shown on the catalog when the API cannot be reached
DEMO_COURSES = [
    {
        '_id': 'demo1',
        'title': 'Guitar Basics',
        'description': 'Master the fundamentals of guitar playing. Learn chords, strumming patterns, and basic songs.',
        'price': 2999,
        'level': 'Beginner',
        'image': 'https://images.unsplash.com/photo-1511379938547-c1f69419868d?q=80&w=600&auto=format&fit=crop'
    },
    {
        '_id': 'demo2',
        'title': 'Piano Pro',
        'description': 'Advanced piano techniques, scales, arpeggios, and performance tips for intermediate players.',
        'price': 3499,
        'level': 'Intermediate',
        'image': 'https://images.unsplash.com/photo-1513883049090-d0b7439799bf?q=80&w=600&auto=format&fit=crop'
    },
    {
        '_id': 'demo3',
        'title': 'Vocal Coaching',
        'description': 'Develop your singing voice with breathing techniques, pitch control, and performance confidence.',
        'price': 2799,
        'level': 'All Levels',
        'image': 'https://images.unsplash.com/photo-1483412033650-1015ddeb83d1?q=80&w=600&auto=format&fit=crop'
    }
]
