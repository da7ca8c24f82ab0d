# forms/admin_forms.py
"""
Flask-WTF forms for the admin console.

Catalog records with simple typed fields (courses, teachers, FAQs) use plain
WTForms validators. Forms that share a rule table with the JSON endpoints
(workshops, resources, schedules, events, manual enrollments and attendance)
are RuleForms.
"""

from flask_wtf import FlaskForm
from wtforms import (
    StringField, TextAreaField, SelectField, IntegerField, DecimalField, EmailField, HiddenField
)
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, URL

from music_school.controllers.main.forms.base import RuleForm
from music_school.models.catalog import (
    COURSE_LEVEL_CHOICES, RESOURCE_TYPE_CHOICES, EVENT_TYPE_CHOICES, ATTENDANCE_STATUS_CHOICES
)


class RecordForm(FlaskForm):
    """Plain form mapping its fields one-to-one onto an API record."""

    # form field name -> API key, where they differ
    key_map = {}

    def payload(self):
        data = {}
        for name, field in self._fields.items():
            if name == 'csrf_token':
                continue
            value = field.data
            if isinstance(value, str):
                value = value.strip()
            data[self.key_map.get(name, name)] = value
        return data

    @classmethod
    def from_record(cls, record):
        record = record or {}
        data = {}
        for name in cls.field_names():
            key = cls.key_map.get(name, name)
            if key in record:
                data[name] = record[key]
        return cls(data=data)

    @classmethod
    def field_names(cls):
        return [name for name in dir(cls) if not name.startswith('_') and hasattr(getattr(cls, name), 'field_class')]


class CourseForm(RecordForm):
    """Course create/edit form."""

    title = StringField(
        'Title',
        validators=[
            DataRequired(message='Title is required'),
            Length(max=120, message='Title must be less than 120 characters')
        ]
    )

    description = TextAreaField(
        'Description',
        validators=[DataRequired(message='Description is required')],
        render_kw={'rows': 4}
    )

    price = DecimalField(
        'Price',
        places=2,
        validators=[
            InputRequired(message='Price is required'),
            NumberRange(min=0, message='Price cannot be negative')
        ]
    )

    level = SelectField('Level', choices=COURSE_LEVEL_CHOICES, default='All Levels')

    duration = StringField('Duration', validators=[Optional(), Length(max=50)],
                           render_kw={'placeholder': 'e.g. 8 weeks'})

    image = StringField(
        'Image URL',
        validators=[Optional(), URL(message='Please enter a valid URL')]
    )

    def payload(self):
        data = super().payload()
        # The API stores prices as numbers
        data['price'] = float(data['price']) if data.get('price') is not None else 0
        return data


class TeacherForm(RecordForm):
    """Teacher profile form."""

    name = StringField(
        'Name',
        validators=[
            DataRequired(message='Name is required'),
            Length(min=2, max=100, message='Name must be between 2 and 100 characters')
        ]
    )

    instrument = StringField('Instrument', validators=[DataRequired(message='Instrument is required')])

    experience = StringField('Experience', validators=[Optional(), Length(max=50)],
                             render_kw={'placeholder': 'e.g. 10+ years'})

    bio = TextAreaField('Bio', validators=[Optional(), Length(max=1000)], render_kw={'rows': 4})

    image = StringField('Photo URL', validators=[Optional(), URL(message='Please enter a valid URL')])


class FaqForm(RecordForm):
    question = StringField('Question', validators=[DataRequired(message='Question is required')])

    answer = TextAreaField('Answer', validators=[DataRequired(message='Answer is required')],
                           render_kw={'rows': 4})

    order = IntegerField('Display order', default=0, validators=[Optional(), NumberRange(min=0)])


class RuleRecordForm(RuleForm):
    """RuleForm that can be prefilled from an API record."""

    @classmethod
    def record_data(cls, record):
        record = record or {}
        data = {}
        for rule in cls.rules():
            value = record.get(rule.key, record.get(rule.name))
            if isinstance(value, dict):
                value = value.get('_id')
            if value is not None:
                data[rule.name] = str(value)
        return data

    @classmethod
    def from_record(cls, record, **kwargs):
        data = cls.record_data(record)
        for name in ('price', 'capacity', 'order', 'url'):
            if record and name in record:
                data[name] = record[name]
        return cls(data=data, **kwargs)


class WorkshopForm(RuleRecordForm):
    """Workshop create/edit form."""

    form_name = 'workshop'

    title = StringField('Title', render_kw={'placeholder': 'Workshop title'})
    date = StringField('Date', render_kw={'type': 'date'})
    time = StringField('Time', render_kw={'type': 'time'})
    description = TextAreaField('Description', render_kw={'rows': 4})
    location = StringField('Location', render_kw={'placeholder': 'Studio or online link'})
    duration = StringField('Duration', render_kw={'placeholder': 'e.g. 2 hours'})
    price = IntegerField('Price', default=0, validators=[Optional(), NumberRange(min=0)])
    capacity = IntegerField('Capacity', validators=[Optional(), NumberRange(min=1)])

    @classmethod
    def record_data(cls, record):
        data = super().record_data(record)
        if data.get('date'):
            data['date'] = data['date'][:10]
        return data

    def extra_payload(self):
        return {'price': self.price.data or 0, 'capacity': self.capacity.data}


class ResourceForm(RuleRecordForm):
    """Course resource (video, PDF or document link)."""

    form_name = 'resource'

    course_id = HiddenField()
    title = StringField('Title')
    type = SelectField('Type', choices=[('', 'Select a type')] + RESOURCE_TYPE_CHOICES)
    description = TextAreaField('Description', render_kw={'rows': 3})
    url = StringField('URL', validators=[Optional(), URL(message='Please enter a valid URL')])
    order = IntegerField('Order', default=0, validators=[Optional(), NumberRange(min=0)])

    def extra_payload(self):
        return {'url': (self.url.data or '').strip(), 'order': self.order.data or 0}


class ScheduleForm(RuleRecordForm):
    """Live class schedule for a course."""

    form_name = 'schedule'

    course_id = HiddenField()
    title = StringField('Title')
    start_time = StringField('Starts', render_kw={'type': 'datetime-local'})
    end_time = StringField('Ends', render_kw={'type': 'datetime-local'})
    description = TextAreaField('Description', render_kw={'rows': 3})
    instructor = StringField('Instructor')
    location = StringField('Location')
    meeting_link = StringField('Meeting link', render_kw={'placeholder': 'https://'})


class EventForm(RuleRecordForm):
    """Calendar event for a single day."""

    form_name = 'event'

    title = StringField('Title')
    date = StringField('Date', render_kw={'type': 'date'})
    time = StringField('Time', render_kw={'type': 'time'})
    type = SelectField('Type', choices=[('', 'Select a type')] + EVENT_TYPE_CHOICES)
    description = TextAreaField('Description', render_kw={'rows': 3})
    course_id = SelectField('Course (optional)', choices=[('', 'No course')], validate_choice=False)


class ManualEnrollmentForm(RuleRecordForm):
    """Enroll a student by hand, bypassing the approval queue."""

    form_name = 'manual_enrollment'

    name = StringField('Student name')
    email = EmailField('Student email')
    course_id = SelectField('Course', choices=[('', 'Select a course')], validate_choice=False)


class AttendanceForm(RuleRecordForm):
    """Mark one student present, absent or waived for a day."""

    form_name = 'attendance'

    course_id = HiddenField()
    student_id = SelectField('Student', choices=[('', 'Select a student')], validate_choice=False)
    date = StringField('Date', render_kw={'type': 'date'})
    status = SelectField('Status', choices=[('', 'Select a status')] + ATTENDANCE_STATUS_CHOICES)
    notes = TextAreaField('Notes', render_kw={'rows': 2})


def course_choices(courses, placeholder='Select a course'):
    """Select options for a course picker."""
    return [('', placeholder)] + [(str(c.get('_id')), c.get('title') or 'Untitled') for c in courses]


def student_choices(students):
    return [('', 'Select a student')] + [
        (str(s.get('_id')), s.get('name') or s.get('email') or 'Student') for s in students
    ]
