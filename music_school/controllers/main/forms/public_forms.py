# forms/public_forms.py
"""Lead capture, contact and enrollment forms on the public site."""

from wtforms import StringField, EmailField, TelField, TextAreaField, SelectField, HiddenField

from music_school.models.catalog import PREFERRED_TIME_CHOICES
from .base import RuleForm

PHONE_RENDER_KW = {
    'placeholder': '+91 98765 43210',
    'maxlength': 17,
    'inputmode': 'tel',
    'data-format': 'phone'
}


class LeadForm(RuleForm):
    """Course enrollment interest form - posts to /leads."""

    form_name = 'lead'

    full_name = StringField('Full Name', render_kw={'placeholder': 'Full Name', 'maxlength': 100, 'autofocus': True})
    email = EmailField('Email Address', render_kw={'placeholder': 'your.email@example.com'})
    whatsapp = TelField('WhatsApp Number', render_kw=PHONE_RENDER_KW)
    country = StringField('Country', render_kw={'placeholder': 'Country'})


class ContactForm(RuleForm):
    """Contact page form - posts to /contact."""

    form_name = 'contact'

    name = StringField('Name', render_kw={'placeholder': 'Your name'})
    email = EmailField('Email', render_kw={'placeholder': 'your.email@example.com'})
    phone = TelField('Phone (optional)', render_kw=PHONE_RENDER_KW)
    subject = StringField('Subject', render_kw={'placeholder': 'What is this about?'})
    message = TextAreaField('Message', render_kw={'placeholder': 'Tell us more...', 'rows': 5})


class ConsultationForm(RuleForm):
    """Free consultation booking - posts to /consultations."""

    form_name = 'consultation'

    name = StringField('Name', render_kw={'placeholder': 'Your name'})
    email = EmailField('Email', render_kw={'placeholder': 'your.email@example.com'})
    phone = TelField('Phone', render_kw=PHONE_RENDER_KW)
    preferred_date = StringField('Preferred Date', render_kw={'type': 'date'})
    preferred_time = SelectField('Preferred Time', choices=PREFERRED_TIME_CHOICES)
    message = TextAreaField('Anything we should know?', render_kw={'rows': 3})


class WorkshopEnrollmentForm(RuleForm):
    """Workshop enrollment - posts to /workshops/<id>/enroll."""

    form_name = 'workshop_enrollment'

    workshop_id = HiddenField()
    name = StringField('Name', render_kw={'placeholder': 'Your name'})
    email = EmailField('Email', render_kw={'placeholder': 'your.email@example.com'})
    phone = TelField('Phone', render_kw=PHONE_RENDER_KW)
    message = TextAreaField('Message (optional)', render_kw={'rows': 3})

