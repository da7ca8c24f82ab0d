# controllers/main/pages.py
"""
Public website: marketing pages, course catalog, workshops, the
lead-capture, contact and consultation forms, and the signed-in student's
dashboard, resources, attendance and class schedule.
"""

from flask import render_template, request, redirect, url_for, flash, current_app, abort
from flask_login import current_user

from music_school.extensions import reconciler
from music_school.models import DEMO_COURSES
from music_school.models.catalog import RESOURCE_TYPE_CHOICES
from music_school.services.catalog_service import CatalogService
from music_school.services.student_service import StudentService
from music_school.services.submission_service import SubmissionService
from music_school.utils.api_client import ApiError
from music_school.utils.auth import signed_in_required, viewer_token
from .forms import LeadForm, ContactForm, ConsultationForm, WorkshopEnrollmentForm

from . import main_bp

LEAD_SUCCESS = "Thanks! We'll contact you soon. 🎉"
LEAD_FAILURE = 'Submission failed. Please try again.'


def viewer_enrolled_ids():
    """Course ids the current viewer already holds (empty when signed out)."""
    return reconciler.fetch_enrolled_ids(current_user.is_authenticated, viewer_token)


def course_cards(courses):
    return reconciler.course_cards(courses, viewer_enrolled_ids(), current_app.config['CURRENCY_SYMBOL'])


def render_form_page(template, form, outcome=None, **context):
    focus = outcome.focus if outcome is not None else None
    return render_template(template, form=form, focus=focus, **context)


@main_bp.route('/', methods=['GET', 'POST'])
def home():
    """Landing page with featured courses, teachers and the enrollment form."""
    form = LeadForm()
    outcome = form.submit_with(SubmissionService.submit_lead, LEAD_SUCCESS, LEAD_FAILURE)
    if outcome and outcome.succeeded:
        return redirect(url_for('main.home', _anchor='enroll'))

    courses, _ = CatalogService.load_courses()
    limit = current_app.config['FEATURED_COURSE_LIMIT']

    return render_form_page('main/home.html', form, outcome,
                            cards=course_cards(courses[:limit]),
                            teachers=CatalogService.load_teachers())


@main_bp.route('/courses')
def courses():
    """Course catalog with level filter."""
    level = request.args.get('level', 'all', type=str)
    all_courses, live = CatalogService.load_courses()
    filtered = CatalogService.filter_by_level(all_courses, level)

    return render_template('main/courses.html',
                           cards=course_cards(filtered),
                           levels=CatalogService.levels(all_courses),
                           active_level=level,
                           live=live)


@main_bp.route('/courses/<course_id>', methods=['GET', 'POST'])
def course_detail(course_id):
    """Course page with an enrollment interest form."""
    try:
        course = CatalogService.get_course(course_id)
    except ApiError as e:
        current_app.logger.error(f"Course detail error: {str(e)}")
        course = next((c for c in DEMO_COURSES if c['_id'] == course_id), None)
        if course is None:
            flash('Unable to load this course right now.', 'error')
            return redirect(url_for('main.courses'))

    if not course:
        abort(404)

    form = LeadForm()
    outcome = form.submit_with(
        lambda payload: SubmissionService.submit_lead(payload, course=course),
        LEAD_SUCCESS,
        LEAD_FAILURE
    )
    if outcome and outcome.succeeded:
        return redirect(url_for('main.course_detail', course_id=course_id))

    card = course_cards([course])[0]
    return render_form_page('main/course_detail.html', form, outcome, course=course, card=card)


@main_bp.route('/teachers')
def teachers():
    return render_template('main/teachers.html', teachers=CatalogService.load_teachers())


@main_bp.route('/schedule')
def schedule():
    return render_template('main/schedule.html')


@main_bp.route('/about', methods=['GET', 'POST'])
def about():
    """About page with the free consultation booking form."""
    form = ConsultationForm()
    outcome = form.submit_with(
        SubmissionService.submit_consultation,
        "Consultation booked! We'll confirm your slot soon. 🎉",
        'Failed to book consultation. Please try again.'
    )
    if outcome and outcome.succeeded:
        return redirect(url_for('main.about'))

    return render_form_page('main/about.html', form, outcome)


@main_bp.route('/contact', methods=['GET', 'POST'])
def contact():
    """Contact form and FAQs."""
    form = ContactForm()
    outcome = form.submit_with(
        SubmissionService.submit_contact,
        "Message sent successfully! We'll get back to you soon. 🎉",
        'Failed to send message. Please try again.'
    )
    if outcome and outcome.succeeded:
        return redirect(url_for('main.contact'))

    return render_form_page('main/contact.html', form, outcome, faqs=CatalogService.load_faqs())


@main_bp.route('/workshops')
def workshops():
    return render_template('main/workshops.html', workshops=CatalogService.load_workshops())


@main_bp.route('/workshops/<workshop_id>/enroll', methods=['GET', 'POST'])
def workshop_enroll(workshop_id):
    """Workshop enrollment; the viewer must be signed in."""
    if not current_user.is_authenticated:
        flash('Please sign in to enroll in workshops', 'error')
        return redirect(url_for('main.workshops'))

    workshop = next((w for w in CatalogService.load_workshops() if str(w.get('_id')) == workshop_id), None)
    if workshop is None:
        flash('Workshop not found.', 'error')
        return redirect(url_for('main.workshops'))

    form = WorkshopEnrollmentForm()
    if request.method == 'GET':
        form.name.data = current_user.name or ''
        form.email.data = current_user.email or ''

    outcome = form.submit_with(
        lambda payload: SubmissionService.enroll_in_workshop(workshop_id, payload, viewer_token()),
        "Enrollment submitted successfully! We'll contact you soon. 🎉",
        'Failed to submit enrollment. Please try again.'
    )
    if outcome and outcome.succeeded:
        return redirect(url_for('main.workshops'))

    return render_form_page('main/workshop_enroll.html', form, outcome, workshop=workshop)


@main_bp.route('/dashboard')
@signed_in_required
def dashboard():
    """Signed-in student's approved and pending enrollments."""
    try:
        approved, pending = CatalogService.load_my_enrollments(viewer_token())
    except ApiError as e:
        current_app.logger.error(f"Dashboard error: {str(e)}")
        flash('Unable to load your courses right now.', 'error')
        approved, pending = [], []

    return render_template('main/dashboard.html', enrollments=approved, pending=pending)


# Student pages

def _my_courses(token):
    """The viewer's enrolled courses as (id, title) pairs; flashes when unavailable."""
    try:
        enrollments, _ = CatalogService.load_my_enrollments(token)
    except ApiError as e:
        current_app.logger.error(f"Error loading enrollments: {str(e)}")
        flash('Unable to load your courses right now.', 'error')
        return []
    return StudentService.enrolled_courses(enrollments)


@main_bp.route('/my/resources')
@signed_in_required
def my_resources():
    """Course materials for one of the viewer's courses, filterable by type and text."""
    token = viewer_token()
    courses = _my_courses(token)
    course_id = request.args.get('course') or (courses[0][0] if courses else '')
    kind = request.args.get('type', '')
    query = request.args.get('q', '')

    resources = []
    if course_id:
        try:
            resources = StudentService.load_resources(course_id, token)
        except ApiError as e:
            current_app.logger.error(f"Error loading resources for {course_id}: {str(e)}")
            flash('Unable to load resources for this course.', 'error')

    return render_template('main/resources.html',
                           courses=courses,
                           course_id=course_id,
                           resources=StudentService.filter_resources(resources, kind, query),
                           total=len(resources),
                           kind=kind,
                           query=query,
                           resource_types=RESOURCE_TYPE_CHOICES,
                           resource_link=StudentService.resource_link)


@main_bp.route('/my/attendance')
@signed_in_required
def my_attendance():
    """Attendance history for one course, optionally narrowed with ``?month=`` and ``?year=``."""
    token = viewer_token()
    courses = _my_courses(token)
    course_id = request.args.get('course') or (courses[0][0] if courses else '')
    month = request.args.get('month', type=int)
    year = request.args.get('year', type=int)

    records = []
    if course_id:
        try:
            records = StudentService.load_attendance(course_id, token, month=month, year=year)
        except ApiError as e:
            current_app.logger.error(f"Error loading attendance for {course_id}: {str(e)}")
            flash('Unable to load attendance for this course.', 'error')

    return render_template('main/attendance.html',
                           courses=courses,
                           course_id=course_id,
                           month=month,
                           year=year,
                           records=records,
                           summary=StudentService.attendance_summary(records))


@main_bp.route('/my/schedule')
@signed_in_required
def my_schedule():
    """Today's and upcoming live classes across the viewer's courses."""
    try:
        todays, upcoming = StudentService.load_schedules(viewer_token())
    except ApiError as e:
        current_app.logger.error(f"Error loading schedules: {str(e)}")
        flash('Unable to load your class schedule right now.', 'error')
        todays, upcoming = [], []

    return render_template('main/my_schedule.html', todays=todays, upcoming=upcoming)
