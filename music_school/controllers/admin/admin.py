# controllers/admin/admin.py
"""
Admin console routes.

Every route needs the admin role and forwards the admin's bearer token to
the API, which enforces authorization on its side as well.
"""

from datetime import date as date_cls

from flask import render_template, request, redirect, url_for, flash, current_app, abort

from music_school.controllers.main.forms.base import RuleForm
from music_school.services.admin_service import AdminService, COLLECTIONS, INBOXES, parse_month
from music_school.utils.api_client import ApiError
from music_school.utils.auth import admin_required, viewer_token
from .forms import (
    CourseForm, TeacherForm, FaqForm, WorkshopForm, ResourceForm, ScheduleForm,
    EventForm, ManualEnrollmentForm, AttendanceForm, course_choices, student_choices
)

from . import admin_bp

COLLECTION_FORMS = {
    'courses': CourseForm,
    'teachers': TeacherForm,
    'workshops': WorkshopForm,
    'faqs': FaqForm,
}


def _collection_or_404(name):
    collection = COLLECTIONS.get(name)
    if collection is None:
        abort(404)
    return collection


def _inbox_or_404(name):
    inbox = INBOXES.get(name)
    if inbox is None:
        abort(404)
    return inbox


def _load_courses():
    try:
        return AdminService.list_items(COLLECTIONS['courses'], viewer_token())
    except ApiError as e:
        current_app.logger.error(f"Error loading courses: {str(e)}")
        flash('Unable to load courses.', 'error')
        return []


def _save_record(form, save, success_message):
    """
    Submit an admin form through ``save(payload)``.

    Returns True when the record was saved.
    """
    failure_message = 'Failed to save. Please try again.'

    if isinstance(form, RuleForm):
        outcome = form.submit_with(save, success_message, failure_message)
        return bool(outcome and outcome.succeeded)

    if not form.validate_on_submit():
        return False

    try:
        save(form.payload())
        flash(success_message, 'success')
        return True
    except ApiError as e:
        current_app.logger.error(f"Admin save error: {str(e)}")
        flash(failure_message, 'error')
        return False


@admin_bp.route('/')
@admin_bp.route('/dashboard')
@admin_required
def dashboard():
    """Admin dashboard: courses, teachers and the approval queue."""
    token = viewer_token()
    courses, teachers, pending = [], [], []

    try:
        courses = AdminService.list_items(COLLECTIONS['courses'], token)
        teachers = AdminService.list_items(COLLECTIONS['teachers'], token)
        pending = AdminService.pending_enrollments(token)
    except ApiError as e:
        current_app.logger.error(f"Admin dashboard error: {str(e)}")
        flash('Some dashboard data could not be loaded.', 'error')

    return render_template('admin/dashboard.html',
                           courses=courses,
                           teachers=teachers,
                           pending=pending)


@admin_bp.route('/enrollments/<enrollment_id>/approve', methods=['POST'])
@admin_required
def approve_enrollment(enrollment_id):
    try:
        AdminService.approve_enrollment(enrollment_id, viewer_token())
        flash('Enrollment approved successfully!', 'success')
    except ApiError as e:
        current_app.logger.error(f"Approve enrollment error: {str(e)}")
        flash('Failed to approve enrollment.', 'error')

    return redirect(url_for('admin.dashboard'))


# Catalog collections

@admin_bp.route('/<collection_name>/')
@admin_required
def collection_list(collection_name):
    collection = _collection_or_404(collection_name)
    try:
        items = AdminService.list_items(collection, viewer_token())
    except ApiError as e:
        current_app.logger.error(f"Error loading {collection.name}: {str(e)}")
        flash(f'Unable to load {collection.name}.', 'error')
        items = []

    return render_template('admin/collection_list.html', collection=collection, items=items)


@admin_bp.route('/<collection_name>/new', methods=['GET', 'POST'])
@admin_required
def collection_create(collection_name):
    collection = _collection_or_404(collection_name)
    form = COLLECTION_FORMS[collection.name]()
    token = viewer_token()

    saved = _save_record(
        form,
        lambda payload: AdminService.create_item(collection, payload, token),
        f'{collection.label} created successfully!'
    )
    if saved:
        return redirect(url_for('admin.collection_list', collection_name=collection.name))

    return render_template('admin/collection_form.html', collection=collection, form=form, item=None)


@admin_bp.route('/<collection_name>/<item_id>/edit', methods=['GET', 'POST'])
@admin_required
def collection_edit(collection_name, item_id):
    collection = _collection_or_404(collection_name)
    form_cls = COLLECTION_FORMS[collection.name]
    token = viewer_token()

    try:
        item = AdminService.find_item(collection, item_id, token)
    except ApiError as e:
        current_app.logger.error(f"Error loading {collection.label} {item_id}: {str(e)}")
        flash(f'Unable to load {collection.label.lower()}.', 'error')
        return redirect(url_for('admin.collection_list', collection_name=collection.name))

    if item is None:
        abort(404)

    form = form_cls.from_record(item) if request.method == 'GET' else form_cls()
    saved = _save_record(
        form,
        lambda payload: AdminService.update_item(collection, item_id, payload, token),
        f'{collection.label} updated successfully!'
    )
    if saved:
        return redirect(url_for('admin.collection_list', collection_name=collection.name))

    return render_template('admin/collection_form.html', collection=collection, form=form, item=item)


@admin_bp.route('/<collection_name>/<item_id>/delete', methods=['POST'])
@admin_required
def collection_delete(collection_name, item_id):
    collection = _collection_or_404(collection_name)
    try:
        AdminService.delete_item(collection, item_id, viewer_token())
        flash(f'{collection.label} deleted successfully!', 'success')
    except ApiError as e:
        current_app.logger.error(f"Error deleting {collection.label} {item_id}: {str(e)}")
        flash(f'Failed to delete {collection.label.lower()}.', 'error')

    return redirect(url_for('admin.collection_list', collection_name=collection.name))


# Inboxes

@admin_bp.route('/inbox/<kind>')
@admin_required
def inbox(kind):
    """Contact messages, consultations or workshop enrollments, filterable by status."""
    box = _inbox_or_404(kind)
    status = request.args.get('status') or None

    try:
        items = AdminService.list_inbox(box, viewer_token(), status=status)
    except ApiError as e:
        current_app.logger.error(f"Error loading {box.name}: {str(e)}")
        flash(f'Unable to load {box.label.lower()}.', 'error')
        items = []

    return render_template('admin/inbox.html', inbox=box, items=items, status=status)


@admin_bp.route('/inbox/<kind>/<item_id>/status', methods=['POST'])
@admin_required
def inbox_status(kind, item_id):
    box = _inbox_or_404(kind)
    status = request.form.get('status', '')

    try:
        AdminService.set_inbox_status(box, item_id, status, viewer_token())
        flash(f'Status updated to {status}.', 'success')
    except ValueError as e:
        flash(str(e), 'error')
    except ApiError as e:
        current_app.logger.error(f"Error updating {box.name} {item_id}: {str(e)}")
        flash('Failed to update status.', 'error')

    return redirect(url_for('admin.inbox', kind=box.name))


@admin_bp.route('/inbox/<kind>/<item_id>/delete', methods=['POST'])
@admin_required
def inbox_delete(kind, item_id):
    box = _inbox_or_404(kind)
    try:
        AdminService.delete_inbox_item(box, item_id, viewer_token())
        flash('Deleted successfully.', 'success')
    except ApiError as e:
        current_app.logger.error(f"Error deleting {box.name} {item_id}: {str(e)}")
        flash('Failed to delete.', 'error')

    return redirect(url_for('admin.inbox', kind=box.name))


@admin_bp.route('/leads')
@admin_required
def leads():
    try:
        items = AdminService.list_leads(viewer_token())
    except ApiError as e:
        current_app.logger.error(f"Error loading leads: {str(e)}")
        flash('Unable to load leads.', 'error')
        items = []

    return render_template('admin/leads.html', leads=items)


# Course resources and schedules

@admin_bp.route('/resources', methods=['GET', 'POST'])
@admin_required
def resources():
    """Resources of the course picked with ``?course=``, plus the add form."""
    token = viewer_token()
    course_id = request.args.get('course', '')
    courses = _load_courses()

    form = ResourceForm()
    if request.method == 'GET':
        form.course_id.data = course_id

    if course_id and _save_record(form, lambda payload: AdminService.create_resource(payload, token),
                                  'Resource added successfully!'):
        return redirect(url_for('admin.resources', course=course_id))

    items = []
    if course_id:
        try:
            items = AdminService.list_resources(course_id, token)
        except ApiError as e:
            current_app.logger.error(f"Error loading resources: {str(e)}")
            flash('Unable to load resources.', 'error')

    return render_template('admin/resources.html', courses=courses, course_id=course_id,
                           resources=items, form=form)


@admin_bp.route('/resources/<resource_id>/edit', methods=['GET', 'POST'])
@admin_required
def resource_edit(resource_id):
    token = viewer_token()
    course_id = request.args.get('course', '')

    try:
        record = next((r for r in AdminService.list_resources(course_id, token)
                       if str(r.get('_id')) == resource_id), None)
    except ApiError as e:
        current_app.logger.error(f"Error loading resource {resource_id}: {str(e)}")
        flash('Unable to load resource.', 'error')
        return redirect(url_for('admin.resources', course=course_id))

    if record is None:
        abort(404)

    form = ResourceForm.from_record(record) if request.method == 'GET' else ResourceForm()
    if _save_record(form, lambda payload: AdminService.update_resource(resource_id, payload, token),
                    'Resource updated successfully!'):
        return redirect(url_for('admin.resources', course=course_id))

    return render_template('admin/record_form.html', title='Edit Resource', form=form,
                           back_url=url_for('admin.resources', course=course_id))


@admin_bp.route('/resources/<resource_id>/delete', methods=['POST'])
@admin_required
def resource_delete(resource_id):
    course_id = request.form.get('course', '')
    try:
        AdminService.delete_resource(resource_id, viewer_token())
        flash('Resource deleted successfully!', 'success')
    except ApiError as e:
        current_app.logger.error(f"Error deleting resource {resource_id}: {str(e)}")
        flash('Failed to delete resource.', 'error')

    return redirect(url_for('admin.resources', course=course_id))


@admin_bp.route('/schedules', methods=['GET', 'POST'])
@admin_required
def schedules():
    """Live class schedules of the course picked with ``?course=``."""
    token = viewer_token()
    course_id = request.args.get('course', '')
    courses = _load_courses()

    form = ScheduleForm()
    if request.method == 'GET':
        form.course_id.data = course_id

    if course_id and _save_record(form, lambda payload: AdminService.create_schedule(payload, token),
                                  'Schedule created successfully!'):
        return redirect(url_for('admin.schedules', course=course_id))

    items = []
    if course_id:
        try:
            items = AdminService.list_schedules(course_id, token)
        except ApiError as e:
            current_app.logger.error(f"Error loading schedules: {str(e)}")
            flash('Unable to load schedules.', 'error')

    return render_template('admin/schedules.html', courses=courses, course_id=course_id,
                           schedules=items, form=form)


@admin_bp.route('/schedules/<schedule_id>/edit', methods=['GET', 'POST'])
@admin_required
def schedule_edit(schedule_id):
    token = viewer_token()
    course_id = request.args.get('course', '')

    try:
        record = next((s for s in AdminService.list_schedules(course_id, token)
                       if str(s.get('_id')) == schedule_id), None)
    except ApiError as e:
        current_app.logger.error(f"Error loading schedule {schedule_id}: {str(e)}")
        flash('Unable to load schedule.', 'error')
        return redirect(url_for('admin.schedules', course=course_id))

    if record is None:
        abort(404)

    form = ScheduleForm.from_record(record) if request.method == 'GET' else ScheduleForm()
    if _save_record(form, lambda payload: AdminService.update_schedule(schedule_id, payload, token),
                    'Schedule updated successfully!'):
        return redirect(url_for('admin.schedules', course=course_id))

    return render_template('admin/record_form.html', title='Edit Schedule', form=form,
                           back_url=url_for('admin.schedules', course=course_id))


@admin_bp.route('/schedules/<schedule_id>/delete', methods=['POST'])
@admin_required
def schedule_delete(schedule_id):
    course_id = request.form.get('course', '')
    try:
        AdminService.delete_schedule(schedule_id, viewer_token())
        flash('Schedule deleted successfully!', 'success')
    except ApiError as e:
        current_app.logger.error(f"Error deleting schedule {schedule_id}: {str(e)}")
        flash('Failed to delete schedule.', 'error')

    return redirect(url_for('admin.schedules', course=course_id))


# Manual enrollments

@admin_bp.route('/enrollments/manual', methods=['GET', 'POST'])
@admin_required
def manual_enrollments():
    token = viewer_token()
    courses = _load_courses()

    form = ManualEnrollmentForm()
    form.course_id.choices = course_choices(courses)

    if _save_record(form, lambda payload: AdminService.create_manual_enrollment(payload, token),
                    'Student enrolled successfully!'):
        return redirect(url_for('admin.manual_enrollments'))

    try:
        enrollments = AdminService.list_manual_enrollments(token)
    except ApiError as e:
        current_app.logger.error(f"Error loading manual enrollments: {str(e)}")
        flash('Unable to load enrollments.', 'error')
        enrollments = []

    return render_template('admin/manual_enrollments.html', enrollments=enrollments, form=form)


@admin_bp.route('/enrollments/<enrollment_id>/edit', methods=['GET', 'POST'])
@admin_required
def enrollment_edit(enrollment_id):
    token = viewer_token()
    courses = _load_courses()

    try:
        record = next((e for e in AdminService.list_manual_enrollments(token)
                       if str(e.get('_id')) == enrollment_id), None)
    except ApiError as e:
        current_app.logger.error(f"Error loading enrollment {enrollment_id}: {str(e)}")
        flash('Unable to load enrollment.', 'error')
        return redirect(url_for('admin.manual_enrollments'))

    if record is None:
        abort(404)

    form = ManualEnrollmentForm.from_record(record) if request.method == 'GET' else ManualEnrollmentForm()
    form.course_id.choices = course_choices(courses)

    if _save_record(form, lambda payload: AdminService.update_enrollment(enrollment_id, payload, token),
                    'Enrollment updated successfully!'):
        return redirect(url_for('admin.manual_enrollments'))

    return render_template('admin/record_form.html', title='Edit Enrollment', form=form,
                           back_url=url_for('admin.manual_enrollments'))


@admin_bp.route('/enrollments/<enrollment_id>/delete', methods=['POST'])
@admin_required
def enrollment_delete(enrollment_id):
    try:
        AdminService.delete_enrollment(enrollment_id, viewer_token())
        flash('Enrollment removed.', 'success')
    except ApiError as e:
        current_app.logger.error(f"Error deleting enrollment {enrollment_id}: {str(e)}")
        flash('Failed to remove enrollment.', 'error')

    return redirect(url_for('admin.manual_enrollments'))


# Calendar

@admin_bp.route('/calendar', methods=['GET', 'POST'])
@admin_required
def calendar():
    """Events for the chosen day (``?date=YYYY-MM-DD``, default today)."""
    token = viewer_token()
    selected = request.args.get('date') or date_cls.today().isoformat()
    courses = _load_courses()

    form = EventForm()
    form.course_id.choices = course_choices(courses, placeholder='No course')
    if request.method == 'GET':
        form.date.data = selected

    if _save_record(form, lambda payload: AdminService.create_event(payload, token),
                    'Event created successfully!'):
        return redirect(url_for('admin.calendar', date=form.date.data or selected))

    events = AdminService.events_on(selected, token)
    return render_template('admin/calendar.html', events=events, selected=selected, form=form)


# Free courses

@admin_bp.route('/free-courses')
@admin_required
def free_courses():
    """Courses offered for free, and the rest of the catalog to pick from."""
    courses = _load_courses()

    try:
        free = AdminService.list_free_courses(viewer_token())
    except ApiError as e:
        current_app.logger.error(f"Error loading free courses: {str(e)}")
        free = [c for c in courses if c.get('isFree')]

    free_ids = {str(c.get('_id')) for c in free}
    others = [c for c in courses if not c.get('isFree') and str(c.get('_id')) not in free_ids]

    return render_template('admin/free_courses.html', free_courses=free, courses=others)


@admin_bp.route('/free-courses/<course_id>/toggle', methods=['POST'])
@admin_required
def toggle_free_course(course_id):
    currently_free = request.form.get('is_free') == 'true'

    try:
        AdminService.set_course_free(course_id, not currently_free, viewer_token())
        flash('Course removed from free courses' if currently_free else 'Course marked as free!', 'success')
    except ApiError as e:
        current_app.logger.error(f"Error toggling free course {course_id}: {str(e)}")
        flash('Failed to update course', 'error')

    return redirect(url_for('admin.free_courses'))


# Attendance

@admin_bp.route('/attendance', methods=['GET', 'POST'])
@admin_required
def attendance():
    """Monthly attendance grid for ``?course=`` (``?month=YYYY-MM``) and the marking form."""
    token = viewer_token()
    course_id = request.args.get('course', '')
    today = date_cls.today()
    month = request.args.get('month') or today.strftime('%Y-%m')

    try:
        year, month_number = parse_month(month)
    except ValueError:
        flash('Invalid month, showing the current month.', 'error')
        year, month_number = today.year, today.month
        month = today.strftime('%Y-%m')

    courses = _load_courses()
    students = []
    if course_id:
        try:
            students = AdminService.course_students(course_id, token)
        except ApiError as e:
            current_app.logger.error(f"Error loading students for {course_id}: {str(e)}")
            flash('Unable to load students.', 'error')

    form = AttendanceForm()
    form.student_id.choices = student_choices(students)
    if request.method == 'GET':
        form.course_id.data = course_id
        form.date.data = today.isoformat()

    if course_id and _save_record(form, lambda payload: AdminService.mark_attendance(payload, token),
                                  'Attendance saved.'):
        return redirect(url_for('admin.attendance', course=course_id, month=(form.date.data or month)[:7]))

    records = []
    if course_id:
        try:
            records = AdminService.attendance_for_month(course_id, year, month_number, token)
        except ApiError as e:
            current_app.logger.error(f"Error loading attendance for {course_id}: {str(e)}")
            flash('Unable to load attendance.', 'error')

    days, rows, stats = AdminService.attendance_grid(students, records, year, month_number)
    return render_template('admin/attendance.html', courses=courses, course_id=course_id, month=month,
                           days=days, rows=rows, stats=stats, form=form)
