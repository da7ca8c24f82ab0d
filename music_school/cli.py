# cli.py
"""
Flask CLI commands for operating the site against its REST API.
"""

import json

import click
from flask import current_app
from flask.cli import with_appcontext

from music_school.extensions import api_client, reconciler, check_api_health
from music_school.services.catalog_service import CatalogService
from music_school.services.validation import FORM_RULES, validate_values, build_payload


@click.command("check-api")
@with_appcontext
def check_api():
    """Ping the external API's health endpoint."""
    healthy, message = check_api_health()
    base_url = current_app.config['API_BASE_URL']

    if healthy:
        click.echo(f"✓ {base_url}: {message}")
    else:
        click.echo(f"✗ {base_url}: {message}", err=True)
        raise SystemExit(1)


@click.command("list-courses")
@click.option("--level", default="all", help="Only show courses of this level")
@with_appcontext
def list_courses(level):
    """
    List catalog courses.

    Example usage:
        flask list-courses
        flask list-courses --level Beginner
    """
    courses, live = CatalogService.load_courses()
    if not live:
        click.echo("API unavailable, showing demo courses", err=True)

    courses = CatalogService.filter_by_level(courses, level)
    if not courses:
        click.echo("No courses found")
        return

    currency = current_app.config['CURRENCY_SYMBOL']
    for card in reconciler.course_cards(courses, frozenset(), currency):
        click.echo(f"{str(card.course_id):<26} {card.course.get('title', ''):<30} "
                   f"{card.course.get('level') or 'All Levels':<14} {card.price_label or '-'}")

    click.echo(f"\n{len(courses)} course(s)")


@click.command("enrolled-courses")
@click.option("--token", required=True, envvar="VIEWER_TOKEN", help="Viewer's bearer token")
@with_appcontext
def enrolled_courses(token):
    """Print the course ids a viewer is enrolled in."""
    ids = reconciler.fetch_enrolled_ids(True, lambda: token)
    if not ids:
        click.echo("No enrollments found (or the lookup failed)")
        return

    for course_id in sorted(ids):
        click.echo(course_id)


@click.command("validate-form")
@click.argument("form_name")
@click.argument("fields", nargs=-1)
@with_appcontext
def validate_form(form_name, fields):
    """
    Run a form's validation rules against field=value pairs.

    Example usage:
        flask validate-form contact name=Asha email=asha@example.com subject=Hi message="Hello there"
    """
    rules = FORM_RULES.get(form_name)
    if rules is None:
        click.echo(f"Error: Unknown form. Valid options are: {', '.join(sorted(FORM_RULES))}", err=True)
        raise SystemExit(2)

    values = {}
    for pair in fields:
        if '=' not in pair:
            click.echo(f"Error: expected field=value, got '{pair}'", err=True)
            raise SystemExit(2)
        name, value = pair.split('=', 1)
        values[name] = value

    errors = validate_values(rules, values)
    if errors:
        for name, message in errors.items():
            click.echo(f"{name}: {message}")
        raise SystemExit(1)

    click.echo(json.dumps(build_payload(rules, values), indent=2))


def register_cli_commands(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(check_api)
    app.cli.add_command(list_courses)
    app.cli.add_command(enrolled_courses)
    app.cli.add_command(validate_form)

    app.shell_context_processor(lambda: {'api_client': api_client, 'reconciler': reconciler})
