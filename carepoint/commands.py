# /carepoint/commands.py
import click
from flask.cli import with_appcontext

from carepoint.extensions import db
from carepoint.container import services
from carepoint.models.staff_models import DEFAULT_DEPARTMENTS, DEFAULT_HOSPITAL, StaffRole
from carepoint.utils.errors import ServiceError


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the documents table and seed the default hospital and departments."""
    db.create_all()

    hospitals = services.hospitals_repo.find_all()
    if hospitals:
        hospital = hospitals[0]
    else:
        hospital = services.directory.create_hospital(DEFAULT_HOSPITAL)
        click.echo(f"Created hospital '{hospital['name']}'")

    existing = {dept['name'] for dept in services.departments_repo.find_all()}
    for dept in DEFAULT_DEPARTMENTS:
        if dept['name'] not in existing:
            services.directory.create_department({**dept, 'hospitalId': hospital['id']})
            click.echo(f"Created department '{dept['name']}'")

    click.echo('Database initialized.')


@click.command('create-staff')
@click.option('--email', prompt=True)
@click.option('--first-name', prompt=True)
@click.option('--last-name', prompt=True)
@click.option('--role', type=click.Choice(StaffRole.ALL), default=StaffRole.MANAGER, show_default=True)
@click.option('--department-id', default=None)
@click.password_option()
@with_appcontext
def create_staff_command(email, first_name, last_name, role, department_id, password):
    """Create a staff account (e.g. the first Manager)."""
    try:
        staff = services.auth.register_staff({
            'email': email,
            'firstName': first_name,
            'lastName': last_name,
            'role': role,
            'departmentId': department_id,
            'password': password,
        })
    except ServiceError as e:
        raise click.ClickException(e.message)
    click.echo(f"Created {staff['role']} {staff['email']} ({staff['id']})")


@click.command('repair-health-records')
@with_appcontext
def repair_health_records_command():
    """Finish registrations whose health record was never created."""
    repaired = services.patients.repair_provisional_patients()
    for patient_id in repaired:
        click.echo(f"Repaired patient {patient_id}")
    click.echo(f"{len(repaired)} patient(s) repaired.")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(create_staff_command)
    app.cli.add_command(repair_health_records_command)
