"""
Flask CLI commands

    flask --app run init-db
    flask --app run create-admin user@example.com
"""

import click

from extensions import db
from rentals.services.user_service import UserService


def register_commands(app):

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables first.')
    def init_db(drop):
        """Create the schema (tables, indexes, triggers) and the default admin."""
        if drop:
            click.confirm('This will permanently delete all data. Continue?', abort=True)
            db.drop_all()
            click.echo('Dropped all tables')

        db.create_all()
        click.echo('Schema created')

        admin, created = UserService.ensure_default_admin()
        if created:
            click.echo(f'Created default admin {admin.email}')
        else:
            click.echo(f'Admin already present: {admin.email}')

    @app.cli.command('create-admin')
    @click.argument('email')
    def create_admin(email):
        """Promote an existing user to admin."""
        user = UserService.promote_to_admin(email)
        if user is None:
            raise click.ClickException(f"User with email '{email}' not found")
        click.echo(f"Successfully made '{user.email}' an admin ({user.full_name})")
