import logging
import subprocess

import click

from portfolio_generator.app.api.routes.route_logic.user_crud import (
    delete_user as delete_user_record,
)
from portfolio_generator.app.api.routes.route_logic.user_crud import get_user_by_email
from portfolio_generator.app.database.database import create_tables, get_session_local

log = logging.getLogger(__name__)


@click.group()
def cli():
    """Management script for the Portfolio Generator application."""
    pass


@cli.command("init-db")
def init_db():
    """
    Create any missing database tables from the model definitions.

    Notes:
        1. Calls `create_tables`, which leaves existing tables untouched.
        2. Prints a success message or an error message.

    """
    _msg = "init_db starting"
    log.debug(_msg)
    click.echo("Creating database tables...")
    try:
        create_tables()
        _success_msg = "Database tables created."
        click.echo(_success_msg)
        log.info(_success_msg)
    except Exception as e:
        _error_msg = f"An error occurred while creating tables: {e}"
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
    _msg = "init_db returning"
    log.debug(_msg)


def _run_alembic(arguments: list[str], failure: str) -> bool:
    """
    Run an Alembic subcommand from the project root.

    Args:
        arguments (list[str]): Arguments passed to the `alembic` executable.
        failure (str): Prefix of the message printed when the command fails.

    Returns:
        bool: True if the command exited successfully.

    Notes:
        1. Alembic reads `alembic.ini`, whose env resolves `DATABASE_URL` from the settings.
        2. A non-zero exit or a missing executable is reported on stderr, not raised.

    """
    command = ["alembic", *arguments]
    _msg = f"Running {' '.join(command)}"
    log.debug(_msg)
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError as e:
        _error_msg = f"{failure}: {e}"
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
        return False
    except FileNotFoundError:
        _error_msg = "Error: 'alembic' command not found. Make sure Alembic is installed and in your PATH."
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
        return False
    return True


@cli.command("generate-migration")
@click.option(
    "-m",
    "--message",
    required=True,
    help="A short message describing the schema change.",
)
def generate_migration(message: str):
    """Autogenerate a migration from the difference between the models and the database."""
    click.echo("Generating new migration...")
    if _run_alembic(
        ["revision", "--autogenerate", "-m", message],
        failure="An error occurred while generating migration",
    ):
        _success_msg = f"Successfully generated new migration: {message}"
        click.echo(_success_msg)
        log.info(_success_msg)


@cli.command("apply-migrations")
def apply_migrations():
    """Upgrade the database to the latest migration."""
    click.echo("Applying database migrations...")
    if _run_alembic(
        ["upgrade", "head"],
        failure="An error occurred while applying migrations",
    ):
        _success_msg = "Successfully applied all migrations."
        click.echo(_success_msg)
        log.info(_success_msg)


@cli.command("delete-user")
@click.option("--email", required=True, help="Email address of the account to delete.")
@click.confirmation_option(
    prompt="This deletes the account and its portfolio. Continue?",
)
def delete_user(email: str):
    """
    Delete an account together with its portfolio.

    Args:
        email (str): The email address of the account to delete.

    Notes:
        1. Establishes a database connection.
        2. Looks the account up by email; reports an error if it does not exist.
        3. Deletes it; the portfolio row is removed by the cascade.
        4. Stored photo files are left on disk.

    """
    _msg = "delete_user starting"
    log.debug(_msg)

    db_session_local = get_session_local()
    db = db_session_local()
    try:
        user = get_user_by_email(db, email)
        if user is None:
            _error_msg = f"No account found for '{email}'."
            click.echo(_error_msg, err=True)
            log.warning(_error_msg)
        else:
            delete_user_record(db, user)
            _success_msg = f"Account '{email}' deleted."
            click.echo(_success_msg)
            log.info(_success_msg)
    except Exception as e:
        _error_msg = f"Error deleting account: {e}"
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
    finally:
        db.close()

    _msg = "delete_user returning"
    log.debug(_msg)


def main():
    """Run the command line interface."""
    cli()


if __name__ == "__main__":
    main()
