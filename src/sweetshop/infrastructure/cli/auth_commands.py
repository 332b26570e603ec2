"""CLI commands for accounts and sessions."""

from __future__ import annotations

import click

from sweetshop.application.dto import AuthResultDTO
from sweetshop.application.login import LoginHandler
from sweetshop.application.register_account import RegisterAccountHandler
from sweetshop.infrastructure.bootstrap import (
    account_repository,
    password_hasher,
    token_service,
)
from sweetshop.infrastructure.cli.options import current_settings, run


def _register_handler() -> RegisterAccountHandler:
    config = current_settings()
    return RegisterAccountHandler(
        account_repo=account_repository(config),
        password_hasher=password_hasher(config),
        token_service=token_service(config),
    )


def _echo_session(result: AuthResultDTO) -> None:
    click.echo(f"Logged in as {result.username} <{result.email}> (role={result.role})")
    click.echo(f"Token: {result.token}")


@click.command("register")
@click.option("--username", required=True, help="Unique login name.")
@click.option("--email", required=True, help="Unique email address.")
@click.password_option(help="Account password.")
def auth_register(username: str, email: str, password: str) -> None:
    """Register a customer account."""
    result = run(lambda: _register_handler().handle(username, email, password))
    _echo_session(result)


@click.command("register-manager")
@click.option("--username", required=True, help="Unique login name.")
@click.option("--email", required=True, help="Unique email address.")
@click.password_option(help="Account password.")
def auth_register_manager(username: str, email: str, password: str) -> None:
    """Register a manager account."""
    result = run(lambda: _register_handler().handle_manager(username, email, password))
    _echo_session(result)


@click.command("login")
@click.option("--username", required=True, help="Login name.")
@click.option("--password", prompt=True, hide_input=True, help="Account password.")
def auth_login(username: str, password: str) -> None:
    """Log in and print a session token."""

    def login():
        config = current_settings()
        handler = LoginHandler(
            account_repo=account_repository(config),
            password_hasher=password_hasher(config),
            token_service=token_service(config),
        )
        return handler.handle(username, password)

    _echo_session(run(login))
