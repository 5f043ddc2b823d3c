"""Authentication commands - login, signup, logout, whoami."""

import typer

from takify.services.app_context import get_app_context
from takify.utils.ui.console import get_console
from takify.utils.ui.formatters import format_info, format_success

from .decorators import command_wrapper

app = typer.Typer(help="Authentication commands")
console = get_console()


@app.command("login")
@command_wrapper(auth_required=False)
async def login(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="Password"
    ),
) -> None:
    """Sign in."""
    session = await get_app_context().auth_service.login(email, password)
    format_success(f"Logged in as {session.email or session.user_id}")


@app.command("signup")
@command_wrapper(auth_required=False)
async def signup(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(
        ...,
        "--password",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password",
    ),
) -> None:
    """Create an account and sign in."""
    session = await get_app_context().auth_service.signup(email, password)
    format_success(f"Account created for {session.email or session.user_id}")


@app.command("logout")
@command_wrapper(auth_required=False)
async def logout() -> None:
    """Sign out."""
    auth_service = get_app_context().auth_service
    if not auth_service.is_authenticated():
        format_info("Not logged in")
        return
    await auth_service.logout()
    format_success("Logged out")


@app.command("whoami")
@command_wrapper
def whoami() -> None:
    """Show the signed-in user."""
    session = get_app_context().session_provider.current
    console.print(f"[bold]{session.email or '-'}[/bold] ([dim]{session.user_id}[/dim])")
