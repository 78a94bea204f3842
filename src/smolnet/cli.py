"""CLI interface using typer."""

import asyncio
import logging

import typer

from .config import settings
from .core import SmallnetFetcher
from .errors import IdentityError
from .identity import IdentityStore
from .navigation import NavigationOutcome, NavigationState, NavigationStep, Navigator
from .registry import Protocol
from .render import LinkAction, render_page

POLL_INTERVAL = 0.05

app = typer.Typer(
    name="smolnet",
    help="Client for Gemini, Gopher, Spartan, Nex and other small-internet protocols",
    no_args_is_help=True,
)
identity_app = typer.Typer(help="Manage client certificates used for mutual TLS")
app.add_typer(identity_app, name="identity")


def _navigator(store: IdentityStore) -> Navigator:
    fetcher = SmallnetFetcher(timeout=settings.timeout, identity_provider=store)
    return Navigator(
        fetcher,
        max_redirects=settings.max_redirects,
        language=settings.scroll_language,
    )


def _show(step: NavigationStep) -> list[LinkAction]:
    """Print the page of a settled step and return its links."""
    if step.url is not None:
        typer.echo(f"URL: {step.url}")
    typer.echo("---")
    if step.page is None:
        return []
    lines, links = render_page(step.page)
    for line in lines:
        typer.echo(line)
    return links


async def _ask(prompt: str, sensitive: bool = False) -> str:
    return await asyncio.to_thread(
        typer.prompt, prompt or "Input", default="", show_default=False, hide_input=sensitive
    )


async def _settle(navigator: Navigator, step: NavigationStep) -> NavigationStep:
    """Poll the current job until the navigation (and its redirects) settles."""
    while navigator.state == NavigationState.FETCHING:
        polled = navigator.poll()
        if polled is not None:
            step = polled
            if step.outcome == NavigationOutcome.REDIRECTED:
                typer.echo(f"Redirecting to {step.url}")
            continue
        await asyncio.sleep(POLL_INTERVAL)
    return step


async def _answer_input(navigator: Navigator, step: NavigationStep) -> NavigationStep:
    while step.outcome == NavigationOutcome.INPUT_REQUESTED:
        request = step.input_request
        text = await _ask(request.prompt, request.sensitive)
        step = await _settle(navigator, navigator.submit_input(text))
    return step


async def _activate(navigator: Navigator, link: LinkAction) -> NavigationStep:
    if link.prompt is not None:
        text = await _ask(link.prompt)
        return navigator.submit_prompt(link.target, text)
    return navigator.follow(link.target, plaintext=link.plaintext)


def _commands(navigator: Navigator) -> str:
    """Prompt listing the commands available from the current page."""
    commands = ["[number] follow"]
    if navigator.history.can_go_back():
        commands.append("b back")
    if navigator.history.can_go_forward():
        commands.append("f forward")
    commands.extend(["r reload", "g URL", "q quit"])
    return ", ".join(commands)


async def _browse(url: str, store: IdentityStore):
    """Interactive session loop."""
    navigator = _navigator(store)
    step = navigator.navigate(url)

    while True:
        step = await _settle(navigator, step)
        step = await _answer_input(navigator, step)
        links = _show(step)

        command = (await _ask(_commands(navigator))).strip()
        if command in ("q", "quit"):
            return
        if command == "b":
            step = navigator.back()
        elif command == "f":
            step = navigator.forward()
        elif command == "r":
            step = navigator.reload()
        elif command.startswith("g "):
            step = navigator.navigate(command[2:].strip())
        elif command.isdigit() and 1 <= int(command) <= len(links):
            step = await _activate(navigator, links[int(command) - 1])
        elif "://" in command:
            step = navigator.navigate(command)
        else:
            typer.echo(f"Unknown command: {command}", err=True)
            step = NavigationStep(NavigationOutcome.IDLE, url=navigator.current_url, page=navigator.page)


async def _fetch(url: str, plaintext: bool, store: IdentityStore) -> NavigationStep:
    """Navigate once, following redirects and answering input prompts."""
    navigator = _navigator(store)
    step = navigator.navigate(url, Protocol.PLAINTEXT if plaintext else None)
    step = await _settle(navigator, step)
    return await _answer_input(navigator, step)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug output to stderr"),
):
    """Small-internet client."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def browse(
    url: str = typer.Option(settings.start_url, "-u", "--url", help="Starting URL"),
):
    """Browse interactively starting from a URL."""
    store = IdentityStore(settings.identity_db)
    try:
        asyncio.run(_browse(url, store))
    finally:
        store.close()


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL to fetch"),
    plaintext: bool = typer.Option(False, "-p", "--plaintext", help="Show the body literally"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only output content"),
):
    """Fetch a single URL and print the page."""
    store = IdentityStore(settings.identity_db)
    try:
        step = asyncio.run(_fetch(url, plaintext, store))
    finally:
        store.close()

    if quiet:
        lines, _ = render_page(step.page) if step.page is not None else ([], [])
        typer.echo("\n".join(lines))
    else:
        links = _show(step)
        if links:
            typer.echo("---")
            for number, link in enumerate(links, 1):
                typer.echo(f"[{number}] {link.target}")

    if step.outcome == NavigationOutcome.ERROR:
        raise typer.Exit(code=1)


@identity_app.command("list")
def identity_list():
    """List stored identities."""
    store = IdentityStore(settings.identity_db)
    try:
        identities = store.list_identities()
    finally:
        store.close()

    if not identities:
        typer.echo("No identities. Create one with: smolnet identity new NAME")
    for identity in identities:
        marker = "*" if identity.active else " "
        typer.echo(f"{marker} {identity.name}")


@identity_app.command("new")
def identity_new(
    name: str = typer.Argument(..., help="Name (certificate common name) for the identity"),
):
    """Create a new identity and make it active."""
    store = IdentityStore(settings.identity_db)
    try:
        store.create_identity(name)
    except IdentityError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    finally:
        store.close()
    typer.echo(f"Created identity {name}")


@identity_app.command("use")
def identity_use(
    name: str = typer.Argument(..., help="Identity to present to servers"),
):
    """Make an identity the active one."""
    store = IdentityStore(settings.identity_db)
    try:
        store.set_active(name)
    except IdentityError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    finally:
        store.close()
    typer.echo(f"Active identity: {name}")


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"smolnet {__version__}")


if __name__ == "__main__":
    app()
