from __future__ import annotations
import asyncio
import logging
from pathlib import Path
import typer

from .bootstrap import build_app
from .config_loader import ConfigError
from .core.chat_session import ChatSession
from .core.errors import ProviderError

app = typer.Typer(add_completion=False)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build(config: Path):
    try:
        return build_app(config)
    except (ConfigError, FileNotFoundError, ProviderError) as e:
        typer.echo(f"[config] {e}", err=True)
        raise typer.Exit(code=2)


async def _print_turn(session: ChatSession, text: str, stream: bool) -> None:
    if stream:
        async for piece in session.run_turn_stream(text):
            typer.echo(piece, nl=False)
        typer.echo("")
    else:
        typer.echo(await session.run_turn(text))


@app.command()
def chat(
    config: Path = typer.Option(Path("config/default.yaml"), "--config"),
    log_level: str = typer.Option("WARNING", "--log-level"),
):
    _setup_logging(log_level)
    ctx = _build(config)
    cfg = ctx["cfg"]
    backend = ctx["backend"]

    try:
        asyncio.run(backend.health_check())
    except ProviderError as e:
        typer.echo(f"[config] {e}", err=True)
        raise typer.Exit(code=2)

    session = ChatSession(backend)
    use_stream = bool((cfg.get("runtime") or {}).get("stream", True))

    typer.echo(f"chatwire ({backend.name()}). Type /help for commands. Ctrl+C to quit.")
    while True:
        try:
            user_input = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            typer.echo("\nBye.")
            return

        if not user_input:
            continue

        if user_input in ("/exit", "/quit"):
            typer.echo("Bye.")
            return

        if user_input == "/help":
            typer.echo("Commands: /help, /reset, /exit, /quit")
            continue

        if user_input == "/reset":
            session.reset()
            typer.echo("[context cleared]")
            continue

        try:
            asyncio.run(_print_turn(session, user_input, use_stream))
        except KeyboardInterrupt:
            typer.echo("\n[stream interrupted]")
        except ProviderError as e:
            # Context stays at the last completed turn
            typer.echo(f"\n[error] {e}", err=True)


@app.command()
def models(
    config: Path = typer.Option(Path("config/default.yaml"), "--config"),
    log_level: str = typer.Option("WARNING", "--log-level"),
):
    _setup_logging(log_level)
    backend = _build(config)["backend"]
    try:
        names = asyncio.run(backend.list_models())
    except ProviderError as e:
        typer.echo(f"[error] {e}", err=True)
        raise typer.Exit(code=1)
    for n in names:
        typer.echo(n)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
