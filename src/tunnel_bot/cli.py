"""Main CLI entry point for tunnel-bot."""

import logging
import os
import signal
import sys
from pathlib import Path
from types import FrameType

import typer
from dotenv import load_dotenv

from tunnel_bot import __version__
from tunnel_bot.auth import IdentityGate
from tunnel_bot.bot import TunnelBot
from tunnel_bot.config import BotConfig, load_config
from tunnel_bot.constants import (
    DEFAULT_STATUS_API_URL,
    EXIT_CODE_FAILURE,
    EXIT_CODE_INTERRUPTED,
)
from tunnel_bot.exceptions import ConfigurationError, StatusFetchError, TransportError
from tunnel_bot.logging_config import configure_logging
from tunnel_bot.router import ConversationRouter
from tunnel_bot.settings import BotSettings
from tunnel_bot.telegram.client import TelegramClient
from tunnel_bot.tunnel import ProcessController, TunnelStatusClient, format_endpoints
from tunnel_bot.utils import (
    console,
    print_error,
    print_info,
    print_panel,
    print_success,
    print_warning,
)

# Load .env file from current directory if it exists
load_dotenv(Path.cwd() / ".env", verbose=False)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="tunnel-bot",
    help="Control a tunneling agent (ngrok) from a Telegram chat.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

CONFIG_OPTION_HELP = "Path to the YAML/JSON config file (default: $TUNNEL_BOT_CONFIG_FILE or config.yaml)"


def _load_config(config_file: Path | None) -> BotConfig:
    """Load configuration or exit with a failure code."""
    settings = BotSettings()
    path = config_file or settings.config_file
    try:
        return load_config(path, api_token=settings.api_token)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CODE_FAILURE) from e


def build_bot(config: BotConfig, client: TelegramClient) -> TunnelBot:
    """Wire the components together from one immutable config."""
    status_client = TunnelStatusClient(api_url=config.status_api_url, verbose=config.verbose)
    controller = ProcessController(
        agent_binary=config.agent_binary,
        status_client=status_client,
        settle_delay=config.settle_delay,
    )
    router = ConversationRouter(config.profiles, controller)
    gate = IdentityGate(config.allowed_ids)
    return TunnelBot(client, gate, router, monitor_interval=config.monitor_interval)


def _exit_on_signal(signum: int, frame: FrameType | None) -> None:
    # The agent runs in its own session and is deliberately left running
    logger.info(f"Received {signal.Signals(signum).name}, exiting")
    logging.shutdown()
    os._exit(EXIT_CODE_FAILURE)


def _install_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _exit_on_signal)
    signal.signal(signal.SIGTERM, _exit_on_signal)


@app.command("run")
def run(
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=CONFIG_OPTION_HELP,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (overrides is_verbose in the config file)",
    ),
) -> None:
    """Start the bot and poll Telegram for commands.

    Runs until interrupted. Any running tunnel is left up when the bot exits.
    """
    config = _load_config(config_file)
    configure_logging(verbose=verbose or config.verbose, log_file=config.log_file)
    _install_signal_handlers()

    with TelegramClient(config.api_token) as client:
        bot = build_bot(config, client)
        try:
            bot.start()
        except TransportError as e:
            logger.error(f"Failed to get info of the bot: {e}")
            print_error(str(e))
            raise typer.Exit(code=EXIT_CODE_FAILURE) from e
        bot.run_forever()


@app.command("check-config")
def check_config(
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=CONFIG_OPTION_HELP,
    ),
) -> None:
    """Validate the config file and print a summary."""
    config = _load_config(config_file)

    print_success("Configuration is valid")
    print_info(f"Agent binary: {config.agent_binary}")
    if config.allowed_ids:
        print_info(f"Allowed ids: {', '.join(sorted(config.allowed_ids))}")
    else:
        print_warning("No allowed ids: every message will be ignored")
    if config.profiles:
        for profile in config.profiles:
            console.print(f"  [bold]{profile.label}[/bold]: {' '.join(profile.arguments)}")
    else:
        print_info("No tunnel profiles configured")
    print_info(
        f"Launch delay: {config.settle_delay:g}s, monitor interval: {config.monitor_interval:g}s"
    )


@app.command("status")
def status(
    url: str | None = typer.Option(
        None,
        "--url",
        help=f"Tunneling agent status API URL (default: {DEFAULT_STATUS_API_URL})",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Read tunnels_api_url from this config file",
    ),
) -> None:
    """Show the tunnels currently reported by the local agent."""
    if url is None:
        url = _load_config(config_file).status_api_url if config_file else DEFAULT_STATUS_API_URL
    try:
        endpoints = TunnelStatusClient(api_url=url).fetch_status()
    except StatusFetchError as e:
        print_error(e.message)
        raise typer.Exit(code=EXIT_CODE_FAILURE) from e
    console.print(format_endpoints(endpoints))


@app.command("version")
def version() -> None:
    """Show version information."""
    print_panel(
        f"[bold cyan]tunnel-bot[/bold cyan] version [green]{__version__}[/green]",
        title="Version",
        style="cyan",
    )


def cli_main() -> None:
    """Main entry point for the 'tunnel-bot' command."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(EXIT_CODE_INTERRUPTED)
    except Exception as e:
        if isinstance(e, typer.Exit):
            sys.exit(e.exit_code)
        print_error(f"Error: {e}")
        sys.exit(EXIT_CODE_FAILURE)


if __name__ == "__main__":
    cli_main()
