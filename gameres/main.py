"""Command-line entry point for the game resource resolver.

This module provides:
- Command-line argument parsing
- Service wiring (configuration, HTTP client, cache, resolver)
- Human-readable rendering of download plans and errors
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from gameres.models import (
    VOICE_LANGUAGE_CODES,
    VOICE_LANGUAGE_LABELS,
    AppConfig,
    DownloadGameResource,
    GameBiz,
    VoiceLanguage,
    iter_voice_languages,
)
from gameres.services.config import ConfigurationService
from gameres.services.errors import ConfigurationError, get_error_service
from gameres.services.game_resource import GameResourceService
from gameres.services.http_client import HttpClientService
from gameres.services.launcher_client import LauncherClient
from gameres.services.logging import setup_logging
from gameres.services.profiles import parse_game_biz
from gameres.services.resource_cache import RemoteResourceCache

log = structlog.stdlib.get_logger()

VERSION = "0.1.0"


class ApplicationContext:
    """Container for application services, created lazily."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path: Path | None = config_path
        self._config_service: ConfigurationService | None = None
        self._http_client: HttpClientService | None = None
        self._game_resource: GameResourceService | None = None
        self._config: AppConfig | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            self._http_client = HttpClientService(
                timeout=self.config.request_timeout,
                verify_ssl=self.config.verify_ssl,
            )
        return self._http_client

    @property
    def game_resource(self) -> GameResourceService:
        if self._game_resource is None:
            cache = RemoteResourceCache(LauncherClient(self.http_client), ttl=self.config.cache_ttl)
            self._game_resource = GameResourceService(self.config_service, cache)
        return self._game_resource

    def resolve_install_path(self, biz: GameBiz, path: Path | None) -> Path:
        """Explicit path, else the configured one."""
        if path is not None:
            return path
        configured = self.game_resource.get_game_install_path(biz)
        if configured is None:
            raise ConfigurationError(
                f"No install path configured for {biz.value}. Pass --path or run set-path first.",
                setting=f"install_paths.{biz.value}",
            )
        return configured

    async def cleanup(self) -> None:
        if self._http_client is not None:
            await self._http_client.close()


def parse_voice_languages(value: str) -> VoiceLanguage:
    """Parse a comma separated list of language codes (``zh-cn,ja-jp``) or labels."""
    languages = VoiceLanguage(0)
    for item in filter(None, (part.strip() for part in value.split(","))):
        for language in VoiceLanguage:
            if item.lower() in (VOICE_LANGUAGE_CODES[language], VOICE_LANGUAGE_LABELS[language].lower()):
                languages |= language
                break
        else:
            raise argparse.ArgumentTypeError(f"unknown voice language: {item}")
    return languages


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gameres",
        description="Work out what a game installation needs to download to become current",
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/gameres/config.json)",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from configuration)",
    )
    _ = parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_game_command(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        _ = sub.add_argument("biz", type=parse_game_biz, help="Game identity, e.g. hk4e_global")
        _ = sub.add_argument("--path", type=Path, default=None, help="Install directory")
        return sub

    add_game_command("check", "Show the download plan of an installation")
    add_game_command("ready", "Tell whether the pre-download is fully staged")
    add_game_command("version", "Show local, latest and pre-download versions")
    voices = add_game_command("voices", "Show or change installed voice languages")
    _ = voices.add_argument(
        "--set",
        dest="languages",
        type=parse_voice_languages,
        default=None,
        help="Comma separated languages to record, e.g. zh-cn,ja-jp",
    )

    set_path = subparsers.add_parser("set-path", help="Remember the install directory of a game")
    _ = set_path.add_argument("biz", type=parse_game_biz)
    _ = set_path.add_argument("path", type=Path)

    return parser


def format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def render_plan(plan: DownloadGameResource | None) -> str:
    if plan is None:
        return "Game is up to date."
    lines = []
    states = ([plan.game] if plan.game else []) + plan.voices
    for state in states:
        lines.append(
            f"{state.name}: {format_size(state.downloaded_size)} / {format_size(state.package_size)}"
            f" (unpacked {format_size(state.decompressed_size)})"
        )
    lines.append(f"Remaining: {format_size(plan.remaining_size)}")
    lines.append(f"Free space: {format_size(plan.free_space)}")
    if not plan.has_enough_space:
        lines.append("Warning: not enough free space for the remaining downloads.")
    return "\n".join(lines)


async def run_command(context: ApplicationContext, args: argparse.Namespace) -> str:
    service = context.game_resource
    biz: GameBiz = args.biz

    if args.command == "set-path":
        path = args.path.absolute()
        service.set_game_install_path(biz, path)
        return f"Install path for {biz.value} set to {path}"

    install_path = context.resolve_install_path(biz, args.path)

    if args.command == "check":
        return render_plan(await service.check_download_game_resource(biz, install_path))

    if args.command == "ready":
        ready = await service.check_pre_download_is_ok(biz, install_path)
        return "Pre-download complete." if ready else "Pre-download not complete."

    if args.command == "version":
        local = await service.get_game_local_version(biz, install_path)
        latest, pre_download = await service.get_game_resource_version(biz)
        return "\n".join([
            f"Local: {local or 'not installed'}",
            f"Latest: {latest or 'unknown'}",
            f"Pre-download: {pre_download or 'none'}",
        ])

    if args.languages is not None:
        await service.set_voice_language(biz, install_path, args.languages)
    languages = await service.get_voice_language(biz, install_path)
    labels = [VOICE_LANGUAGE_LABELS[lang] for lang in iter_voice_languages(languages)]
    return ", ".join(labels) if labels else "No voice languages installed."


async def run(context: ApplicationContext, args: argparse.Namespace) -> int:
    try:
        print(await run_command(context, args))
        return 0
    except Exception as e:
        error_service = get_error_service()
        path = getattr(args, "path", None)
        friendly = error_service.handle_error(
            e,
            operation=args.command,
            component="cli",
            context={"path": str(path)} if path else None,
        )
        print(error_service.create_user_message(friendly), file=sys.stderr)
        return 1
    finally:
        await context.cleanup()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    context = ApplicationContext(config_path=args.config)

    # Configured before the config file is read so its load is logged too
    _ = setup_logging(log_level=args.log_level or "INFO", log_dir=args.log_dir)
    if args.log_level is None and context.config.log_level != "INFO":
        _ = setup_logging(log_level=context.config.log_level, log_dir=args.log_dir)
    log.debug("Starting gameres", version=VERSION, command=args.command)

    try:
        exit_code = asyncio.run(run(context, args))
    except KeyboardInterrupt:
        log.info("Interrupted by user")
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
