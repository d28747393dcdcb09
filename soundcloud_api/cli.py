"""
Command-line interface for soundcloud-api.

This module implements the CLI using Click, with one command per API
operation. rich-click is used for the help output colors.

Commands:
    soundcloud me                              Authenticated user
    soundcloud user <id>                       A user
    soundcloud track <id> [--secret-token]     A track
    soundcloud tracks [--user <id>]            Tracks of a user
    soundcloud followings                      Users you follow
    soundcloud search <kind> <query>           Search tracks/playlists/users
    soundcloud resolve <url>                   Resource behind a soundcloud.com URL
    soundcloud stream-url <id>                 Signed media URL of a track
    soundcloud follow|unfollow <id>            Follow or unfollow a user
    soundcloud like|repost <id>                Like or repost a track
    soundcloud comment <id> <text>             Comment on a track
    soundcloud token                           Client credentials access token
    soundcloud refresh <refresh-token>         Refresh an access token
    soundcloud upload <title> <file>           Upload a track
    soundcloud delete <id>                     Delete a track

Configuration:
    The CLI reads config.yaml from the current directory (or --config):
    - SoundCloud credentials (client_id, client_secret)
    - Optional access token (overridden by --token)
    - HTTP base URL and timeout

Exit codes:
    0    Success
    1    Configuration error or unexpected error
    2    Local precondition failed (missing or oversize upload file)
    3    Request failed (transport, API or decode error)
    130  Interrupted
"""

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click
from tqdm import tqdm

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100

from soundcloud_api import __version__
from soundcloud_api.api import SoundCloudAPI
from soundcloud_api.core import (
    ApiError,
    Config,
    ConfigError,
    PreconditionError,
    SoundCloudAPIError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)

logger = get_logger(__name__)


SEARCH_KINDS = ("tracks", "playlists", "users")


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--token",
    type=str,
    default=None,
    metavar="<access-token>",
    help="OAuth access token, overrides config.yaml"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Also write log files to this directory"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show request details"
)
@click.version_option(__version__, prog_name="soundcloud-api")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    token: str | None,
    log_dir: Path | None,
    verbose: bool
) -> None:
    """
    soundcloud-api: Talk to the SoundCloud API from the command line.

    \b
    EXAMPLES:
        soundcloud track 42
        soundcloud search tracks "ambient drone"
        soundcloud --token 1-2345-abc upload "Demo" demo.mp3 --artwork cover.jpg
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["token"] = token
    ctx.obj["log_dir"] = log_dir
    ctx.obj["verbose"] = verbose


def _load_configuration(options: dict) -> Config:
    """
    Load config.yaml and apply the --token override.

    Raises:
        ConfigError: If the configuration is missing or invalid.
    """
    config = load_config(options["config_path"])
    if options["token"]:
        config = config.with_access_token(options["token"])
    return config


def _print_result(result: Any) -> None:
    if isinstance(result, str):
        click.echo(result)
    else:
        click.echo(json.dumps(result, indent=2, ensure_ascii=False))


def _run(options: dict, operation: Callable[[SoundCloudAPI, Config], Any]) -> None:
    """
    Execute one API operation and print its result.

    Loads configuration, sets up logging, builds the API from the
    configuration, runs the operation and maps errors to exit codes.

    Raises:
        SystemExit: On any failure (with appropriate exit code).
    """
    setup_logging(options["log_dir"], options["verbose"])

    try:
        config = _load_configuration(options)
        api = SoundCloudAPI(config.create_client())
        result = operation(api, config)
        _print_result(result)

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except PreconditionError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    except SoundCloudAPIError as e:
        status = f" {e.http_status}" if e.http_status is not None else ""
        click.echo(f"SoundCloud error ({e.kind.value}{status}): {e.message}", err=True)
        if isinstance(e, ApiError) and e.is_auth_error:
            click.echo("Check the access token (--token or config.yaml)", err=True)
        logger.debug(f"Error details: {e.details}")
        sys.exit(3)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


# =============================================================================
# Users
# =============================================================================

@cli.command()
@click.pass_obj
def me(options: dict) -> None:
    """Show the authenticated user."""
    _run(options, lambda api, config: api.get_user())


@cli.command()
@click.argument("user_id", type=int)
@click.pass_obj
def user(options: dict, user_id: int) -> None:
    """Show a user."""
    _run(options, lambda api, config: api.get_user(user_id))


@cli.command()
@click.pass_obj
def followings(options: dict) -> None:
    """List the users you follow."""
    _run(options, lambda api, config: api.get_followings())


@cli.command()
@click.argument("user_id", type=int)
@click.pass_obj
def follow(options: dict, user_id: int) -> None:
    """Follow a user."""
    _run(options, lambda api, config: api.follow_user(user_id))


@cli.command()
@click.argument("user_id", type=int)
@click.pass_obj
def unfollow(options: dict, user_id: int) -> None:
    """Unfollow a user."""
    _run(options, lambda api, config: api.unfollow_user(user_id))


# =============================================================================
# Tracks
# =============================================================================

@cli.command()
@click.argument("track_id", type=int)
@click.option("--secret-token", type=str, default=None, help="Secret token of a private track")
@click.pass_obj
def track(options: dict, track_id: int, secret_token: str | None) -> None:
    """Show a track."""
    _run(options, lambda api, config: api.get_track(track_id, secret_token))


@cli.command()
@click.option("--user", "user_id", type=int, default=None, help="User ID (default: you)")
@click.pass_obj
def tracks(options: dict, user_id: int | None) -> None:
    """List the tracks of a user."""
    _run(options, lambda api, config: api.get_tracks(user_id))


@cli.command("stream-url")
@click.argument("track_id", type=int)
@click.pass_obj
def stream_url(options: dict, track_id: int) -> None:
    """Print the signed media URL of a track (needs an access token)."""

    def operation(api: SoundCloudAPI, config: Config) -> str:
        url = api.get_stream_url(track_id)
        if url is None:
            raise ConfigError("An access token is required to resolve stream URLs")
        return url

    _run(options, operation)


@cli.command()
@click.argument("track_id", type=int)
@click.pass_obj
def like(options: dict, track_id: int) -> None:
    """Like a track."""
    _run(options, lambda api, config: api.like_track(track_id))


@cli.command()
@click.argument("track_id", type=int)
@click.pass_obj
def repost(options: dict, track_id: int) -> None:
    """Repost a track."""
    _run(options, lambda api, config: api.repost_track(track_id))


@cli.command()
@click.argument("track_id", type=int)
@click.argument("text", type=str)
@click.pass_obj
def comment(options: dict, track_id: int, text: str) -> None:
    """Comment on a track."""
    _run(options, lambda api, config: api.comment_on_track(track_id, text))


@cli.command()
@click.argument("title", type=str)
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--description", type=str, default="", help="Track description")
@click.option(
    "--artwork",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Artwork image"
)
@click.pass_obj
def upload(
    options: dict,
    title: str,
    file: Path,
    description: str,
    artwork: Path | None
) -> None:
    """Upload a track (max 500 MiB per file)."""

    def operation(api: SoundCloudAPI, config: Config) -> Any:
        logger.info(f"Uploading {file.name} as '{title}'")
        with tqdm(unit="B", unit_scale=True, unit_divisor=1024, desc=title, leave=False) as bar:
            result = api.upload_track(
                title,
                file,
                description=description,
                artwork_file_path=artwork or "",
                progress_callback=bar.update
            )
        logger.info("Upload complete")
        return result

    _run(options, operation)


@cli.command()
@click.argument("track_id", type=int)
@click.pass_obj
def delete(options: dict, track_id: int) -> None:
    """Delete a track."""
    _run(options, lambda api, config: api.delete_track(track_id))


# =============================================================================
# Search and resolve
# =============================================================================

@cli.command()
@click.argument("kind", type=click.Choice(SEARCH_KINDS))
@click.argument("query", type=str)
@click.pass_obj
def search(options: dict, kind: str, query: str) -> None:
    """Search tracks, playlists or users."""

    def operation(api: SoundCloudAPI, config: Config) -> Any:
        if kind == "tracks":
            return api.search_tracks(query)
        if kind == "playlists":
            return api.search_playlists(query)
        return api.search_users(query)

    _run(options, operation)


@cli.command()
@click.argument("url", type=str)
@click.pass_obj
def resolve(options: dict, url: str) -> None:
    """Show the API resource behind a soundcloud.com URL."""
    _run(options, lambda api, config: api.resolve_url(url))


# =============================================================================
# OAuth
# =============================================================================

def _require_client_secret(config: Config) -> str:
    if not config.soundcloud.client_secret:
        raise ConfigError(
            "'soundcloud.client_secret' is required for token requests",
            details={"field": "soundcloud.client_secret"}
        )
    return config.soundcloud.client_secret


@cli.command()
@click.pass_obj
def token(options: dict) -> None:
    """Request an access token with the client credentials grant."""
    _run(options, lambda api, config: api.authenticate(_require_client_secret(config)))


@cli.command()
@click.argument("refresh_token", type=str)
@click.pass_obj
def refresh(options: dict, refresh_token: str) -> None:
    """Exchange a refresh token for a new access token."""
    _run(
        options,
        lambda api, config: api.refresh_token(_require_client_secret(config), refresh_token)
    )


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `soundcloud` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
