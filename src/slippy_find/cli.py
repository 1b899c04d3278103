"""Command line interface for slippy-find."""

import logging
import signal
import sys
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, NoReturn, Optional, TextIO

import click
from rich.console import Console

from . import __version__
from .config import (
    AppConfig,
    ConfigLoader,
    log_app_name_from_env,
    log_level_from_env,
)
from .exceptions import (
    NoAncestorSlipError,
    NoRemoteOriginError,
    RepositoryNotFoundError,
    SlipFindError,
)
from .git.accessor import RepositoryAccessor
from .git.repository import GitRepository
from .models import DEFAULT_ANCESTRY_DEPTH, ResolveInput
from .services.ancestry_walker import AncestryWalker
from .services.repository_context import RepositoryContext
from .services.slip_resolver import SlipResolver
from .store.base import SlipStore
from .store.clickhouse import ClickHouseSlipStore
from .utils.output_writer import OutputWriter

logger = logging.getLogger(__name__)


@dataclass
class Dependencies:
    """Injectable collaborators for the command.

    Production wiring comes from default_dependencies(); tests pass their
    own instance as the click context object.
    """

    config_loader: Callable[[], AppConfig]
    repository_factory: Callable[[str, Optional[float]], RepositoryAccessor]
    store_factory: Callable[[AppConfig], SlipStore]
    resolver_factory: Callable[[RepositoryAccessor, SlipStore, str], SlipResolver]
    output_writer_factory: Callable[[TextIO], OutputWriter]
    stdout: Optional[TextIO] = None
    stderr: Optional[TextIO] = None


def _build_resolver(
    repository: RepositoryAccessor, store: SlipStore, path: str
) -> SlipResolver:
    return SlipResolver(
        context=RepositoryContext(repository, path=path),
        walker=AncestryWalker(repository),
        finder=store,
    )


def _build_store(config: AppConfig) -> SlipStore:
    return ClickHouseSlipStore(
        config=config.clickhouse,
        database=config.database,
        pipeline_config=config.pipeline_config,
    )


def default_dependencies() -> Dependencies:
    """Production wiring: environment config, git CLI, ClickHouse, stdout."""
    return Dependencies(
        config_loader=lambda: ConfigLoader().load(),
        repository_factory=GitRepository,
        store_factory=_build_store,
        resolver_factory=_build_resolver,
        output_writer_factory=OutputWriter,
    )


def _configure_logging(verbose: bool, stream: TextIO) -> None:
    level_name = "debug" if verbose else log_level_from_env()
    level = getattr(logging, level_name.upper(), logging.INFO)
    app_name = log_app_name_from_env()

    # Diagnostics go to stderr; stdout carries only the correlation id
    logging.basicConfig(
        level=level,
        stream=stream,
        format=f"%(asctime)s %(levelname)s {app_name} %(name)s: %(message)s",
    )
    logging.getLogger("slippy_find").setLevel(level)

    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _install_cancel_handlers(cancel_event: threading.Event) -> Dict[int, Any]:
    """Turn SIGINT/SIGTERM into a cancellation request for the running resolve."""
    previous: Dict[int, Any] = {}
    if threading.current_thread() is not threading.main_thread():
        return previous

    def _handler(signum, frame):
        logger.warning(f"Received signal {signum}; cancelling slip resolution")
        cancel_event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.signal(signum, _handler)
    return previous


def _restore_signal_handlers(previous: Dict[int, Any]) -> None:
    for signum, handler in previous.items():
        if handler is not None:
            signal.signal(signum, handler)


def _fail(console: Console, message: str) -> NoReturn:
    console.print(f"❌ {message}", style="red", markup=False, highlight=False)
    sys.exit(1)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("path", required=False, default=".")
@click.option(
    "--depth",
    "-d",
    type=int,
    default=DEFAULT_ANCESTRY_DEPTH,
    show_default=True,
    help="Maximum ancestry depth to search for matching slips",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose/debug logging")
@click.version_option(version=__version__, prog_name="slippy-find")
@click.pass_context
def cli(ctx, path: str, depth: int, verbose: bool):
    """Resolve routing slips from local Git repository commit history.

    Walks the first-parent commit ancestry from HEAD and queries the slip
    store for a matching routing slip. On success only the correlation_id
    is written to stdout, for consumption by external systems.

    All git context (HEAD SHA, branch, repository name) is derived from the
    local repository. The repository name comes from the 'origin' remote URL.

    \b
    EXAMPLES:
      slippy-find                   # Resolve from the current directory
      slippy-find /path/to/repo     # Resolve from a specific path
      slippy-find --depth 50        # Search deeper into history
      slippy-find -v                # Verbose logging on stderr

    \b
    CONFIGURATION (environment):
      VAULT_PIPELINE_CONFIG_PATH    Vault secret with the pipeline config (path#key)
      VAULT_PIPELINE_CONFIG_MOUNT   Vault KV mount (default: secret)
      SLIPPY_PIPELINE_CONFIG        Local pipeline config file (used without Vault)
      CLICKHOUSE_HOSTNAME           Slip store host (plus CLICKHOUSE_PORT, ...)
      SLIPPY_DATABASE               Slip store database (default: ci)
      SLIPPY_GIT_TIMEOUT            Per-command git timeout in seconds
      LOG_LEVEL, LOG_APP_NAME       Logging settings
    """
    deps = ctx.obj if isinstance(ctx.obj, Dependencies) else default_dependencies()
    stdout = deps.stdout if deps.stdout is not None else sys.stdout
    stderr = deps.stderr if deps.stderr is not None else sys.stderr
    console = Console(file=stderr, soft_wrap=True)

    _configure_logging(verbose, stderr)
    logger.info(f"Starting slippy-find: path={path} depth={depth} verbose={verbose}")

    try:
        config = deps.config_loader()
    except SlipFindError as e:
        logger.error(f"Failed to load configuration: {e}")
        _fail(console, f"configuration error: {e}")

    try:
        repository = deps.repository_factory(path, config.git_timeout)
    except RepositoryNotFoundError as e:
        logger.error(f"Failed to open git repository: {e}")
        _fail(console, f"not a git repository: {path}")
    except SlipFindError as e:
        logger.error(f"Failed to open git repository: {e}")
        _fail(console, str(e))

    cancel_event = threading.Event()
    previous_handlers = _install_cancel_handlers(cancel_event)
    try:
        try:
            store = deps.store_factory(config)
        except Exception as e:
            logger.error(f"Failed to initialize slip store: {e}")
            _fail(console, f"database error: {e}")

        try:
            _resolve_and_write(
                deps, repository, store, path, depth, stdout, console, cancel_event
            )
        finally:
            try:
                store.close()
            except Exception as e:
                logger.warning(f"Failed to close slip store: {e}")
    finally:
        _restore_signal_handlers(previous_handlers)
        try:
            repository.close()
        except Exception as e:
            logger.warning(f"Failed to close git repository: {e}")


def _resolve_and_write(
    deps: Dependencies,
    repository: RepositoryAccessor,
    store: SlipStore,
    path: str,
    depth: int,
    stdout: TextIO,
    console: Console,
    cancel_event: threading.Event,
) -> None:
    resolver = deps.resolver_factory(repository, store, path)
    try:
        result = resolver.resolve(ResolveInput(depth=depth), cancel_event=cancel_event)
    except NoAncestorSlipError as e:
        logger.error(f"Failed to resolve slip: {e}")
        _fail(console, "no slip found in commit ancestry")
    except NoRemoteOriginError as e:
        logger.error(f"Failed to resolve slip: {e}")
        _fail(
            console,
            "no 'origin' remote configured; cannot determine repository name",
        )
    except SlipFindError as e:
        logger.error(f"Failed to resolve slip: {e}")
        _fail(console, str(e))

    writer = deps.output_writer_factory(stdout)
    try:
        writer.write_correlation_id(result.correlation_id)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to write output: {e}")
        _fail(console, f"output error: {e}")

    logger.info(
        f"Slip resolution complete: correlation_id={result.correlation_id} "
        f"matched_commit={result.matched_commit} "
        f"repository={result.repository_name} resolved_by={result.resolved_by}"
    )


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
