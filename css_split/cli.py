"""
Command-line interface for css_split.

Splits stylesheet files on disk the same way the build plugin splits assets,
and reports selector counts for files that may need splitting.
"""

import click
import sys
from pathlib import Path
from typing import Optional, Tuple

from css_split import __version__
from css_split.config import PluginOptions, load_options
from css_split.core.base import CssSplitError
from css_split.core.counter import total_weight
from css_split.core.host import Compilation
from css_split.core.parser import parse_stylesheet
from css_split.core.partitioner import partition
from css_split.logging_config import (
    configure_logging, LogLevel, get_logger,
    user_success, user_error,
)
from css_split.plugin import CSSSplitPlugin

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-level', type=click.Choice(['silent', 'minimal', 'normal', 'verbose', 'debug']),
              help='Set specific log level')
@click.option('--log-file', type=click.Path(path_type=Path), help='Write logs to file')
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool, debug: bool,
         log_level: Optional[str], log_file: Optional[Path]) -> None:
    """
    css-split

    Split stylesheets into files under a maximum selector count.
    """
    ctx.ensure_object(dict)

    if debug:
        level = LogLevel.DEBUG
    elif log_level:
        level = LogLevel(log_level.lower())
    elif quiet:
        level = LogLevel.SILENT
    elif verbose:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.MINIMAL

    configure_logging(
        level=level,
        file_output=bool(log_file),
        log_file=log_file,
        console_output=not quiet,
        collect_performance=debug,
    )

    ctx.obj['verbose'] = verbose or debug
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('input_files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--out-dir', '-o', required=True, type=click.Path(file_okay=False, path_type=Path), help='Directory to write the files to')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='YAML or JSON options file')
@click.option('--size', '-s', type=click.IntRange(min=1), help='Maximum selectors per file')
@click.option('--imports/--no-imports', default=None, help='Write an imports manifest')
@click.option('--imports-name', help='Filename template for the imports manifest')
@click.option('--filename', help='Filename template for the split files')
@click.option('--preserve/--no-preserve', default=None, help='Keep the original file')
@click.option('--defer/--no-defer', default=None, help='Split at emit time')
@click.option('--public-path', default='', help='Public path used in the imports manifest')
@click.pass_context
def split(
    ctx: click.Context,
    input_files: Tuple[Path, ...],
    out_dir: Path,
    config: Optional[Path],
    size: Optional[int],
    imports: Optional[bool],
    imports_name: Optional[str],
    filename: Optional[str],
    preserve: Optional[bool],
    defer: Optional[bool],
    public_path: str
) -> None:
    """Split stylesheet files and write the results to OUT_DIR."""
    try:
        options = load_options(config) if config else PluginOptions()
        options = options.replace(
            size=size,
            imports=imports_name if imports_name else imports,
            filename=filename,
            preserve=preserve,
            defer=defer,
        )

        compilation = Compilation.from_files(input_files, public_path=public_path)
        CSSSplitPlugin(options).run(compilation)
        written = compilation.emit(out_dir)
    except (CssSplitError, FileNotFoundError) as e:
        user_error(str(e))
        sys.exit(1)

    for path in written:
        click.echo(str(path))
    if not ctx.obj.get('quiet'):
        user_success(f"Wrote {len(written)} files to {out_dir}")


@main.command()
@click.argument('input_files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--size', '-s', type=click.IntRange(min=1), default=4000, show_default=True, help='Maximum selectors per file')
def count(input_files: Tuple[Path, ...], size: int) -> None:
    """Print the selector count of each file and how many files it would split into."""
    for path in input_files:
        try:
            root = parse_stylesheet(path.read_text(encoding='utf-8'), source_path=path.name)
        except CssSplitError as e:
            user_error(str(e))
            sys.exit(1)
        chunks = partition(root, size)
        click.echo(f"{path}: {total_weight(root.nodes)} selectors, {len(chunks)} file(s)")
        logger.debug(f"Chunk weights for {path.name}: {[chunk.weight for chunk in chunks]}")


if __name__ == '__main__':
    main()
