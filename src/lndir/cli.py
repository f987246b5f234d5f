from typing import Optional, Tuple

import click

from lndir import __version__
from lndir.config import Config
from lndir.errors import CaseFileError, ConfigurationError
from lndir.paths import build_request
from lndir.symlinkmirror import link_mirror
from lndir.testcase import load_test_suite, run_test_suite

CONFIG = Config()


@click.command()
@click.version_option(version=__version__, prog_name="lndir", message="%(prog)s %(version)s")
@click.option(
    "-s",
    "--suffix",
    multiple=True,
    help='Append the text SUFFIX to each link in TO_DIR. Given "--suffix -v7", the file "FROM_DIR/foo" is linked '
    'as "TO_DIR/foo-v7" and "FROM_DIR/foo.txt" as "TO_DIR/foo-v7.txt".',
)
@click.option("-q", "--quiet", is_flag=True, default=False, help="Do not list the directories being linked.")
@click.option("--show-config", is_flag=True, default=False, help="Print the configuration and exit.")
@click.argument("from_dir", required=False)
@click.argument("to_dir", required=False)
@click.pass_context
def lndir(
    ctx: click.Context,
    suffix: Tuple[str, ...],
    quiet: bool,
    show_config: bool,
    from_dir: Optional[str],
    to_dir: Optional[str],
) -> None:
    """
    Create a shadow directory of symlinks to another directory tree.

    TO_DIR is made a shadow copy of the FROM_DIR tree, populated with symbolic links pointing at the real files in
    FROM_DIR rather than with copies. TO_DIR defaults to the current directory.
    """

    if show_config:
        click.echo(CONFIG)
        return

    if len(suffix) > 1:
        raise click.UsageError("--suffix option specified more than once.")
    _suffix = suffix[0] if suffix else CONFIG.suffix

    try:
        request = build_request(from_dir or "", to_dir, _suffix)
    except ConfigurationError as err:
        raise click.UsageError(str(err)) from err

    result = link_mirror(request, indent=CONFIG.indent, quiet=quiet or CONFIG.quiet)

    if not result.ok:
        click.secho(f"Error: {len(result.failures)} entries could not be linked", fg="red", err=True)
        if CONFIG.fail_on_partial:
            ctx.exit(1)


@click.command()
@click.option(
    "--subprocess",
    "use_subprocess",
    is_flag=True,
    default=False,
    help="Run each case through the lndir executable instead of in-process.",
)
@click.option("-d", "--directory", default=None, help="Where to look for .test files when none are named.")
@click.option("-w", "--workdir", default=".", help="Directory the fixture trees are built in.")
@click.argument("testcases", nargs=-1)
@click.pass_context
def run_testcases(
    ctx: click.Context, use_subprocess: bool, directory: Optional[str], workdir: str, testcases: Tuple[str, ...]
) -> None:
    """
    Run the lndir testcases. Each TESTCASE names a .test file; the extension may be left off. With no TESTCASE,
    every .test file in the testcase directory is run.
    """

    try:
        suite = load_test_suite(testcases, directory or CONFIG.testcase_dir)
    except CaseFileError as err:
        click.secho(f"\nERROR: {err}", fg="red", err=True)
        click.secho("ERROR: Could not load the testcases from the filesystem", fg="red", err=True)
        ctx.exit(1)

    ctx.exit(run_test_suite(suite, workdir=workdir, use_subprocess=use_subprocess))
