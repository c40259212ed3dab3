"""
Command-line interface for the stored procedure schema reporter.

Runs a stored procedure, describes its result set and prints either a
pipe-delimited schema dump or a generated T-SQL load script.
"""

import argparse
import io
import logging
import sys
from typing import List, Optional, TextIO

from .. import __version__
from ..core.executor import ProcedureExecutor
from ..core.invocation import ProcedureCall
from ..core.renderers import RawSchemaRenderer, ScriptRenderer
from ..errors import SchemaReporterError, UsageError
from ..utils.db_config import DatabaseConfig

logger = logging.getLogger(__name__)

PROG = "StoredProcSchema"


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    """Build the command line parser."""
    p = ArgumentParser(
        prog=PROG,
        description="Console app to report the schema of a stored proc result")

    p.add_argument("-c", "--connection-string", dest="connection_string",
                   help="Connection string to use")
    p.add_argument("-s", "--stored-proc", dest="stored_proc", required=True,
                   help="Stored proc to execute")
    p.add_argument("-p", "--param", dest="params", action="append", default=[],
                   metavar="NAME|VALUE", help="Stored proc parameters (repeatable)")

    # Script output
    p.add_argument("-os", "--output-script", dest="output_script", action="store_true",
                   help="Output a table, table type and load proc script instead of the schema")
    p.add_argument("-sc", "--output-schema", dest="output_schema",
                   help="Schema for the generated objects (required with --output-script)")
    p.add_argument("-n", "--output-name", dest="output_name",
                   help="Base name for the generated objects (required with --output-script)")

    p.add_argument("-e", "--env", dest="env",
                   help="Path to .env file with CONNECTION_STRING (used when -c is omitted)")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Log progress to stderr")
    p.add_argument("--version", action="version", version=f"{PROG} {__version__}")

    return p


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments.

    Returns:
        Tuple of (namespace, unrecognized arguments)
    """
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    validate_args(args)
    return args, extras


def validate_args(args: argparse.Namespace):
    """Check option combinations argparse cannot express."""
    if not args.connection_string and not args.env:
        raise UsageError("the following arguments are required: -c/--connection-string")

    if args.output_script:
        missing = []
        if not args.output_schema:
            missing.append("-sc/--output-schema")
        if not args.output_name:
            missing.append("-n/--output-name")
        if missing:
            raise UsageError(f"--output-script requires {', '.join(missing)}")


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr)


def run(argv: Optional[List[str]] = None, stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None) -> int:
    """Run the reporter and return the process exit code."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    try:
        args, extras = parse_args(argv)
        configure_logging(args.verbose)
        if extras:
            logger.warning("Ignoring unexpected argument(s): %s", " ".join(extras))

        call = ProcedureCall.from_tokens(args.stored_proc, args.params)
        config = DatabaseConfig(args.connection_string, env_path=args.env)
        config.load_config()

        result = ProcedureExecutor(db_config=config).describe(call)

        # Render fully before writing so a failure never leaves partial output
        buffer = io.StringIO()
        if args.output_script:
            ScriptRenderer(buffer, args.output_schema, args.output_name).render(result.columns)
        else:
            RawSchemaRenderer(buffer).render(result)
        stdout.write(buffer.getvalue())
        stdout.flush()
        return 0

    except UsageError as e:
        stderr.write(build_parser().format_help())
        print(f"Error: {e}", file=stderr)
        return e.exit_code
    except SchemaReporterError as e:
        print(f"Error: {e}", file=stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=stderr)
        return 1


def main():
    """Main CLI function."""
    sys.exit(run())


if __name__ == "__main__":
    main()
