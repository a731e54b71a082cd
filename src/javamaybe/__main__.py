"""CLI entry point: run `javamaybe -i src -o out` or `python -m javamaybe -i src -o out`."""

import logging
import sys
from typing import Optional, Sequence


def main(argv: Optional[Sequence[str]] = None) -> int:
    from .compiler.driver import CompilerDriver
    from .compiler.options import build_type_solver, parse_options
    from .shared.errors import ConfigurationError

    try:
        options = parse_options(argv)
    except ConfigurationError as e:
        sys.stderr.write(f"javamaybe: error: {e}\n")
        return 1

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        type_solver = build_type_solver(options)
    except ConfigurationError as e:
        sys.stderr.write(f"javamaybe: error: {e}\n")
        return 1

    result = CompilerDriver(type_solver).run(options.input_path, options.output_dir)
    if not result.success:
        if result.reporter.has_errors():
            sys.stderr.write(result.reporter.format_all_errors() + "\n")
        else:
            sys.stderr.write("javamaybe: processing failed\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
