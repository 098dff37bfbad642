"""di_conformance package entry point."""

import sys


def run(args):
    """Execute di-conformance."""
    from .commands import run_command  # noqa

    if len(args) > 1 and args[1] and args[1][0] != "-":
        command = args[1]
        args = args[2:]
    else:
        command = None
        args = args[1:]

    run_command(command, args)


def main(args):
    """Execute default entry point."""
    if __name__ == "__main__":
        run(args)


main(sys.argv)
