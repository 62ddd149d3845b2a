"""
The main entry point for smartypub.
"""
import sys
import logging


def main():
    """Runs the CLI, turning unexpected errors into a logged failure and exit status 1."""
    log = logging.getLogger("smartypub")

    try:
        from .cli import run_cli
        status = run_cli()
    except Exception:
        log.exception("A critical error occurred while running the CLI.")
        sys.exit(1)
    sys.exit(status)


if __name__ == '__main__':
    main()
