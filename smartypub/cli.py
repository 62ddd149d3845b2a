"""
Handles command-line argument parsing and initiates processing.
This is the entry point for the console script.
"""
import argparse
import logging
import sys
from pathlib import Path

from .core.batch_processor import BatchProcessor
from .core.pipeline import ProcessingPipeline, InputFile
from .utils.config import ProcessingConfig, Action
from .utils.logger import setup_main_logger


# Get logger (will be configured in run_cli)
log = logging.getLogger("smartypub")

INPUT_SUFFIXES = {".html", ".htm", ".xhtml", ".md"}


def non_negative_int(value):
    """Checks if value is an int >= 0."""
    ivalue = int(value)
    if ivalue < 0:
        raise argparse.ArgumentTypeError(f"Value must be 0 or greater, got {ivalue}")
    return ivalue


def action_choice(value):
    """Maps an action name to an Action."""
    try:
        return Action[value.upper()]
    except KeyError:
        choices = ", ".join(a.name.lower() for a in Action)
        raise argparse.ArgumentTypeError(f"Action must be one of: {choices}, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartypub",
        description="Educates ASCII punctuation in HTML into typographic quotes, dashes and ellipses.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input_paths", type=Path, nargs="+",
                        help="Input files or/and folders separated by a space. Use - to read stdin and write stdout.")
    parser.add_argument("-m", "--mode", default="1",
                        help="Rules to apply: 0 (none), 1 (all), 2 (old school dashes), 3 (inverted old school dashes) "
                             "or a combination of the flags q, b, B, d, D, i, e, w.")
    parser.add_argument("-a", "--action", type=action_choice, default=Action.SMARTEN,
                        help="smarten: ASCII to typographic, normalize: canonical code points, stupefy: back to ASCII.")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output folder or filename (for single input). If omitted, each output is placed next to the input file.")
    parser.add_argument("--in-place", action="store_true",
                        help="Overwrite input files.")
    parser.add_argument("--suffix", default=".smart",
                        help="Inserted before the extension of outputs placed next to their input.")
    parser.add_argument("--threads", type=non_negative_int, default=0,
                        help="Number of parallel worker processes to use. 0 to use max.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Show more log output on the console (-v info, -vv debug).")
    parser.add_argument("--no-log-file", action="store_true",
                        help="Do not write a log file under ./logs.")
    return parser


def _is_under(path: Path, folder: Path) -> bool:
    return folder == path or folder in path.parents


def collect_files(paths: list[Path], pipeline: ProcessingPipeline | None = None) -> list[InputFile]:
    """
    Expands folders into the documents they contain, skipping missing paths.

    Each file is listed once, however many of the inputs lead to it. When a
    pipeline is given, folder scans leave out what that pipeline writes: files
    carrying its output suffix and anything inside its output folder.
    """
    output_dir = None
    if pipeline is not None and pipeline.config.output_path is not None:
        output_dir = pipeline.config.output_path.resolve()

    files_to_process: dict[Path, InputFile] = {}
    for path in paths:
        if not path.exists():
            log.warning(f"Input path does not exist, skipping: {path}")
            continue
        if path.is_dir():
            for found in sorted(path.rglob("*")):
                if not found.is_file() or found.suffix.lower() not in INPUT_SUFFIXES:
                    continue
                if pipeline is not None and pipeline.is_output_name(found):
                    log.debug(f"Skipping earlier output: {found}")
                    continue
                resolved = found.resolve()
                if output_dir is not None and _is_under(resolved, output_dir):
                    log.debug(f"Skipping file in the output folder: {found}")
                    continue
                files_to_process.setdefault(resolved, InputFile(found, path))
        elif path.is_file() and path.suffix.lower() in INPUT_SUFFIXES:
            files_to_process.setdefault(path.resolve(), InputFile(path))
        else:
            log.warning(f"Unsupported file type, skipping: {path}")
    return list(files_to_process.values())


def _console_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.ERROR


def run_cli(argv: list[str] | None = None) -> int:
    """
    The main function for the command-line interface.
    Parses arguments and runs the processing. Returns the exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    console_level = _console_level(args.verbose)
    setup_main_logger(console_level, log_dir=None if args.no_log_file else Path("./logs"))
    log.info(f"Console logger set to level: {logging.getLevelName(console_level)}")

    config = ProcessingConfig(
        mode=args.mode,
        action=args.action,
        output_path=args.output,
        in_place=args.in_place,
        suffix=args.suffix,
        num_threads=args.threads,
    )

    if [str(p) for p in args.input_paths] == ["-"]:
        sys.stdout.write(ProcessingPipeline(config).process_text(sys.stdin.read()))
        return 0

    files_to_process = collect_files(args.input_paths, ProcessingPipeline(config))
    if not files_to_process:
        log.warning("No supported files found to process.")
        return 0

    num_files = len(files_to_process)
    log.info(f"Found {num_files} files. Starting...")

    failed = 0
    completed_count = 0
    def progress_callback(path: Path, result: Path | None, exc: Exception | None):
        nonlocal completed_count, failed
        completed_count += 1
        completed_str = str(completed_count).rjust(len(str(num_files)))
        prefix = f"[{completed_str}/{num_files}]"
        if exc:
            failed += 1
            print(f"{prefix} Error: {path.name}", flush=True)
            print(f"  └─ {exc}", flush=True)
            # The file log already has the full trace from the worker
            log.error(f"Failed to process {path.name}: {exc}", exc_info=False)
        else:
            print(f"{prefix} Done: {path.name} -> {result}", flush=True)

    BatchProcessor(config).run(files_to_process, progress_callback)

    print(f"\nBatch finished: {num_files - failed} done, {failed} failed.")
    return 1 if failed else 0
