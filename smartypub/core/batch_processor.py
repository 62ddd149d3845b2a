"""
Handles the parallel processing of a batch of files.
This class contains the ProcessPoolExecutor and is used by the CLI.
"""
import logging
import os
import concurrent.futures
from pathlib import Path
from typing import Callable

from .pipeline import ProcessingPipeline, InputFile
from ..utils.config import ProcessingConfig
from ..utils.logger import setup_worker_logger

# The main logger is configured by the entry point (CLI)
# We just get it here to write high-level status updates from the main process
log = logging.getLogger("smartypub")

WorkerResult = tuple[Path, Path | None, str, Exception | None]


def _process_single_file(path: Path, config: ProcessingConfig, single_input: bool,
                         root: Path | None = None) -> WorkerResult:
    """
    A standalone function to be the target for the executor.
    It runs the pipeline on a single file and captures all its log output.

    Returns:
        tuple[Path, Path | None, str, Exception | None]:
            - The path of the processed file.
            - The path the result was written to, or None on failure.
            - The captured log output as a string.
            - An exception object if one occurred, else None.
    """
    # Set up in-memory logging for this worker process
    log_stream, log_handler = setup_worker_logger()
    worker_log = logging.getLogger("smartypub")

    try:
        worker_log.info(f"Processing: {path.name}")
        target = ProcessingPipeline(config).process(path, single_input, root)
        worker_log.info(f"Finished {path.name} -> {target}")
        return path, target, log_stream.getvalue(), None

    except Exception as e:
        # Full traceback goes to the worker's buffer, and from there to the log file
        worker_log.error(f"Failed processing: {path.name}", exc_info=True)

        # Exceptions must cross the process boundary, keep only a plain message
        safe_exc = RuntimeError(f"{type(e).__name__}: {e}")
        return path, None, log_stream.getvalue(), safe_exc

    finally:
        log_handler.close()
        log_stream.close()


class BatchProcessor:
    """Orchestrates the processing of multiple files in parallel."""

    def __init__(self, config: ProcessingConfig):
        self.config = config


    def max_workers(self, num_files: int) -> int:
        th = self.config.num_threads
        workers = th if th > 0 else (os.cpu_count() or 1)
        return max(1, min(workers, num_files))


    def _claim_targets(self, inputs: list[InputFile], single_input: bool) -> list[Exception | None]:
        """
        Works out every output path up front. A file whose output path was
        already claimed by an earlier file gets an error instead of a turn,
        so one result never overwrites another.
        """
        pipeline = ProcessingPipeline(self.config)
        claimed: dict[Path, int] = {}
        errors: list[Exception | None] = []

        for idx, item in enumerate(inputs):
            target = pipeline.output_path_for(item.path, single_input, item.root).resolve()
            owner = claimed.setdefault(target, idx)
            if owner == idx:
                errors.append(None)
            else:
                owner_path = inputs[owner].path
                log.warning(f"Output {target} of {item.path} is already written by {owner_path}")
                errors.append(RuntimeError(f"output {target} collides with {owner_path}"))
        return errors


    def run(self, files: list[Path | InputFile], progress_callback: Callable | None = None) -> list[WorkerResult]:
        """
        Processes a list of files in parallel using a ProcessPoolExecutor.

        Args:
            files: Paths, or InputFile records carrying the folder each file
                   was found under.
            progress_callback: A function to be called as each file completes.
                               It receives the (path, result, exception).

        Returns:
            One worker result per input, in the original file order.
        """
        if not files:
            return []

        inputs = [f if isinstance(f, InputFile) else InputFile(f) for f in files]
        max_workers = self.max_workers(len(inputs))
        log.info(f"Starting batch processing of {len(inputs)} files with up to {max_workers} workers.")
        single_input = len(inputs) == 1

        ordered_results: list[WorkerResult | None] = [None] * len(inputs)

        for idx, (item, exc) in enumerate(zip(inputs, self._claim_targets(inputs, single_input))):
            if exc is not None:
                ordered_results[idx] = (item.path, None, "", exc)
                if progress_callback:
                    progress_callback(item.path, None, exc)

        with concurrent.futures.ProcessPoolExecutor(max_workers) as executor:
            # Keyed by position, so the same path given twice still gets two results
            future_to_index = {
                executor.submit(_process_single_file, item.path, self.config, single_input, item.root): idx
                for idx, item in enumerate(inputs)
                if ordered_results[idx] is None
            }

            for future in concurrent.futures.as_completed(future_to_index):
                idx = future_to_index[future]
                path = inputs[idx].path

                try:
                    result = future.result()
                except Exception as e:
                    # A failure *in the worker itself* (e.g. the process died)
                    log.error(f"Critical worker failure for {path.name}: {e}", exc_info=True)
                    result = (path, None, f"CRITICAL FAILURE: {e}\n", e)

                ordered_results[idx] = result
                if progress_callback:
                    _, target, _, exc = result
                    progress_callback(path, target, exc)

        log.info("Batch processing complete. Writing ordered logs...")
        self._write_worker_logs(ordered_results)
        return [r for r in ordered_results if r is not None]


    def _write_worker_logs(self, ordered_results: list[WorkerResult | None]):
        """Copies each worker's buffered log into the main log file, in input order."""
        file_handler = next(
            (h for h in log.handlers if isinstance(h, logging.FileHandler)), None
        )
        if file_handler is None:
            return

        for result in ordered_results:
            if result is None:
                log.error("Missing result in ordered list.")
                continue

            path, _, log_string, _ = result
            if not log_string:
                continue
            try:
                file_handler.stream.write(f"\n--- Log for {path.name} ---\n")
                file_handler.stream.write(log_string)
                file_handler.stream.write(f"--- End log for {path.name} ---\n")
            except OSError as e:
                log.error(f"Failed to write buffered log for {path.name}: {e}")
