"""
The single-file processing pipeline (Facade).

Reads a document, runs the configured action over it and writes the result.
"""
import logging
from pathlib import Path
from typing import NamedTuple

from ..utils.config import ProcessingConfig, Action
from .entities import normalize_entities, stupefy
from .smartypants import transform


log = logging.getLogger("smartypub")

_ACTIONS = {
    Action.SMARTEN: transform,
    Action.NORMALIZE: normalize_entities,
    Action.STUPEFY: stupefy,
}


class InputFile(NamedTuple):
    """A file to process and the input folder it was found under (None for files given directly)."""
    path: Path
    root: Path | None = None


class ProcessingPipeline:
    """
    A facade over the text rewriting functions.

    The CLI and the batch processor use it to convert strings and files
    according to a ProcessingConfig.
    """

    def __init__(self, config: ProcessingConfig):
        """Initializes the pipeline with a specific configuration."""
        self.config = config


    def process_text(self, text: str) -> str:
        """Applies the configured action to a string."""
        return _ACTIONS[self.config.action](text, self.config.mode)


    def output_path_for(self, source_path: Path, single_input: bool = False,
                        root: Path | None = None) -> Path:
        """
        Works out where the result for `source_path` goes:
        the source itself (in place), the output folder, the output filename
        (single input only), or next to the source with the suffix added.

        `root` is the input folder the source was found under. Inside the
        output folder the source keeps its path relative to it, so files with
        the same name in different subfolders stay apart.
        """
        cfg = self.config
        if cfg.in_place:
            return source_path

        if cfg.output_path is not None:
            if single_input and cfg.output_path.suffix and not cfg.output_path.is_dir():
                return cfg.output_path
            relative = source_path.relative_to(root) if root is not None else Path(source_path.name)
            return cfg.output_path / relative

        return source_path.with_name(f"{source_path.stem}{cfg.suffix}{source_path.suffix}")


    def is_output_name(self, path: Path) -> bool:
        """True if `path` looks like a result this config writes next to its input."""
        suffix = self.config.suffix
        return bool(suffix) and not self.config.in_place and path.stem.endswith(suffix)


    def process(self, source_path: Path, single_input: bool = False,
                root: Path | None = None) -> Path:
        """
        Processes a single file and returns the path it was written to.
        I/O and decoding errors propagate to the caller.
        """
        log.debug(f"Reading {source_path}")
        # newline='' keeps line endings as they are
        with open(source_path, encoding="utf-8", newline='') as f:
            text = f.read()

        result = self.process_text(text)

        target = self.output_path_for(source_path, single_input, root)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline='') as f:
            f.write(result)

        if result == text:
            log.info(f"No changes in {source_path.name}")
        log.debug(f"Wrote {target}")
        return target
