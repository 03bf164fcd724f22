"""Batch runner: discover files and process them on a thread pool.

Files are independent: each worker builds its own source model and shares
only the read-only rule registry. Results are collected in completion order
and re-sorted by path, so output does not depend on scheduling.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from . import config, engine
from .errors import ParseFailure
from .fixer import fix_source
from .models import Outcome, RunResult
from .parser import SKIP_DIRS, Parser, SwiftTokenizer
from .registry import RuleRegistry
from .source_model import SourceModel

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    results: List[RunResult] = field(default_factory=list)
    interrupted: bool = False

    @property
    def outcome(self) -> Outcome:
        outcomes = {result.outcome for result in self.results}
        if self.interrupted or Outcome.TOOL_ERROR in outcomes:
            return Outcome.TOOL_ERROR
        if Outcome.VIOLATIONS_REMAIN in outcomes:
            return Outcome.VIOLATIONS_REMAIN
        if Outcome.FIXED in outcomes:
            return Outcome.FIXED
        return Outcome.CLEAN

    @property
    def fixes_applied(self) -> int:
        return sum(result.fixes_applied for result in self.results)


def discover_files(paths: Iterable[Path]) -> List[Path]:
    """Expand *paths* into the sorted list of Swift files to check.

    Directories are walked recursively, skipping build and VCS folders.
    Files named explicitly are always included, whatever their extension.
    """
    found = set()
    for path in paths:
        if path.is_file():
            found.add(path)
            continue
        if not path.is_dir():
            logger.warning("Skipping %s: not a file or directory", path)
            continue
        for file_path in sorted(path.rglob("*")):
            if file_path.suffix not in config.SUPPORTED_EXTENSIONS or not file_path.is_file():
                continue
            if any(part in SKIP_DIRS for part in file_path.relative_to(path).parts[:-1]):
                continue
            found.add(file_path)
    return sorted(found, key=str)


def process_file(
    path: Path,
    registry: RuleRegistry,
    parser: Optional[Parser] = None,
    fix: bool = False,
    write: bool = True,
) -> RunResult:
    """Check (and optionally fix) one file. Never raises for per-file errors."""
    parser = parser or SwiftTokenizer()
    result = RunResult(path=str(path))
    try:
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.info("Cannot read %s: %s", path, exc)
        result.violations.append(engine.tool_diagnostic(engine.TOOL_READ_FAILURE, f"Cannot read file: {exc}"))
        return result
    result.original_text = text

    try:
        if fix:
            outcome = fix_source(path, text, registry, parser)
            result.violations = outcome.violations
            result.fixed = outcome.fixed
            result.fixes_applied = outcome.fixes_applied
            result.passes = outcome.passes
            result.final_text = outcome.text
        else:
            model = SourceModel.build(path, text, parser)
            result.violations = engine.check(model, registry)
            result.final_text = text
    except ParseFailure as exc:
        logger.info("Cannot parse %s: %s", path, exc)
        result.violations = [engine.tool_diagnostic(
            engine.TOOL_PARSE_FAILURE, f"Cannot parse file: {exc.reason}",
            line=exc.line, column=exc.column, offset=exc.offset,
        )]
        result.final_text = text
        return result

    if fix and write and result.changed:
        path.write_bytes(result.final_text.encode("utf-8"))
        logger.info("Fixed %s (%d fix(es) in %d pass(es))", path, result.fixes_applied, result.passes)
    return result


def run(
    paths: Sequence[Path],
    registry: RuleRegistry,
    fix: bool = False,
    write: bool = True,
    jobs: Optional[int] = None,
    parser: Optional[Parser] = None,
) -> BatchResult:
    """Process every file under *paths* concurrently.

    A ``KeyboardInterrupt`` cancels pending work; files already finished are
    kept and the batch is marked interrupted.
    """
    files = discover_files(paths)
    parser = parser or SwiftTokenizer()
    jobs = jobs or registry.options.jobs or config.available_parallelism()
    batch = BatchResult()
    lock = threading.Lock()
    logger.info("Checking %d file(s) with %d worker(s)", len(files), jobs)

    executor = ThreadPoolExecutor(max_workers=max(1, jobs))
    futures = {}
    try:
        for file_path in files:
            futures[executor.submit(process_file, file_path, registry, parser, fix, write)] = file_path
        for future in as_completed(futures):
            try:
                result = future.result()
            except Exception as exc:
                logger.exception("Unexpected error while processing %s", futures[future])
                result = RunResult(path=str(futures[future]), violations=[
                    engine.tool_diagnostic(engine.TOOL_INTERNAL_ERROR, f"Internal error: {exc}")
                ])
            with lock:
                batch.results.append(result)
    except KeyboardInterrupt:
        logger.warning("Interrupted; %d of %d file(s) processed", len(batch.results), len(files))
        batch.interrupted = True
        for future in futures:
            future.cancel()
    finally:
        executor.shutdown(wait=True)

    batch.results.sort(key=lambda r: r.path)
    return batch
