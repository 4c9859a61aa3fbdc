#!/usr/bin/env python

r"""
dedup.py - Find duplicate photos and videos and move them to quarantine

SUMMARY:
--------
This script scans a root directory holding one level of subdirectories of media files,
classifies every file by its leading bytes (JPEG, PNG, WEBM container, GIF or unknown),
fingerprints the content that matters for that format and moves every file whose
fingerprint was already seen earlier in the scan to a timestamped quarantine directory
next to the root, together with a log.json describing what was moved and why.

FEATURES:
---------
- Format detection from magic bytes, not from file extensions.
- JPEG fingerprints start at the Start-Of-Scan marker, so files that differ only in
  EXIF/thumbnail metadata are detected as duplicates.
- PNG fingerprints cover the whole file (SHA256).
- WEBM container files are keyed by file size (fast, but collision-prone), or by a
  sampled hash with --webm-key sample.
- GIF and unknown files are counted but never deduplicated.
- First seen wins: the earliest file in scan order is always kept in place.
- Duplicates are copied, verified and only then deleted, so quarantine may live on
  another volume.
- Dry run mode: scan and report without touching anything.
- Interactive prompt for the root directory when none is given on the command line.

USAGE EXAMPLES:
---------------
1. Scan a root directory and quarantine duplicates:
    python dedup.py /srv/media/data

2. Dry run: report duplicates without moving anything:
    python dedup.py -d /srv/media/data

3. Prompt for the root directory (type 'd' for ./data, 'q' to quit):
    python dedup.py

4. Use the sampled WEBM key instead of file size, verbose logging to a file:
    python dedup.py -v -w sample -l dedup.log /srv/media/data

5. Abort the scan on JPEG files without a Start-Of-Scan marker:
    python dedup.py -s /srv/media/data

See --help for all options.
"""

# Standard library imports
import sys
import datetime
import logging
import shutil
import argparse
import hashlib
import json
import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

# Third-party library imports for diagnostics on unrecognized files
from hachoir.parser import createParser
from hachoir.core import config

# Suppress hachoir warnings to keep console output clean
config.quiet = True

__version__ = "1.0.0"
myversion = f"v. {__version__} 2026-10-19"

HEADER_SIZE = 3
CHUNK_SIZE = 8192
SAMPLE_SIZE = 64 * 1024
SOS_MARKER = b"\xff\xda"
LOG_FILENAME = "log.json"
DEFAULT_ROOT_NAME = "data"
HASH_ALGORITHM = "sha256"

EXIT_WORDS = {"q", "quit", "exit"}
DEFAULT_WORDS = {"d", "default"}


class DedupError(Exception):
    """Base class for errors raised while scanning or relocating."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

    def __str__(self):
        message = super().__str__()
        if self.path is not None:
            return f"{message}: {self.path}"
        return message


class UnreadableHeader(DedupError):
    """The leading bytes of a file could not be read."""


class MalformedFormat(DedupError):
    """A file does not have the structure its magic bytes announce."""


class IOFailure(DedupError):
    """A read, write, copy or delete failed."""


class FormatTag(Enum):
    UNKNOWN = "unknown"
    JPEG = "jpeg"
    PNG = "png"
    WEBM = "webm"
    GIF = "gif"


# Formats that take part in duplicate detection
DEDUP_FORMATS = (FormatTag.JPEG, FormatTag.PNG, FormatTag.WEBM)


@dataclass(frozen=True)
class FileLocation:
    """A file relative to the scan root."""
    subdir: str
    file: str

    def to_dict(self) -> Dict[str, str]:
        return {"subdir": self.subdir, "file": self.file}

    def __str__(self):
        return f"{self.subdir}/{self.file}"


@dataclass(frozen=True)
class DuplicateRecord:
    original: FileLocation
    duplicate: FileLocation

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {"original": self.original.to_dict(), "duplicate": self.duplicate.to_dict()}


def classify(header: bytes) -> FormatTag:
    """
    Classify a file from its first bytes.

    Args:
        header (bytes): Leading bytes of the file (3 are enough)

    Returns:
        FormatTag: Detected format, FormatTag.UNKNOWN if nothing matches
    """
    if header.startswith(b"\xff\xd8"):
        return FormatTag.JPEG
    if header.startswith(b"\x89\x50"):
        return FormatTag.PNG
    if header.startswith(b"\x1a\x45"):
        return FormatTag.WEBM
    if header.startswith(b"GIF"):
        return FormatTag.GIF
    return FormatTag.UNKNOWN


def read_header(file_path: Path, size: int = HEADER_SIZE) -> bytes:
    """Return the first ``size`` bytes of a file, raising UnreadableHeader on failure."""
    try:
        with open(file_path, "rb") as f:
            return f.read(size)
    except OSError as e:
        raise UnreadableHeader(f"Cannot read header ({e.strerror})", file_path) from e


def describe_unknown(file_path: Path, logger) -> str:
    """
    Ask hachoir what an unrecognized file might be.

    Args:
        file_path (Path): File the sniffer could not classify
        logger (logging.Logger): Logger for recording parser problems

    Returns:
        str: MIME type or description reported by hachoir, empty string if none
    """
    try:
        parser = createParser(str(file_path))
    except Exception as e:
        logger.debug(f"Failed to create parser for {file_path}: {e}")
        return ""

    if not parser:
        return ""

    try:
        with parser:
            return parser.mime_type or parser.description or ""
    except Exception as e:
        logger.debug(f"Error describing {file_path}: {e}")
        return ""


class StartOfScanHasher:
    """
    Incremental hasher for JPEG data from the first Start-Of-Scan marker onward.

    Two states: searching and found. While searching only the last byte of the
    data seen so far is retained, enough to find a marker split between chunks.
    Once the marker is found every chunk goes straight into the hash.
    """

    def __init__(self, algorithm: str = HASH_ALGORITHM):
        self._hash = hashlib.new(algorithm)
        self._pending = b""
        self.found = False

    def update(self, chunk: bytes) -> None:
        if self.found:
            self._hash.update(chunk)
            return

        window = self._pending + chunk
        index = window.find(SOS_MARKER)
        if index == -1:
            self._pending = window[-1:]
            return

        self._hash.update(window[index:])
        self._pending = b""
        self.found = True

    def hexdigest(self) -> str:
        if not self.found:
            raise MalformedFormat("JPEG data has no Start-Of-Scan marker")
        return self._hash.hexdigest()


def _iter_chunks(stream, chunk_size: int):
    # Read file in chunks to handle large files efficiently
    return iter(lambda: stream.read(chunk_size), b"")


def _hash_stream(stream, chunk_size: int = CHUNK_SIZE, algorithm: str = HASH_ALGORITHM) -> str:
    hash_obj = hashlib.new(algorithm)
    for chunk in _iter_chunks(stream, chunk_size):
        hash_obj.update(chunk)
    return hash_obj.hexdigest()


def fingerprint_jpeg(stream, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Fingerprint a JPEG stream by hashing everything from its first SOS marker.

    Args:
        stream: Binary file-like object positioned at the start of the file
        chunk_size (int): Bytes to read per step

    Returns:
        str: Hexadecimal SHA256 of the scan data

    Raises:
        MalformedFormat: If the stream contains no SOS marker
    """
    hasher = StartOfScanHasher()
    for chunk in _iter_chunks(stream, chunk_size):
        hasher.update(chunk)
    return hasher.hexdigest()


def fingerprint_png(stream, chunk_size: int = CHUNK_SIZE) -> str:
    """Fingerprint a PNG stream by hashing all of it."""
    return _hash_stream(stream, chunk_size)


def fingerprint_webm(file_path: Path, webm_key: str = "size") -> str:
    """
    Identity key for a WEBM container file.

    With the default "size" key this is just the file size in bytes, so two
    different videos of the same length collide. The "sample" key hashes the
    size together with the first and last SAMPLE_SIZE bytes.

    Args:
        file_path (Path): File to key
        webm_key (str): "size" or "sample"

    Returns:
        str: Decimal file size, or hexadecimal SHA256 of the samples
    """
    size = file_path.stat().st_size
    if webm_key == "size":
        return str(size)

    hash_obj = hashlib.new(HASH_ALGORITHM)
    hash_obj.update(str(size).encode("ascii"))
    with open(file_path, "rb") as f:
        hash_obj.update(f.read(SAMPLE_SIZE))
        if size > SAMPLE_SIZE:
            f.seek(max(size - SAMPLE_SIZE, SAMPLE_SIZE))
            hash_obj.update(f.read(SAMPLE_SIZE))
    return hash_obj.hexdigest()


def compute_fingerprint(file_path: Path, tag: FormatTag, chunk_size: int = CHUNK_SIZE, webm_key: str = "size") -> Optional[str]:
    """
    Compute the fingerprint of a file for its format.

    Args:
        file_path (Path): File to fingerprint
        tag (FormatTag): Format from classify()
        chunk_size (int): Bytes to read per step for streamed formats
        webm_key (str): Identity key used for WEBM files

    Returns:
        str or None: Fingerprint, None for formats that are not deduplicated

    Raises:
        MalformedFormat: If a JPEG file has no SOS marker
        IOFailure: If the file cannot be read
    """
    if tag not in DEDUP_FORMATS:
        return None

    try:
        if tag == FormatTag.WEBM:
            return fingerprint_webm(file_path, webm_key)
        with open(file_path, "rb") as f:
            if tag == FormatTag.JPEG:
                return fingerprint_jpeg(f, chunk_size)
            return fingerprint_png(f, chunk_size)
    except MalformedFormat as e:
        raise MalformedFormat(str(e), file_path) from e
    except OSError as e:
        raise IOFailure(f"Failed to fingerprint ({e.strerror})", file_path) from e


def calculate_file_hash(file_path: Path, algorithm: str = HASH_ALGORITHM) -> str:
    """
    Calculate hash of a whole file, used to verify quarantine copies.

    Args:
        file_path (Path): Path to the file to hash
        algorithm (str): Hash algorithm to use (default: sha256)

    Returns:
        str: Hexadecimal hash string
    """
    with open(file_path, "rb") as f:
        return _hash_stream(f, CHUNK_SIZE, algorithm)


class FormatCounters:
    """Per-format totals and duplicate counts, for reporting only."""

    def __init__(self):
        self.counts = {tag: {"total": 0, "duplicates": 0} for tag in FormatTag}

    def count_total(self, tag: FormatTag) -> None:
        self.counts[tag]["total"] += 1

    def count_duplicate(self, tag: FormatTag) -> None:
        self.counts[tag]["duplicates"] += 1

    def total(self, tag: FormatTag) -> int:
        return self.counts[tag]["total"]

    def duplicates(self, tag: FormatTag) -> int:
        return self.counts[tag]["duplicates"]

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {tag.value: dict(values) for tag, values in self.counts.items()}


class IdentityRegistry:
    """
    Map of fingerprint -> first location seen with that fingerprint.

    Entries are never replaced: once a fingerprint is registered, every later
    file carrying it is a duplicate of the registered location.
    """

    def __init__(self):
        self._first_seen = {}

    def lookup(self, fingerprint: str) -> Optional[FileLocation]:
        return self._first_seen.get(fingerprint)

    def register(self, fingerprint: str, location: FileLocation) -> FileLocation:
        """Record location for fingerprint unless present; return the registered original."""
        return self._first_seen.setdefault(fingerprint, location)

    def __contains__(self, fingerprint):
        return fingerprint in self._first_seen

    def __len__(self):
        return len(self._first_seen)


class DuplicateResolver:
    """
    Decide, in scan order, which files are duplicates of an earlier one.

    Args:
        registry (IdentityRegistry): Registry owned by the caller
        counters (FormatCounters): Counters receiving duplicate counts
    """

    def __init__(self, registry: IdentityRegistry, counters: FormatCounters):
        self.registry = registry
        self.counters = counters
        # subdirectory -> records, in scan order
        self.duplicates: Dict[str, List[DuplicateRecord]] = {}

    def resolve(self, tag: FormatTag, fingerprint: Optional[str], location: FileLocation) -> Optional[DuplicateRecord]:
        """
        Register a file or report it as a duplicate.

        Args:
            tag (FormatTag): Format of the file
            fingerprint (str): Fingerprint from compute_fingerprint()
            location (FileLocation): Where the file lives

        Returns:
            DuplicateRecord or None: Record if fingerprint was already seen
        """
        if tag not in DEDUP_FORMATS or fingerprint is None:
            return None

        original = self.registry.register(fingerprint, location)
        if original == location:
            return None

        record = DuplicateRecord(original=original, duplicate=location)
        self.duplicates.setdefault(location.subdir, []).append(record)
        self.counters.count_duplicate(tag)
        return record

    def duplicate_count(self) -> int:
        return sum(len(records) for records in self.duplicates.values())


class ScanResult:
    """Everything a scan produced, handed to the quarantine step and the report."""

    def __init__(self, root: Path, registry: IdentityRegistry, resolver: DuplicateResolver, counters: FormatCounters):
        self.root = root
        self.registry = registry
        self.resolver = resolver
        self.counters = counters
        self.malformed: List[FileLocation] = []

    @property
    def duplicates(self) -> Dict[str, List[DuplicateRecord]]:
        return self.resolver.duplicates


def build_summary(duplicates: Dict[str, List[DuplicateRecord]], counters: FormatCounters) -> dict:
    """Build the JSON-serializable object written to log.json."""
    return {
        "counts": counters.to_dict(),
        "duplicates": {
            subdir: [record.to_dict() for record in records]
            for subdir, records in duplicates.items()
        },
    }


def set_up_logging(verbose: bool, log_file: Optional[Path] = None):
    """
    Set up logging to the console and optionally to a file.

    Args:
        verbose (bool): Whether to enable verbose (DEBUG) logging
        log_file (Path, optional): File that receives a copy of every message

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(__name__)

    # Set logging level based on verbose flag
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    # Drop handlers left over from a previous run in the same process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Define a simple formatter that just prints the message
    formatter = logging.Formatter("%(message)s")

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            print(f"Failed to create log directory: {e}")
            sys.exit(1)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


def process_file(
    root: Path,
    location: FileLocation,
    resolver: DuplicateResolver,
    logger,
    chunk_size: int = CHUNK_SIZE,
    webm_key: str = "size",
) -> Optional[DuplicateRecord]:
    """
    Classify, fingerprint and resolve a single file.

    Args:
        root (Path): Scan root
        location (FileLocation): File to process, relative to root
        resolver (DuplicateResolver): Resolver holding the scan state
        logger (logging.Logger): Logger for recording decisions
        chunk_size (int): Read size for streamed fingerprints
        webm_key (str): Identity key used for WEBM files

    Returns:
        DuplicateRecord or None: Record if the file duplicates an earlier one

    Raises:
        UnreadableHeader: If the header cannot be read
        MalformedFormat: If a JPEG file has no SOS marker (already counted)
        IOFailure: If the content cannot be read
    """
    fullpath = root / location.subdir / location.file

    header = read_header(fullpath)
    tag = classify(header)
    resolver.counters.count_total(tag)

    if tag == FormatTag.UNKNOWN:
        hint = describe_unknown(fullpath, logger)
        logger.warning(
            f"  {location.file}: unknown format, header bytes: {header.hex(' ') or '(empty)'}"
            + (f" (hachoir: {hint})" if hint else "")
        )
        return None

    fingerprint = compute_fingerprint(fullpath, tag, chunk_size, webm_key)
    record = resolver.resolve(tag, fingerprint, location)

    if record:
        logger.info(f"  {location.file}  [{tag.value}] duplicate of {record.original}")
    else:
        logger.debug(f"  {location.file}  [{tag.value}] {fingerprint or 'not fingerprinted'}")
    return record


def _sorted_entries(directory: Path) -> List[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise IOFailure(f"Failed to list directory ({e.strerror})", directory) from e


def scan_tree(
    root: Path,
    logger,
    chunk_size: int = CHUNK_SIZE,
    webm_key: str = "size",
    strict: bool = False,
) -> ScanResult:
    """
    Scan every file in every subdirectory of root, in sorted name order.

    Args:
        root (Path): Directory holding one level of subdirectories
        logger (logging.Logger): Logger for progress and warnings
        chunk_size (int): Read size for streamed fingerprints
        webm_key (str): Identity key used for WEBM files
        strict (bool): Abort on JPEG files without SOS marker instead of skipping them

    Returns:
        ScanResult: Registry, duplicates and counters of the scan
    """
    counters = FormatCounters()
    registry = IdentityRegistry()
    result = ScanResult(root, registry, DuplicateResolver(registry, counters), counters)

    for subdir in _sorted_entries(root):
        if not subdir.is_dir():
            logger.debug(f"Skipping file in root: {subdir.name}")
            continue

        entries = _sorted_entries(subdir)
        logger.info(f"Scanning {subdir.name} ({len(entries)} entries)")

        for entry in entries:
            if not entry.is_file():
                logger.debug(f"  Skipping nested entry: {entry.name}")
                continue

            location = FileLocation(subdir.name, entry.name)
            try:
                process_file(root, location, result.resolver, logger, chunk_size, webm_key)
            except MalformedFormat as e:
                if strict:
                    raise
                result.malformed.append(location)
                logger.error(f"  {entry.name}: {e}, skipped")

    return result


def relocate(
    root: Path,
    duplicates: Dict[str, List[DuplicateRecord]],
    counters: FormatCounters,
    logger,
) -> Path:
    """
    Move duplicate files to a new quarantine directory next to root.

    The quarantine directory is named by the current time in milliseconds and
    receives log.json plus one subdirectory per source subdirectory that had
    duplicates. Each duplicate is copied, verified and only then deleted; the
    first failure aborts the remaining moves.

    Args:
        root (Path): Scan root
        duplicates (dict): Subdirectory -> DuplicateRecord list from the scan
        counters (FormatCounters): Counters written to log.json
        logger (logging.Logger): Logger for recording moves

    Returns:
        Path: The quarantine directory

    Raises:
        IOFailure: If a subdirectory is named like the log, or any directory, log, copy, verification or delete fails
    """
    # A mirrored subdirectory must not take the log file's name
    if LOG_FILENAME in duplicates:
        raise IOFailure(
            f"Subdirectory name clashes with the quarantine {LOG_FILENAME}, rename it and run again",
            root / LOG_FILENAME,
        )

    quarantine = root.parent / str(int(time.time() * 1000))

    try:
        quarantine.mkdir()
        with open(quarantine / LOG_FILENAME, "w", encoding="utf-8") as f:
            json.dump(build_summary(duplicates, counters), f, indent=2)
    except OSError as e:
        raise IOFailure(f"Failed to create quarantine ({e.strerror})", quarantine) from e
    logger.info(f"Quarantine: {quarantine}")

    for subdir, records in duplicates.items():
        target_dir = quarantine / subdir
        try:
            target_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise IOFailure(f"Failed to create quarantine subdir ({e.strerror})", target_dir) from e

        for record in records:
            source = root / record.duplicate.subdir / record.duplicate.file
            dest = target_dir / record.duplicate.file
            _copy_verify_delete(source, dest)
            logger.debug(f"  moved {record.duplicate} -> {dest}")

    return quarantine


def _copy_verify_delete(source: Path, dest: Path) -> None:
    try:
        shutil.copy2(str(source), str(dest))
        if calculate_file_hash(source) != calculate_file_hash(dest):
            raise IOFailure(f"Copy verification failed for {source}", dest)
        source.unlink()
    except OSError as e:
        raise IOFailure(f"Failed to move duplicate ({e.strerror})", source) from e


def log_report(result: ScanResult, logger) -> None:
    """Log the final per-format counts and duplicate list."""
    logger.info("-" * 60)
    for tag in FormatTag:
        logger.info(
            f"{tag.value:>8}: {result.counters.total(tag):6d} files, "
            f"{result.counters.duplicates(tag):6d} duplicates"
        )
    logger.info(f"Duplicates found: {result.resolver.duplicate_count()}")
    if result.malformed:
        logger.info(f"Malformed files skipped: {len(result.malformed)}")
    logger.info("-" * 60)


def default_root() -> Path:
    return Path.cwd() / DEFAULT_ROOT_NAME


def prompt_for_root(default: Path, input_func: Optional[Callable[[str], str]] = None) -> Optional[Path]:
    """
    Ask the operator for the root directory until a usable answer is given.

    Args:
        default (Path): Root used for the 'd'/'default' answer
        input_func (callable): Function reading one line (default: builtin input)

    Returns:
        Path or None: Root directory, or None if the operator chose to exit
    """
    if input_func is None:
        input_func = input

    prompt = f"Root directory (absolute path, 'd' for {default}, 'q' to quit): "
    while True:
        try:
            answer = input_func(prompt).strip()
        except EOFError:
            return None

        if answer.lower() in EXIT_WORDS:
            return None

        if answer.lower() in DEFAULT_WORDS:
            candidate = default
        elif answer and Path(answer).expanduser().is_absolute():
            candidate = Path(answer).expanduser()
        else:
            print("Please enter an absolute path, 'd' or 'q'.")
            continue

        if candidate.is_dir() and os.access(candidate, os.R_OK | os.X_OK):
            return candidate.resolve()
        print(f"Not a readable directory: {candidate}")


def validate_args(root: Path, chunk_size: int, logger):
    """
    Validate the root directory and numeric options.

    Exits:
        If root is not a directory or chunk_size is not positive
    """
    if not root.exists() or not root.is_dir():
        logger.error(f"Root directory does not exist: {root}")
        sys.exit(1)

    if chunk_size <= 0:
        logger.error(f"Chunk size must be positive, got {chunk_size}")
        sys.exit(1)


def print_examples():
    """
    Print usage examples to the user.

    This function extracts and displays the examples section from the module's docstring.
    It's used when the --examples flag is provided.
    """
    doc_lines = __doc__.split("\n")
    examples_start = doc_lines.index("USAGE EXAMPLES:")
    examples_end = next(
        (
            i
            for i, line in enumerate(doc_lines[examples_start:], examples_start)
            if line.startswith("See --help")
        ),
        len(doc_lines),
    )

    examples = "\n".join(doc_lines[examples_start : examples_end + 1])
    print(examples)


def parse_arguments(args=None):
    """
    Parse command line arguments using argparse.

    Args:
        args (list, optional): Command line arguments. Defaults to None.

    Returns:
        argparse.Namespace: Parsed arguments
    """
    if args is None:
        args = sys.argv[1:]

    # --examples short-circuits everything else
    if "--examples" in args:
        print_examples()
        sys.exit(0)

    parser = argparse.ArgumentParser(
        prog="dedup.py",
        description="Find duplicate JPEG, PNG and WEBM files in the subdirectories of a root directory "
        "and move the later copies to a timestamped quarantine directory next to the root.",
        epilog="If ROOT_DIR is omitted, the script prompts for it.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "root_dir",
        nargs="?",
        default=None,
        help="Root directory whose subdirectories hold the media files",
        metavar="ROOT_DIR",
    )

    parser.add_argument(
        "-d", "--dryrun",
        action="store_true",
        help="Dry run mode: scan and report, do not create quarantine or move files",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Talk more",
    )

    parser.add_argument(
        "-l", "--log-file",
        default=None,
        help="Also write log messages to this file",
        metavar="FILE",
    )

    parser.add_argument(
        "-s", "--strict",
        action="store_true",
        help="Abort when a JPEG file has no Start-Of-Scan marker (default: log and skip it)",
    )

    parser.add_argument(
        "-w", "--webm-key",
        choices=["size", "sample"],
        default="size",
        help="Identity key for WEBM files: 'size' (file size only, different files of equal size "
        "are treated as duplicates) or 'sample' (hash of size, head and tail) [default: size]",
    )

    parser.add_argument(
        "-b", "--chunk-size",
        type=int,
        default=CHUNK_SIZE,
        help=f"Read size in bytes for streamed hashing [default: {CHUNK_SIZE}]",
        metavar="BYTES",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {myversion}",
    )

    parser.add_argument(
        "--examples",
        action="store_true",
        help="Show usage examples and exit",
    )

    return parser.parse_args(args)


def main(args=None):
    """
    Main entry point for the script.

    Args:
        args (list, optional): Command line arguments. Defaults to None.

    Returns:
        Path or None: Quarantine directory, None for dry runs
    """
    parsed_args = parse_arguments(args)

    log_file = Path(parsed_args.log_file).expanduser().resolve() if parsed_args.log_file else None
    logger = set_up_logging(parsed_args.verbose, log_file)

    if parsed_args.root_dir is None:
        print(f"mediadedup {myversion}")
        root = prompt_for_root(default_root())
        if root is None:
            print("No root directory selected. Exiting.")
            sys.exit(0)
    else:
        root = Path(parsed_args.root_dir).expanduser().resolve()

    start_time = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    logger.info("=" * 60)
    logger.info(f"mediadedup {myversion}")
    logger.info(f"Session Started: {start_time}")
    logger.info(f"Root: {root}")
    logger.info("=" * 60)
    logger.debug("Command-line options: %s", vars(parsed_args))

    validate_args(root, parsed_args.chunk_size, logger)

    if parsed_args.webm_key != "size":
        logger.warning(
            "WEBM files are keyed by a sampled hash instead of file size; "
            "results differ from the default duplicate policy."
        )

    quarantine = None
    try:
        result = scan_tree(
            root,
            logger,
            chunk_size=parsed_args.chunk_size,
            webm_key=parsed_args.webm_key,
            strict=parsed_args.strict,
        )
        log_report(result, logger)

        if parsed_args.dryrun:
            logger.info("Dry run: nothing was moved.")
        else:
            quarantine = relocate(root, result.duplicates, result.counters, logger)
            logger.info(f"Moved {result.resolver.duplicate_count()} duplicates to {quarantine}")
    except DedupError as e:
        logger.error(f"Aborted: {e}")
        logging.shutdown()
        sys.exit(1)

    end_time = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    logger.info("=" * 60)
    logger.info(f"Session Ended: {end_time}")
    logger.info("=" * 60)

    # Ensure all log messages are written
    logging.shutdown()

    return quarantine


if __name__ == "__main__":
    main()
