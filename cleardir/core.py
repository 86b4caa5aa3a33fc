"""
Core functionality for removing duplicate files from a directory
"""

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple


class CleardirError(Exception):
    """Base class for errors that abort processing of one directory"""

    def __init__(self, path, error: OSError):
        self.path = Path(path)
        self.error = error
        super().__init__(self.describe())

    def describe(self) -> str:
        reason = error_kind(self.error)
        return f"{display_path(self.path)}: {reason}"


class DirectoryOpenError(CleardirError):
    """The directory could not be opened for listing"""

    def describe(self) -> str:
        return f"cannot open directory {display_path(self.path)}: {error_kind(self.error)}"


class HashingError(CleardirError):
    """A file could not be read while computing its digest"""

    def describe(self) -> str:
        return f"cannot hash {display_path(self.path)}: {error_kind(self.error)}"


def error_kind(error: OSError) -> str:
    """Short description of an OS error: 'permission denied', 'not found', ..."""
    if isinstance(error, FileNotFoundError):
        return "not found"
    if isinstance(error, NotADirectoryError):
        return "not a directory"
    if isinstance(error, IsADirectoryError):
        return "is a directory"
    if isinstance(error, PermissionError):
        return "permission denied"
    return error.strerror or str(error)


def display_path(path) -> str:
    """
    Render a path for output without failing on undecodable bytes

    Bytes that are not valid UTF-8 are shown as \\xNN escapes.
    """
    return os.fsencode(os.fspath(path)).decode("utf-8", "backslashreplace")


@dataclass(frozen=True)
class Options:
    verbose: bool = False
    dry_run: bool = False


@dataclass
class ScanResult:
    """Digest map for one directory, in the order files were encountered"""
    directory: Path
    groups: Dict[str, List[Path]] = field(default_factory=dict)
    skipped_dirs: List[Path] = field(default_factory=list)
    entry_errors: List[Tuple[Path, OSError]] = field(default_factory=list)

    def duplicates(self) -> Dict[str, List[Path]]:
        return {h: paths for h, paths in self.groups.items() if len(paths) > 1}


@dataclass
class GroupPlan:
    digest: str
    keep: Optional[Path]
    delete: List[Path] = field(default_factory=list)
    unrepresentable: List[Path] = field(default_factory=list)


@dataclass
class DeletionReport:
    plans: List[GroupPlan] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
    freed_space: int = 0
    errors: List[Tuple[Path, OSError]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def planned(self) -> List[Path]:
        return [path for plan in self.plans for path in plan.delete]


def calculate_file_hash(filepath: Path, chunk_size: int = 8192) -> str:
    """
    Calculate SHA-256 hash of a file

    Args:
        filepath: Path to the file
        chunk_size: Size of chunks to read at once

    Returns:
        Lowercase hex digest

    Raises:
        OSError: if the file cannot be opened or read
    """
    hash_sha256 = hashlib.sha256()
    with open(filepath, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b''):
            hash_sha256.update(chunk)
    return hash_sha256.hexdigest()


def scan_directory(
        directory,
        progress_callback: Optional[Callable[[Path, str, bool], None]] = None,
        skip_callback: Optional[Callable[[Path], None]] = None,
) -> ScanResult:
    """
    Hash every file directly inside a directory and group them by digest

    Subdirectories are not entered. Entries whose type cannot be determined
    are recorded in ``entry_errors`` and skipped.

    Args:
        directory: Path to scan
        progress_callback: Called as (path, digest, is_duplicate) per hashed file
        skip_callback: Called with the path of every skipped subdirectory

    Returns:
        ScanResult with the digest map of the directory

    Raises:
        DirectoryOpenError: if the directory cannot be listed
        HashingError: if a file cannot be read; the scan is abandoned
    """
    result = ScanResult(directory=Path(directory))

    try:
        entries = os.scandir(directory)
    except OSError as e:
        raise DirectoryOpenError(directory, e) from e

    with entries:
        for entry in entries:
            filepath = Path(entry.path)

            try:
                is_dir = entry.is_dir()
            except OSError as e:
                result.entry_errors.append((filepath, e))
                continue

            if is_dir:
                result.skipped_dirs.append(filepath)
                if skip_callback:
                    skip_callback(filepath)
                continue

            try:
                file_hash = calculate_file_hash(filepath)
            except OSError as e:
                raise HashingError(filepath, e) from e

            group = result.groups.setdefault(file_hash, [])
            is_duplicate = bool(group)
            group.append(filepath)

            if progress_callback:
                progress_callback(filepath, file_hash, is_duplicate)

    return result


def path_text(path) -> Optional[str]:
    """
    Return the path as text, or None if it holds undecodable bytes

    Undecodable bytes come back from the OS as lone surrogates, which
    cannot be encoded to UTF-8.
    """
    text = os.fspath(path)
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        return None
    return text


def plan_group(digest: str, paths: List[Path]) -> GroupPlan:
    """
    Decide which member of a digest group survives

    The survivor is the first path, in group order, whose full path string
    has the minimum length. Length is measured on the whole path as rendered,
    not the basename. Paths that cannot be represented as text are left alone.

    Args:
        digest: Digest shared by all paths
        paths: Group members in encounter order

    Returns:
        GroupPlan naming the survivor and the paths to delete
    """
    plan = GroupPlan(digest=digest, keep=None)

    named = []
    for path in paths:
        text = path_text(path)
        if text is None:
            plan.unrepresentable.append(path)
        else:
            named.append((path, len(text)))

    if not named:
        return plan

    shortest = min(length for _, length in named)

    for path, length in named:
        if length == shortest and plan.keep is None:
            plan.keep = path
        else:
            plan.delete.append(path)

    return plan


def delete_duplicates(
        scan_result: ScanResult,
        options: Options,
        delete_callback: Optional[Callable[[Path], None]] = None,
        keep_callback: Optional[Callable[[Path], None]] = None,
) -> DeletionReport:
    """
    Delete duplicate files, keeping the shortest-named one of each set

    A failure to delete one file is recorded and the remaining deletions
    still run.

    Args:
        scan_result: Digest map produced by scan_directory
        options: Run options; nothing is removed when dry_run is set
        delete_callback: Called with each path before it is (or would be) deleted
        keep_callback: Called with the survivor of each duplicate set

    Returns:
        DeletionReport with the plans, the deleted paths and collected errors
    """
    report = DeletionReport(dry_run=options.dry_run)

    for file_hash, filepaths in scan_result.duplicates().items():
        plan = plan_group(file_hash, filepaths)
        report.plans.append(plan)

        if keep_callback and plan.keep is not None:
            keep_callback(plan.keep)

        for filepath in plan.delete:
            if delete_callback:
                delete_callback(filepath)

            try:
                file_size = filepath.stat().st_size
                if not options.dry_run:
                    filepath.unlink()
            except OSError as e:
                report.errors.append((filepath, e))
                continue

            report.deleted.append(filepath)
            report.freed_space += file_size

    return report


def format_size(size_bytes: int) -> str:
    """
    Convert bytes to human-readable format

    Args:
        size_bytes: Size in bytes

    Returns:
        Human readable size string
    """
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def get_digest_report(groups: Dict[str, List[Path]]) -> str:
    """
    Render the full digest map, one digest per block

    Args:
        groups: Digest map from a ScanResult

    Returns:
        Formatted report string
    """
    if not groups:
        return "No files hashed"

    report_lines = [f"Digest map ({len(groups)} distinct digests):", "-" * 60]

    for file_hash, filepaths in groups.items():
        report_lines.append(f"{file_hash} ({len(filepaths)} files)")
        for filepath in filepaths:
            report_lines.append(f"    {display_path(filepath)}")

    return "\n".join(report_lines)


def get_deletion_summary(report: DeletionReport) -> str:
    """One-line summary of a deletion pass"""
    if not report.plans:
        return "No duplicate files found"

    count = len(report.deleted)
    if report.dry_run:
        return f"Dry run: would delete {count} files, freeing {format_size(report.freed_space)}"
    return f"Deleted {count} files, freed {format_size(report.freed_space)}"
