"""
cleardir - delete duplicate files in a directory, keeping the shortest name
"""

__version__ = "0.1.0"
__author__ = "Marcel Keienborg"
__description__ = "A tool to remove duplicate files by SHA-256 checksum"

from .core import (
    CleardirError,
    DirectoryOpenError,
    HashingError,
    Options,
    ScanResult,
    GroupPlan,
    DeletionReport,
    calculate_file_hash,
    scan_directory,
    path_text,
    plan_group,
    delete_duplicates,
    format_size,
    get_digest_report,
    get_deletion_summary,
)
