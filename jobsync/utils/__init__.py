"""
Shared utilities for JobSync.

Common functionality used across contexts:
- Date normalization
- Text splitting, escaping and diffing
- Logging setup
"""

from jobsync.utils.dates import DateRange, normalize_range, to_canonical_date
from jobsync.utils.text_processing import split_top_level
from jobsync.utils.timestamp import now

__all__ = ["DateRange", "normalize_range", "to_canonical_date", "split_top_level", "now"]
