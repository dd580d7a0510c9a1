"""
File-backed stores: tiered config documents and CSV submission logs.
"""

from .config_resolver import ConfigResolver, DirectoryTier, DefaultsTier, DEFAULT_KINDS
from .submission_log import SubmissionLog
from .annotations import AnnotationStore
from .schema import Annotation, ConfigKind, LogPage
from .errors import (
    StoreError,
    UnknownConfigKindError,
    ConfigWriteError,
    LogWriteError,
    RowNotFoundError,
    RowOutOfRangeError,
    AnnotationError,
)

__all__ = [
    'ConfigResolver',
    'DirectoryTier',
    'DefaultsTier',
    'DEFAULT_KINDS',
    'SubmissionLog',
    'AnnotationStore',
    'Annotation',
    'ConfigKind',
    'LogPage',
    'StoreError',
    'UnknownConfigKindError',
    'ConfigWriteError',
    'LogWriteError',
    'RowNotFoundError',
    'RowOutOfRangeError',
    'AnnotationError',
]
