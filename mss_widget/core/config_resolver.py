"""
Tiered configuration documents for the widget.

Lookup walks an ordered tuple of tiers: the writable runtime directory, the
read-only repository defaults, then the baked-in defaults. The first tier that
holds a parseable JSON object wins. Writes only ever touch the first tier.
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import DATA_DIR, REPO_CONFIG_DIR
from .errors import ConfigWriteError, UnknownConfigKindError
from .fileio import lock_for, read_json_object, write_json_object
from .schema import ConfigKind
from ..util.logging import logger


WIDGET_DEFAULT = {
    "editable": {
        "headline": True,
        "recordButton": True,
        "previousButton": True,
        "nextButton": True,
        "poweredByLabel": True,
        "uploadButton": True,
        "stopButton": True,
        "NotRecordingLabel": True,
        "SubmitForScoringButton": True,
    },
    "theme": "apple",
    "api": {
        "enabled": True,
        "baseUrl": "https://app.myspeakingscore.com",
        "key": "",
        "secret": "",
    },
    "logger": {
        "enabled": True,
        "url": "/log/submission",
    },
    "audioMinSeconds": 20,
    "audioMaxSeconds": 90,
}

FORMS_DEFAULT = {
    "headline": "Practice TOEFL Speaking Test",
    "poweredByLabel": "Powered by MSS Vox",
    "recordButton": "Record your response",
    "stopButton": "Stop",
    "uploadButton": "Choose an audio file",
    "SubmitForScoringButton": "Submit for scoring",
    "previousButton": "Previous",
    "nextButton": "Next",
    "NotRecordingLabel": "Not recording",
    "survey": ["Tell me about your hometown."],
}

IMAGES_DEFAULT = {
    "logoDataUrl": "",
}

DEFAULT_KINDS = (
    ConfigKind(name="widget", file_name="config.json", default=WIDGET_DEFAULT),
    ConfigKind(name="forms", file_name="form.json", default=FORMS_DEFAULT),
    ConfigKind(name="images", file_name="image.json", default=IMAGES_DEFAULT),
)


class DirectoryTier:
    """A directory holding one JSON file per kind."""

    def __init__(self, name: str, root, writable: bool = False):
        self.name = name
        self.root = Path(root)
        self.writable = writable

    def path_for(self, kind: ConfigKind) -> Path:
        return self.root / kind.file_name

    def load(self, kind: ConfigKind) -> Optional[Dict[str, Any]]:
        path = self.path_for(kind)
        obj = read_json_object(path)
        if obj is None and path.exists():
            logger.log_config_operation("read", kind.name, source=str(path), status="fallback")
        return obj


class DefaultsTier:
    """Baked-in fallback; always resolves."""

    name = "default"
    writable = False

    def load(self, kind: ConfigKind) -> Dict[str, Any]:
        return copy.deepcopy(kind.default)


class ConfigResolver:
    """Resolve and persist config documents by kind."""

    def __init__(self, tiers: Sequence = None, kinds: Sequence[ConfigKind] = DEFAULT_KINDS):
        if tiers is None:
            tiers = (
                DirectoryTier("data", DATA_DIR, writable=True),
                DirectoryTier("repo", REPO_CONFIG_DIR),
                DefaultsTier(),
            )
        self.tiers = tuple(tiers)
        self._kinds = {k.name: k for k in kinds}

        writable = [t for t in self.tiers if t.writable]
        if len(writable) != 1 or writable[0] is not self.tiers[0]:
            raise ValueError("the first tier must be the only writable tier")

    @classmethod
    def from_dirs(cls, data_dir, repo_dir, kinds: Sequence[ConfigKind] = DEFAULT_KINDS) -> 'ConfigResolver':
        return cls(
            tiers=(
                DirectoryTier("data", data_dir, writable=True),
                DirectoryTier("repo", repo_dir),
                DefaultsTier(),
            ),
            kinds=kinds,
        )

    def kinds(self) -> List[str]:
        return list(self._kinds)

    def _kind(self, name: str) -> ConfigKind:
        kind = self._kinds.get(name)
        if kind is None:
            raise UnknownConfigKindError(f"Unknown config kind: {name}")
        return kind

    def resolve(self, name: str) -> Tuple[Dict[str, Any], str]:
        """Return the document for ``name`` and the name of the tier it came from."""
        kind = self._kind(name)
        for tier in self.tiers:
            obj = tier.load(kind)
            if obj is not None:
                return obj, tier.name
        # DefaultsTier always resolves; only reachable with a custom tier list
        return {}, "none"

    def get(self, name: str) -> Dict[str, Any]:
        obj, source = self.resolve(name)
        logger.log_config_operation("get", name, source=source)
        return obj

    def put(self, name: str, obj: Any) -> None:
        """Replace the whole document for ``name`` in the writable tier.

        Non-object input is stored as an empty object.
        """
        kind = self._kind(name)
        if not isinstance(obj, dict):
            obj = {}

        path = self.tiers[0].path_for(kind)
        try:
            with lock_for(path):
                write_json_object(path, obj)
        except (OSError, TypeError, ValueError) as e:
            logger.log_config_operation("put", name, source=str(path), status="failed")
            raise ConfigWriteError(f"Failed to write {kind.file_name}: {e}") from e

        logger.log_config_operation("put", name, source=str(path))
