"""Platform version record model"""

from dataclasses import dataclass
from typing import Dict

from ..constants import PREVIEW_TAG_PREFIX
from ..utils.version_utils import is_preview_tag, is_release_tag, strip_version_prefix


@dataclass(frozen=True)
class VersionRecord:
    """One entry of `wrangler versions list`"""
    version_id: str
    created: str  # Opaque, as printed by the platform
    tag: str

    @property
    def is_release(self) -> bool:
        return is_release_tag(self.tag)

    @property
    def is_preview(self) -> bool:
        return is_preview_tag(self.tag)

    @property
    def release_version(self) -> str:
        """Version string of a release tag (leading `v` removed)"""
        return strip_version_prefix(self.tag)

    @property
    def pr_number(self) -> str:
        return self.tag[len(PREVIEW_TAG_PREFIX):]

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {
            'versionId': self.version_id,
            'created': self.created,
            'tag': self.tag
        }
