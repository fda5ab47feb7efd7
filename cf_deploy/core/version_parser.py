"""Parser for `wrangler versions list` text output"""

from typing import Dict, List

from ..constants import CREATED_MARKER, TAG_MARKER, UNTAGGED_MARKER, VERSION_ID_MARKER
from ..models.version import VersionRecord


def parse_versions_output(raw: str) -> List[VersionRecord]:
    """
    Parse version records out of wrangler's loosely structured output

    Each record is a ``Version ID:`` line followed by ``Created:`` and
    ``Tag:`` lines. A record is emitted when its ``Tag:`` line is reached,
    provided a creation date was seen and the tag is not ``-`` (untagged).
    Any other line is ignored. Output order matches input order.

    Args:
        raw: Text printed by ``wrangler versions list``

    Returns:
        Parsed records
    """
    records: List[VersionRecord] = []
    pending: Dict[str, str] = {}

    for line in raw.splitlines():
        id_match = VERSION_ID_MARKER.match(line)
        created_match = CREATED_MARKER.match(line)
        tag_match = TAG_MARKER.match(line)

        if id_match:
            pending = {'version_id': id_match.group(1).strip()}
        elif created_match and 'version_id' in pending:
            pending['created'] = created_match.group(1).strip()
        elif tag_match and 'version_id' in pending:
            tag = tag_match.group(1).strip()
            if tag != UNTAGGED_MARKER and pending.get('created'):
                records.append(VersionRecord(
                    version_id=pending['version_id'],
                    created=pending['created'],
                    tag=tag
                ))
            pending = {}

    return records
