"""URL construction for worker preview and alias hostnames"""

from ..utils.version_utils import slugify_version


def worker_url(name: str, domain: str, prefix: str) -> str:
    """
    Build a preview/alias URL from a prefix (tag slug or version id)

    Args:
        name: Worker name
        domain: Workers domain
        prefix: Host prefix

    Returns:
        URL such as ``https://pr-42-my-worker.workers.dev``
    """
    return f"https://{prefix}-{name}.{domain}"


def version_alias_url(name: str, domain: str, version: str) -> str:
    """
    Build the stable alias URL of a version ("1.2.0" -> "v1-2-0-...")

    No validation is done; "v1.2.0" becomes "vv1-2-0-...".

    Args:
        name: Worker name
        domain: Workers domain
        version: Version string

    Returns:
        Alias URL
    """
    return worker_url(name, domain, f"v{slugify_version(version)}")


def version_preview_url(name: str, domain: str, version_id: str) -> str:
    """
    Build the immutable URL of one upload

    The platform keys it by the first segment of the version id
    ("cf3bdf37-..." -> "https://cf3bdf37-<name>.<domain>").

    Args:
        name: Worker name
        domain: Workers domain
        version_id: Platform version id

    Returns:
        Preview URL, or empty string when there is no version id
    """
    if not version_id:
        return ""
    return worker_url(name, domain, version_id.split("-", 1)[0].lower())
