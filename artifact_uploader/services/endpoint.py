"""Upload URL derivation."""
from typing import Optional

from ..errors import ConfigurationError


def guess_project_name(group_id: Optional[str]) -> Optional[str]:
    """Last dot-separated segment of the group id (``org.acme.widgets`` -> ``widgets``)."""
    if not group_id:
        return None
    name = group_id.rsplit(".", 1)[-1].strip()
    return name or None


def build_upload_url(
    project_name: Optional[str],
    host_suffix: str,
    override: Optional[str] = None,
    group_id: Optional[str] = None,
) -> str:
    """
    Return the upload endpoint.

    An explicit override wins; otherwise ``https://<project>.<host_suffix>/files``,
    guessing the project from the group id when none is configured.
    """
    if override:
        return override

    name = (project_name or "").strip() or guess_project_name(group_id)
    if not name:
        raise ConfigurationError(
            "cannot derive upload URL: set project_name or an explicit upload URL"
        )
    suffix = host_suffix.strip().strip(".")
    return f"https://{name}.{suffix}/files"
