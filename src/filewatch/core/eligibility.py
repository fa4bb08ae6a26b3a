"""
Decides whether a host resource can be watched
"""

import logging
import stat
from pathlib import Path
from typing import NamedTuple, Optional, Sequence

from ..host.base import Host, ResourceId
from ..utils import path_utils

log = logging.getLogger(__name__)


class Eligibility(NamedTuple):
    """Outcome of an eligibility check: a resolved path, or the reason there is none"""
    path: Optional[Path]
    reason: str = ''

    @property
    def eligible(self) -> bool:
        return self.path is not None


def _reject(resource_id: ResourceId, reason: str, detail: str = '') -> Eligibility:
    log.debug("Not watching %s: %s %s", resource_id, reason, detail)
    return Eligibility(None, reason)


def check_eligible(host: Host, resource_id: ResourceId, ignore_patterns: Sequence[str]) -> Eligibility:
    """Check whether a resource points at a watchable regular local file.

    Rejections are normal outcomes (scratch buffers, remote files, ignored
    paths) and are never raised.
    """
    if not host.is_valid(resource_id):
        return _reject(resource_id, 'invalid')

    filepath = host.resolve_path(resource_id)
    if not filepath:
        return _reject(resource_id, 'no-path')

    # netrw, fugitive and friends
    if path_utils.is_remote_path(filepath):
        return _reject(resource_id, 'remote', filepath)

    st = path_utils.stat_file(filepath)
    if st is None:
        return _reject(resource_id, 'missing', filepath)
    if not stat.S_ISREG(st.st_mode):
        return _reject(resource_id, 'not-regular', filepath)

    resolved = path_utils.resolve_path(filepath)
    if path_utils.is_path_ignored(filepath, ignore_patterns) or path_utils.is_path_ignored(resolved, ignore_patterns):
        return _reject(resource_id, 'ignored', filepath)

    return Eligibility(resolved)
