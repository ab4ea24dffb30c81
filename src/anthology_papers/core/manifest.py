"""
Conference manifest loading
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import yaml

from ..errors import ManifestError
from .models import Conference

logger = logging.getLogger(__name__)


def load_conferences(path: Path) -> List[Conference]:
    """
    Read the YAML manifest into Conference records

    The manifest is a list of mappings with 'id', 'name', 'description'
    and an ordered 'volumes' list such as ['P/P90', 'P/P91'].

    Args:
        path: Manifest file

    Returns:
        Conferences in manifest order

    Raises:
        ManifestError: if the file cannot be read or parsed
    """
    logger.debug(f"read {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ManifestError(f"Cannot load manifest {path}: {e}") from e

    if not isinstance(data, list):
        raise ManifestError(f"Manifest {path} must be a list of conferences")

    conferences = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ManifestError(f"Manifest {path}: item {i} is not a mapping")
        try:
            conferences.append(Conference.from_dict(item))
        except (KeyError, TypeError) as e:
            raise ManifestError(f"Manifest {path}: item {i} is missing {e}") from e

    return conferences


def select_conferences(
    conferences: Sequence[Conference],
    ids: Optional[Iterable[str]] = None,
) -> List[Conference]:
    """
    Restrict conferences to the given ids (all of them when ids is empty)

    Raises:
        ManifestError: if an id is not in the manifest
    """
    if not ids:
        return list(conferences)

    wanted = list(ids)
    known = {conf.id for conf in conferences}
    unknown = [conf_id for conf_id in wanted if conf_id not in known]
    if unknown:
        raise ManifestError(f"Unknown conference: {', '.join(unknown)}")

    return [conf for conf in conferences if conf.id in wanted]


def flatten_volumes(conferences: Iterable[Conference]) -> List[str]:
    """Volumes of all conferences in order; duplicates are kept"""
    return [volume for conf in conferences for volume in conf.volumes]
