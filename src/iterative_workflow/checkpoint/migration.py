"""Checkpoint format migrations.

Each stored checkpoint carries an integer ``version``; files from before the
field existed are version 1. ``MIGRATIONS`` maps a version to the pure
function that upgrades a checkpoint from that version to the next one, and
``migrate_checkpoint`` chains them up to ``CHECKPOINT_VERSION``.

To change the format: bump CHECKPOINT_VERSION and register a step for the
previous version.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

CHECKPOINT_VERSION = 2

CheckpointData = dict[str, Any]


class CheckpointMigrationError(Exception):
    """Raised when checkpoint data has no safe interpretation."""


def _v1_to_v2(data: CheckpointData) -> CheckpointData:
    # v2 only adds the explicit version tag
    logger.debug("Migrating checkpoint %s from v1 to v2", data.get("traceId"))
    return {"version": 2, **{key: value for key, value in data.items() if key != "version"}}


MIGRATIONS: Mapping[int, Callable[[CheckpointData], CheckpointData]] = {
    1: _v1_to_v2,
}


def stored_version(data: Mapping[str, Any]) -> int:
    """Return the format version of decoded checkpoint JSON (absent means 1).

    Raises:
        CheckpointMigrationError: If the version is present but not an integer >= 1.
    """
    if "version" not in data:
        return 1
    version = data["version"]
    if isinstance(version, bool) or not isinstance(version, int):
        raise CheckpointMigrationError(f"Unknown checkpoint version: {version!r}")
    if version < 1:
        raise CheckpointMigrationError(f"Unknown checkpoint version: {version}")
    return version


def needs_migration(data: Mapping[str, Any]) -> bool:
    return stored_version(data) < CHECKPOINT_VERSION


def migrate_checkpoint(data: object) -> CheckpointData:
    """Upgrade decoded checkpoint JSON to CHECKPOINT_VERSION.

    Current-version data is returned unchanged (as a copy). Data from a newer
    release is accepted as-is with a warning.

    Raises:
        CheckpointMigrationError: If ``data`` is not an object or its version is invalid.
    """
    if not isinstance(data, dict):
        raise CheckpointMigrationError("Invalid checkpoint data")

    version = stored_version(data)
    if version > CHECKPOINT_VERSION:
        logger.warning(
            "Checkpoint version %d is newer than supported version %d. "
            "Some features may not work correctly.",
            version,
            CHECKPOINT_VERSION,
        )
        return dict(data)

    migrated: CheckpointData = dict(data)
    while version < CHECKPOINT_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise CheckpointMigrationError(f"No migration registered for version {version}")
        migrated = step(migrated)
        version += 1
    return migrated
