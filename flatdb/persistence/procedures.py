# ==============================================
# Load / Dump Procedures
# ==============================================
#
# PURPOSE:
#   Turn a ReadResult into a continue-or-abort decision.
#
# FUNCTIONS:
# ----------
# - load_flat_db(obj, store) -> bool
#     Start-up load. Reads once. Missing file and format drift are
#     recoverable (obj is empty); anything else must stop the caller.
#
# - dump_flat_db(obj, store) -> bool
#     Save. First verifies the file already on disk with a dry-run read
#     into a scratch copy, and refuses to overwrite a file that is
#     corrupted or belongs to another store / environment.
#
# ==============================================

import logging
import time

from flatdb.persistence.flat_store import FlatStore
from flatdb.persistence.persisted_object import PersistedObject
from flatdb.persistence.read_result import ReadResult

logger = logging.getLogger(__name__)


def load_flat_db(obj: PersistedObject, store: FlatStore) -> bool:
    """
    Load obj from store at process start.

    Returns:
        True if the process may continue with obj (loaded or empty),
        False if the file needs manual attention
    """
    logger.info("Reading info from %s...", store.filename)
    result = store.read(obj)

    if result == ReadResult.FILE_ERROR:
        logger.info("Missing cache file - %s, will try to recreate", store.filename)
    elif result != ReadResult.OK:
        if result == ReadResult.INCORRECT_FORMAT:
            logger.warning(
                "Error reading %s: magic is ok but data has invalid format, will try to recreate",
                store.filename,
            )
        else:
            logger.error(
                "Error reading %s: file format is unknown or invalid (%s), please fix it manually",
                store.filename, result.value,
            )
            return False

    return True


def dump_flat_db(obj: PersistedObject, store: FlatStore) -> bool:
    """
    Save obj to store after checking the file currently on disk.

    Returns:
        True if obj was written, False if the dump was refused or failed
    """
    start = time.monotonic()

    logger.info("Verifying %s format...", store.filename)
    try:
        scratch = obj.empty_copy()
    except Exception as e:
        logger.error("Cannot verify %s: no empty copy of %s - %s", store.filename, type(obj).__name__, e)
        return False
    result = store.read(scratch, dry_run=True)

    if result == ReadResult.FILE_ERROR:
        logger.info("Missing file - %s, will try to recreate", store.filename)
    elif result != ReadResult.OK:
        if result == ReadResult.INCORRECT_FORMAT:
            logger.warning(
                "Error reading %s: magic is ok but data has invalid format, will try to recreate",
                store.filename,
            )
        else:
            logger.error(
                "Error reading %s: file format is unknown or invalid (%s), please fix it manually",
                store.filename, result.value,
            )
            return False

    logger.info("Writing info to %s...", store.filename)
    if not store.write(obj):
        return False
    logger.info("%s dump finished  %dms", store.filename, int((time.monotonic() - start) * 1000))

    return True
