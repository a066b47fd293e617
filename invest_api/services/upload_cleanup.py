# invest_api/services/upload_cleanup.py
import logging
import time

from invest_api.core.config import settings
from invest_api.crud import deposit as crud_deposit
from invest_api.db.session import Database
from invest_api.services.storage import UPLOAD_URL_PREFIX, get_upload_dir

logger = logging.getLogger(__name__)


def cleanup_orphaned_uploads_task(database: Database) -> int:
    """
    Фоновая задача: удаляет файлы подтверждений, на которые не ссылается ни один депозит.
    Трогает только файлы старше ORPHAN_UPLOAD_MAX_AGE_HOURS, чтобы не задеть
    загрузку, для которой вставка депозита еще не завершилась.
    """
    logger.info("--- Starting scheduled job: Cleanup of Orphaned Uploads ---")
    max_age_seconds = settings.ORPHAN_UPLOAD_MAX_AGE_HOURS * 3600
    now = time.time()

    candidates = {
        f"{UPLOAD_URL_PREFIX}{path.name}": path
        for path in get_upload_dir().iterdir()
        if path.is_file() and now - path.stat().st_mtime > max_age_seconds
    }
    if not candidates:
        logger.info("No old upload files to check.")
        logger.info("--- Finished scheduled job: Cleanup of Orphaned Uploads ---")
        return 0

    with database.session() as db:
        referenced = crud_deposit.get_referenced_image_urls(db, candidates.keys())

    deleted_count = 0
    for image_url, path in candidates.items():
        if image_url in referenced:
            continue
        try:
            path.unlink()
            deleted_count += 1
        except OSError:
            logger.error(f"Failed to delete orphaned upload '{path}'.", exc_info=True)

    if deleted_count > 0:
        logger.info(f"Successfully deleted {deleted_count} orphaned upload files.")
    else:
        logger.info("No orphaned upload files to delete.")
    logger.info("--- Finished scheduled job: Cleanup of Orphaned Uploads ---")
    return deleted_count
