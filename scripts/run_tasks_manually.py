# run_tasks_manually.py
import asyncio
import logging
import sys
import os

# Корень проекта в sys.path, чтобы импортировался пакет invest_api
sys.path.append(os.getcwd())

from invest_api.core.config import settings
from invest_api.db.session import Database
from invest_api.services.upload_cleanup import cleanup_orphaned_uploads_task


async def main():
    """
    Ручной запуск фоновых задач (то же, что делает планировщик по расписанию).
    """
    print("--- Manual Task Runner ---")
    database = Database(settings.DATABASE_URL)
    try:
        print("\n[1/1] Running: cleanup_orphaned_uploads_task...")
        # `to_thread` выполняет синхронную функцию в отдельном потоке,
        # не блокируя основной event loop.
        deleted_count = await asyncio.to_thread(cleanup_orphaned_uploads_task, database)
        print(f"Done. Deleted files: {deleted_count}")
    finally:
        database.dispose()

    print("\n--- All tasks completed! ---")


if __name__ == "__main__":
    # Настраиваем логирование, чтобы видеть вывод от наших сервисов
    logging.basicConfig(level=logging.INFO, stream=sys.stdout, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nScript interrupted by user.")
