# invest_api/services/storage.py

import logging
import os
import uuid
from pathlib import Path

import aiofiles
from fastapi import HTTPException, UploadFile, status

from invest_api.core.config import settings

logger = logging.getLogger(__name__)

# Публичный префикс, под которым путь к файлу хранится в deposits.image_url
UPLOAD_URL_PREFIX = "/uploads/"

# Расширение берем из MIME-типа, а не из имени файла
EXTENSIONS_BY_CONTENT_TYPE = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

CHUNK_SIZE = 1024 * 1024


def get_upload_dir() -> Path:
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def resolve_upload_path(image_url: str) -> Path:
    """Превращает image_url депозита в путь к файлу. Берется только имя файла."""
    return get_upload_dir() / Path(image_url).name


async def save_deposit_proof(file: UploadFile) -> str:
    """
    Сохраняет скриншот транзакции в директорию загрузок под случайным именем
    и возвращает его публичный путь (image_url).
    """
    extension = EXTENSIONS_BY_CONTENT_TYPE.get(file.content_type, Path(file.filename or "").suffix.lower())
    unique_filename = f"{uuid.uuid4()}{extension}"
    file_path = get_upload_dir() / unique_filename

    try:
        await file.seek(0)
        async with aiofiles.open(file_path, 'wb') as out_file:
            while content := await file.read(CHUNK_SIZE):
                await out_file.write(content)
    except OSError:
        logger.error(f"Failed to save uploaded file '{file.filename}'.", exc_info=True)
        await remove_deposit_proof(f"{UPLOAD_URL_PREFIX}{unique_filename}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save uploaded file")

    logger.info(f"Saved deposit proof '{file.filename}' to '{file_path}'.")
    return f"{UPLOAD_URL_PREFIX}{unique_filename}"


async def remove_deposit_proof(image_url: str):
    """
    Удаляет файл подтверждения, если он есть.
    Используется при откате неудачной вставки депозита.
    """
    file_path = resolve_upload_path(image_url)
    try:
        if os.path.exists(file_path):
            os.remove(file_path)
            logger.info(f"Removed deposit proof file: '{file_path}'.")
    except OSError:
        logger.error(f"Failed to remove deposit proof file '{file_path}'.", exc_info=True)
