# 📥 page_gateway/infrastructure/delivery/direct_fetcher.py
"""
📥 DirectFetcher: пряме завантаження сторінки з сервера доставки.

🔹 Рівно одна спроба: ретраї та фолбек вирішує оркестратор.
🔹 Стримить відповідь через `httpx` у пам'ять з обмеженням розміру.
🔹 Будь-який збій (з'єднання, таймаут, не-2xx, некоректний URL, обірваний потік, порожнє тіло, ліміт) → `TransportError`.
🔹 `Content-Type` за замовчуванням: `image/jpeg`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import logging															# 🧾 Логування результатів
from typing import Optional, Tuple										# 🧰 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from page_gateway.domain.pages import FetchedImage, IDirectFetcher		# 🧱 DTO та контракт
from page_gateway.errors.strategies import HttpxErrorStrategy			# 📜 httpx → TransportError
from page_gateway.shared.errors import TransportError					# ⚠️ Доменна помилка
from page_gateway.shared.utils.logger import LOG_NAME					# 🏷️ Ім'я базового логера

logger = logging.getLogger(f"{LOG_NAME}.direct")


# ================================
# 📦 КОНСТАНТИ
# ================================
DEFAULT_CONTENT_TYPE = "image/jpeg"									# 🏷️ Якщо сервер не вказав тип
MAGIC_SIGNATURES: Tuple[bytes, ...] = (								# 🧪 Сигнатури зображень
    b"\x89PNG\r\n\x1a\n",												# 🟢 PNG
    b"\xFF\xD8",														# 🟢 JPEG
    b"GIF8",															# 🟢 GIF
)


# ================================
# 📥 ПРЯМИЙ ЗАВАНТАЖУВАЧ
# ================================
class DirectFetcher(IDirectFetcher):
    """📥 Одна спроба стримінгового завантаження зображення."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        max_bytes: int = 20 * 1024 * 1024,
        chunk_size: int = 64 * 1024,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
        verify_magic: bool = False,
    ) -> None:
        self._client = client											# 🌐 Спільний HTTP-клієнт
        self.max_bytes = int(max_bytes)									# 📏 Максимальний розмір файлу
        self.chunk_size = int(chunk_size)								# 📦 Розмір шматків при стримінгу
        self.default_content_type = default_content_type or DEFAULT_CONTENT_TYPE
        self.verify_magic = bool(verify_magic)							# 🧪 Чи перевіряти сигнатуру
        self._errors = HttpxErrorStrategy(TransportError)				# 📜 Конвертер винятків
        logger.debug(
            "⚙️ DirectFetcher init max_bytes=%d chunk=%d verify_magic=%s",
            self.max_bytes,
            self.chunk_size,
            self.verify_magic,
        )

    # ================================
    # 🔄 ПУБЛІЧНИЙ API
    # ================================
    async def fetch(self, url: str) -> FetchedImage:
        """📦 Завантажує байти в пам'ять або піднімає `TransportError`."""
        if not url or not url.startswith(("http://", "https://")):
            raise TransportError(details="URL must be absolute http(s)", url=url or None)

        logger.info("📥 direct fetch start: %s", url)
        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()							# 🚦 Не-2xx → HTTPStatusError
                content_type = self._normalize_ct(response.headers.get("Content-Type"))
                self._validate_length(response.headers.get("Content-Length"), url)
                content = await self._read_body(response, url)
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:	# 🌐 InvalidURL/StreamError не є HTTPError
            error = self._errors.handle(exc)
            transport_error = (
                error
                if isinstance(error, TransportError)
                else TransportError(details=f"{type(exc).__name__}: {exc}", url=url)
            )
            logger.warning("⚠️ Пряме завантаження не вдалося: %s", transport_error, extra=transport_error.to_log_extra())
            raise transport_error from exc

        logger.info("✅ direct fetch ok: %s (bytes=%d, ct=%s)", url, len(content), content_type)
        return FetchedImage(url=url, content=content, content_type=content_type)

    # ================================
    # 📦 СТРИМІНГ У ПАМ’ЯТЬ
    # ================================
    async def _read_body(self, response: httpx.Response, url: str) -> bytes:
        buffer = bytearray()
        first_chunk_checked = False
        async for chunk in response.aiter_bytes(self.chunk_size):
            if not chunk:
                continue
            if self.verify_magic and not first_chunk_checked:
                first_chunk_checked = True
                if not chunk.startswith(MAGIC_SIGNATURES) and not _is_webp(chunk):
                    raise TransportError(details="body is not an image", url=url)
            buffer += chunk
            if len(buffer) > self.max_bytes:
                raise TransportError(details=f"body exceeds {self.max_bytes} bytes", url=url)

        if not buffer:
            raise TransportError(details="empty body", url=url)
        return bytes(buffer)

    # ================================
    # 🛡️ ДОПОМІЖНІ ПЕРЕВІРКИ
    # ================================
    def _normalize_ct(self, content_type: Optional[str]) -> str:
        """🛠️ Нормалізує `Content-Type`; порожній → тип за замовчуванням."""
        if content_type and content_type.strip():
            return content_type.strip()
        return self.default_content_type

    def _validate_length(self, header_value: Optional[str], url: str) -> None:
        """📏 Відсікає завеликі файли ще до читання тіла."""
        if header_value and header_value.isdigit() and int(header_value) > self.max_bytes:
            raise TransportError(details=f"Content-Length {header_value} exceeds {self.max_bytes}", url=url)


def _is_webp(chunk: bytes) -> bool:
    return len(chunk) >= 12 and chunk[:4] == b"RIFF" and chunk[8:12] == b"WEBP"


__all__ = ["DEFAULT_CONTENT_TYPE", "DirectFetcher"]
