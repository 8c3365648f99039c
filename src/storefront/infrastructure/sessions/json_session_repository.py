# 📒 storefront/infrastructure/sessions/json_session_repository.py
"""
📒 JsonSessionRepository — append-only журнал checkout-сесій у JSON-файлі.

🎯 Призначення:
    • ідемпотентний запис сесії за `sessionId` (повторна доставка події оплати — no-op);
    • фільтрований перелік для адмінки (processed / діапазон дат, найновіші спершу);
    • зміна лише дозволених полів: `processed` та відмітки видачі цифрових товарів.

⚙️ Нотатки:
    • файл читається ледачо один раз, далі стан тримається в памʼяті;
    • кожна зміна серіалізується під `asyncio.Lock` і пишеться у `.tmp`,
      після чого атомарно підміняє файл через `os.replace`;
    • Decimal зберігається рядком, щоб не втрачати точність.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                     # 💽 Асинхронна робота з файлами

# 🔠 Системні імпорти
import asyncio
import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.revenue.entities import CheckoutSession
from storefront.domain.revenue.interfaces import ISessionRepository
from storefront.infrastructure.mappers import session_from_dict
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.infrastructure.sessions")


class JsonSessionRepository(ISessionRepository):
    """📒 Файловий журнал сесій зі збереженням у `path`."""

    def __init__(self, path: str) -> None:
        if not path or not isinstance(path, str):
            raise ValueError("Config 'sessions.file' is required and must be str.")
        self._path = Path(path)
        self._sessions: Dict[str, CheckoutSession] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    async def get(self, session_id: str) -> Optional[CheckoutSession]:
        await self._ensure_loaded()
        return self._sessions.get(session_id)

    async def add_if_absent(self, session: CheckoutSession) -> Tuple[CheckoutSession, bool]:
        await self._ensure_loaded()
        async with self._lock:
            existing = self._sessions.get(session.session_id)
            if existing is not None:
                logger.info("♻️ Session %s already recorded, replay ignored", session.session_id)
                return existing, False
            self._sessions[session.session_id] = session
            try:
                await self._flush()
            except OSError:
                del self._sessions[session.session_id]			# ↩️ Памʼять не випереджає файл
                raise
        logger.info("💾 Session %s recorded | total=%s %s", session.session_id, session.total_amount, session.currency)
        return session, True

    async def replace(self, session: CheckoutSession) -> None:
        await self._ensure_loaded()
        async with self._lock:
            if session.session_id not in self._sessions:
                raise KeyError(session.session_id)
            previous = self._sessions[session.session_id]
            self._sessions[session.session_id] = session
            try:
                await self._flush()
            except OSError:
                self._sessions[session.session_id] = previous
                raise

    async def list(
        self,
        *,
        processed: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
    ) -> List[CheckoutSession]:
        await self._ensure_loaded()
        selected = []
        for session in self._sessions.values():
            if processed is not None and session.processed != processed:
                continue
            created = session.created_at.date() if session.created_at else None
            if start_date and (created is None or created < start_date):
                continue
            if end_date and (created is None or created > end_date):
                continue
            selected.append(session)
        selected.sort(key=lambda s: (s.created_at.timestamp() if s.created_at else 0.0, s.session_id), reverse=True)
        return selected[:max(0, limit)]

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        async with self._lock:
            if self._loaded:
                return
            try:
                async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                    content = await f.read()
                raw = json.loads(content) if content.strip() else []
                self._sessions = {s.session_id: s for s in (session_from_dict(doc) for doc in raw)}
                logger.info("📖 Завантажено %d сесій з %s", len(self._sessions), self._path)
            except FileNotFoundError:
                logger.info("📭 Файл сесій %s ще не існує", self._path)
                self._sessions = {}
            self._loaded = True

    async def _flush(self) -> None:
        payload = json.dumps([s.to_dict() for s in self._sessions.values()], indent=2, ensure_ascii=False)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = f"{self._path}.tmp"
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            os.replace(tmp_path, self._path)				# 🔀 Атомарно підміняємо
        except OSError:
            logger.exception("❌ Не вдалося зберегти журнал сесій: %s", self._path)
            if os.path.exists(tmp_path):				# 🧹 Прибираємо tmp
                os.remove(tmp_path)
            raise
        logger.debug("💾 Журнал сесій збережено (%d)", len(self._sessions))
