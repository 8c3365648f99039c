# 🪪 storefront/api/dependencies.py
"""
🪪 Залежності FastAPI: контейнер та ідентичність від зовнішнього провайдера.

Ядро довіряє заголовкам `X-User-Id` / `X-User-Role` і не автентифікує саме.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from fastapi import Depends, Header, HTTPException, Request

# 🔠 Системні імпорти
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from storefront.config.setup.container import Container

ADMIN_ROLE = "admin"


def get_container(request: Request) -> Container:
    return request.app.state.container


def current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return user_id


def require_admin(
    user_id: str = Depends(current_user),
    x_user_role: Optional[str] = Header(default=None),
) -> str:
    if (x_user_role or "").strip().lower() != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user_id
