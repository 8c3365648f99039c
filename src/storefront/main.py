""" 🚀 main.py — запуск HTTP-сервісу вітрини креаторів.

Цей модуль:
- Ініціалізує логування з `config.yaml` (секція `logging`)
- Збирає контейнер залежностей і FastAPI-застосунок
- Запускає uvicorn на `api.host` / `api.port`
"""

# 🌐 Зовнішні бібліотеки
import uvicorn

# 🧩 Внутрішні модулі проєкту
from storefront.api import create_app
from storefront.config import ConfigService
from storefront.config.setup.container import Container, bootstrap_logging


def main() -> None:
    """🚀 Точка входу `storefront`."""
    logger = bootstrap_logging()
    config = ConfigService()
    app = create_app(Container(config))
    host = str(config.get("api.host", "0.0.0.0"))
    port = int(config.get("api.port", 8080))
    logger.info("🚀 Storefront API слухає %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
