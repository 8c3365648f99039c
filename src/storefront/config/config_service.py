# ⚙️ config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації вітрини.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з config.yaml, config.json та .env.
- Надає єдиний метод .get() для доступу до будь-якого параметра.
- Дозволяє точкові оверрайди через .update() (тести, вбудовування).
- Працює як Singleton.
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import copy                                 # 🧬 Ізоляція оверрайдів
import os                                   # 📁 Доступ до змінних середовища
import json                                 # 📄 Робота з JSON-файлами
import logging                              # 🧾 Логування
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Dict, Optional      # 🧩 Типізація

logger = logging.getLogger("storefront.config")

# 🔐 Змінні середовища → крапкові ключі конфігу
ENV_KEYS: Dict[str, str] = {
    "STOREFRONT_CATALOG_URL": "catalog.base_url",
    "STOREFRONT_ADDRESS_URL": "address.base_url",
    "STOREFRONT_SESSIONS_FILE": "sessions.file",
    "STOREFRONT_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних конфігураційних параметрів вітрини.
    Працює як Singleton — конфігурація зчитується лише один раз.
    """

    _instance = None                          # 🧩 Singleton-екземпляр
    _config: Dict[str, Any] = {}              # 📦 Обʼєднана конфігурація зі всіх джерел

    def __new__(cls):
        # ✅ Патерн Singleton: створюємо лише один екземпляр
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = {}
            cls._instance._load_all_configs()  # 🔄 Завантаження конфігурації під час першого виклику
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """♻️ Скидає singleton — наступний виклик перечитає всі джерела."""
        cls._instance = None
        logger.debug("♻️ ConfigService скинуто")

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Порядок накладання: config.yaml → config.json → .env (останнє перемагає).
        """
        base_dir = Path(__file__).parent

        # --- 1. YAML-файл ---
        try:
            with open(base_dir / "config.yaml", "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning(f"⚠️ Не вдалося завантажити config.yaml: {e}")

        # --- 2. JSON-файл (необовʼязковий) ---
        json_path = base_dir / "config.json"
        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    self._deep_update(self._config, json.load(f))
            except json.JSONDecodeError as e:
                logger.warning(f"⚠️ Не вдалося завантажити config.json: {e}")

        # --- 3. .env змінні ---
        load_dotenv()
        env_vars = {
            dotted: os.getenv(env_name)
            for env_name, dotted in ENV_KEYS.items()
            if os.getenv(env_name) is not None
        }
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'checkout.settlement_currency').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for k in key.split('.'):                  # ⛓️ Розбиваємо ключ за крапкою
            if isinstance(value, dict) and k in value:
                value = value[k]                 # 🔎 Переходимо глибше в структуру
            else:
                return default                   # ❌ Якщо ключ не знайдено, повертаємо дефолт
        return value

    def update(self, overrides: Dict[str, Any]) -> None:
        """
        🧷 Глибоко накладає оверрайди поверх поточної конфігурації.

        Підтримує як вкладені словники, так і крапкові ключі:
        `{"checkout.settlement_currency": "USD"}`.
        """
        nested = self._unflatten_dict({k: v for k, v in overrides.items() if "." in k})
        plain = {k: v for k, v in overrides.items() if "." not in k}
        self._deep_update(self._config, copy.deepcopy(plain))
        self._deep_update(self._config, copy.deepcopy(nested))
        logger.debug("🧷 Застосовано оверрайди конфігу: %s", list(overrides))

    def as_dict(self, section: Optional[str] = None) -> Dict[str, Any]:
        """📤 Повертає копію всієї конфігурації або її секції."""
        node = self.get(section, {}) if section else self._config
        return copy.deepcopy(node) if isinstance(node, dict) else {}

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================

    def _unflatten_dict(self, d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'catalog.base_url' → {'catalog': {'base_url': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split('.')                   # 🧩 Розбиваємо ключ на частини
            d_ref = result
            for part in parts[:-1]:                  # 🔁 Ітеруємось по вкладеності
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value                 # 🧷 Вставляємо значення у найглибший рівень
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """
        🔁 Рекурсивно обʼєднує два словника (оновлення значень).
        Якщо значення — словник, обʼєднує його глибоко.
        """
        for key, value in overrides.items():
            if (
                isinstance(value, dict) and
                key in source and
                isinstance(source[key], dict)
            ):
                self._deep_update(source[key], value)  # 🔁 Глибоке обʼєднання
            else:
                source[key] = value                    # 🧩 Перезапис простого значення
