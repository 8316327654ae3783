# ⚙️ config_service.py
"""
⚙️ config_service.py: Сервіс для доступу до статичної конфігурації шлюзу.

🔹 Клас `ConfigService`:
- Завантажує вшиті дефолти `config.yaml`, користувацький YAML та змінні з .env.
- Надає єдиний метод .get() для доступу до будь-якого параметра (з опційним cast).
- Працює як Singleton; `reset()` скидає кеш для тестів.
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import os                                   # 📁 Доступ до змінних середовища
import logging                              # 🧾 Логування
import threading                            # 🔒 Захист створення singleton
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Callable, Dict, Optional  # 🧩 Типізація

logger = logging.getLogger("page_gateway.config")

DEFAULTS_PATH = Path(__file__).parent / "config.yaml"   # 📘 Вшиті значення за замовчуванням
USER_CONFIG_ENV = "PAGE_GATEWAY_CONFIG"                  # 🗂️ Шлях до користувацького YAML

# 🔑 ENV → крапковий ключ
ENV_KEYS: Dict[str, str] = {
    "PAGE_GATEWAY_API_BASE": "mangadex.api_base",
    "PAGE_GATEWAY_USER_AGENT": "http.user_agent",
    "PAGE_GATEWAY_HTTP_TIMEOUT_S": "http.timeout_s",
    "PAGE_GATEWAY_HEADLESS": "playwright.headless",
    "PAGE_GATEWAY_TEMP_DIR": "render.temp_dir",
    "PAGE_GATEWAY_HOST": "server.host",
    "PAGE_GATEWAY_PORT": "server.port",
    "PAGE_GATEWAY_LOG_LEVEL": "logging.level",
    "PAGE_GATEWAY_STRICT_REDUCED": "retrieval.strict_reduced_tier",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх конфігураційних параметрів шлюзу.
    Працює як Singleton: конфігурація зчитується лише один раз.
    """

    _instance: Optional["ConfigService"] = None   # 🧩 Singleton-екземпляр
    _lock = threading.Lock()
    _config: Dict[str, Any]                       # 📦 Обʼєднана конфігурація зі всіх джерел

    def __new__(cls):
        # ✅ Патерн Singleton: створюємо лише один екземпляр
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._config = {}
                instance._load_all_configs()
                cls._instance = instance
                logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """♻️ Забуває поточний екземпляр (наступний виклик перечитає джерела)."""
        with cls._lock:
            cls._instance = None

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Пріоритет (за зростанням): config.yaml → $PAGE_GATEWAY_CONFIG → ENV (.env)
        """

        # --- 1. Вшиті дефолти ---
        self._deep_update(self._config, self._read_yaml(DEFAULTS_PATH))

        # --- 2. Користувацький YAML ---
        load_dotenv()  # 🔐 Ініціалізує змінні середовища з файлу .env
        user_path = os.getenv(USER_CONFIG_ENV)
        if user_path:
            self._deep_update(self._config, self._read_yaml(Path(user_path)))

        # --- 3. ENV-змінні ---
        env_vars = {
            dotted: self._coerce_env(os.environ[name])
            for name, dotted in ENV_KEYS.items()
            if os.environ.get(name) not in (None, "")
        }
        # 🔁 Перетворюємо крапкові ключі в словник та обʼєднуємо з config
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")
        logger.debug("🔍 Обʼєднаний словник конфігурації: %s", self._config)

    def get(self, key: str, default: Any = None, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'render.visible_timeout_ms').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.
            cast (Callable | None): Перетворення значення (int, float...); при збої: default.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]                 # 🔎 Переходимо глибше в структуру
            else:
                logger.debug("❓ Ключ '%s' не знайдено, повертаємо значення за замовчуванням", key)
                return default
        if value is None:
            return default
        if cast is None:
            return value
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.warning("⚠️ Ключ '%s'=%r не приводиться до %s, беремо default", key, value, getattr(cast, "__name__", cast))
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """🔘 Булеве значення з урахуванням рядків 'true'/'0'/'off'."""
        value = self.get(key, default)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            return default
        return bool(value)

    def section(self, key: str) -> Dict[str, Any]:
        """📂 Повертає копію вкладеного розділу (або порожній словник)."""
        value = self.get(key, {})
        return dict(value) if isinstance(value, dict) else {}

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            logger.debug("📘 Завантаження %s", path)
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("⚠️ %s не містить мапи верхнього рівня", path)
            return {}
        return data

    @staticmethod
    def _coerce_env(raw: str) -> Any:
        """Приводить ENV-рядок до bool/int/float, якщо це очевидно."""
        lowered = raw.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            return float(raw)
        except ValueError:
            return raw

    def _unflatten_dict(self, d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'render.temp_dir' → {'render': {'temp_dir': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split('.')
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value                 # 🧷 Вставляємо значення у найглибший рівень
        return result

    def _deep_update(self, source: Dict, overrides: Dict) -> None:
        """
        🔁 Рекурсивно обʼєднує два словника (оновлення значень).
        Якщо значення: словник, обʼєднує його глибоко.
        """
        for key, value in overrides.items():
            if (
                isinstance(value, dict) and
                key in source and
                isinstance(source[key], dict)
            ):
                self._deep_update(source[key], value)  # 🔁 Глибоке обʼєднання
            else:
                source[key] = value
