import logging
from typing import Any, Dict


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает логгер проекта ``chunked_kmeans``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("chunked_kmeans")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_run_prefix(meta: Dict[str, Any]) -> str:
    """
    Текстовый префикс для логов одного прогона.

    Ожидается словарь с ключами ``strategy``, ``N``, ``K`` и опциональным
    ``mappers`` (для последовательной стратегии его нет).
    """
    mappers = meta.get("mappers")
    mappers_part = f" mappers={mappers}" if mappers else ""
    return f"[strategy={meta['strategy']}{mappers_part} N={meta['N']} K={meta['K']}]"
