import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Настройка корневого логгера"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("portfolio").setLevel(level.upper())
    # SQL пишет только при DB_ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
