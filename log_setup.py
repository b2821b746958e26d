import logging
from datetime import datetime

from config import LOG_CONFIG

start_time = datetime.now()

# ---- file logger
def set_log(name, file):
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):  # re-running a server/client in one process
        logger.removeHandler(handler)
        handler.close()
    handler = logging.FileHandler(file, mode='w', encoding='utf-8')
    formatter = logging.Formatter(LOG_CONFIG["format"], datefmt=LOG_CONFIG["datefmt"])
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger

def log_print(logger, message):
    logger.info(f"[System Clock : {get_system_clock()}ms] {message}")

# ---- ms since this process started
def get_system_clock():
    return round((datetime.now() - start_time).total_seconds() * 1000, 1)
