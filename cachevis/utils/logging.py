import logging
def get_logger(name:str="cachevis", level:int=logging.INFO):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
