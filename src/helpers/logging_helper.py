import logging
from functools import wraps

import config


def log_entrance(logger=logging.getLogger(), log_level=logging.INFO):
    '''
    Logs the name of the decorated function on every call
    '''
    def wrap(func):
        @wraps(func)
        def wrapped_func(*args, **kwargs):
            logger.log(log_level, "Enter %s", func.__name__)
            return func(*args, **kwargs)

        return wrapped_func
    return wrap


def verbosity_to_log_level(verbose):
    '''
    Maps the number of -v flags to a log level (no flag: DEBUG)
    '''
    log_levels = [logging.NOTSET, logging.CRITICAL, logging.ERROR,
                  logging.WARNING, logging.INFO, logging.DEBUG]
    log_level = log_levels[-1]
    if verbose is not None and 0 <= verbose < len(log_levels):
        log_level = log_levels[verbose]
    return log_level


def configure_logging(verbose, log_path=None):
    level = verbosity_to_log_level(verbose)
    logging.basicConfig(level=level, filename=log_path,
                        format=config.LOG_FORMAT)
    return level
