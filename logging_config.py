"""
Logging Configuration
Sets up console and optional file logging for the foliage generator.
"""
import logging
import sys

LOGGER_NAMES = ('lsystems', 'rules', 'turtle_state', 'plot_events')


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configures the loggers of the generator modules.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w',
                                            encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # avoid duplicate output when called more than once
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()

        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger('lsystems').debug('Logging initialized.')
