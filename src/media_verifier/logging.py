import logging
import sys

from pythonjsonlogger import jsonlogger


def setup_logging():
    """
    Configures and sets up structured JSON logging for the verifier.

    Installs a JSON formatter with timestamp, level, logger name, message,
    trace_id and span_id on a single stdout handler attached to the root
    logger. pika and the MinIO HTTP pool are quietened to WARNING so the
    queue worker does not log every frame it reads.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in ["pika", "urllib3"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return root_logger
