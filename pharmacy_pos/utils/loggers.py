import logging

def get_logger(name="pharmacy_pos"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(ch)
    return logger


def log_event(logger, op, phase, message, extra=None, level=logging.INFO):
    """
    One operational line: "<op>/<phase>: message key=value ...".
    The key/values are also attached to the record as `event`.
    """
    event = {"op": op, "phase": phase}
    for k, v in (extra or {}).items():
        event.setdefault(k, v)
    fields = " ".join(f"{k}={v}" for k, v in event.items() if k not in ("op", "phase"))
    logger.log(level, "%s/%s: %s%s", op, phase, message, f" {fields}" if fields else "", extra={"event": event})
