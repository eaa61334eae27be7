import logging


def canonical_only(record: logging.LogRecord):
    return record.__dict__.get("canonical", False)


class CanonicalFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return bool(canonical_only(record))
