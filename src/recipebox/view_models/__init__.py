from pydantic import model_validator


def record_type_validator():
    return model_validator(mode="after")


def set_record_type(cls, data):
    """Stamp the concrete view model's class name onto the serialized object as ``recordType``."""
    if data is None:
        return None

    data.record_type = cls.__name__
    return data
