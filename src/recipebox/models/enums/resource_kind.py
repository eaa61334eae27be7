import enum


class ResourceKind(str, enum.Enum):
    recipe = "recipe"
    binder = "binder"
