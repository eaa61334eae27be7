__all__ = [
    "binder",
    "binder_recipe",
    "recipe",
    "share_grant",
    "share_link",
    "user",
]
