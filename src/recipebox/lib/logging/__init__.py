from recipebox.lib.logging.logged_route import LoggedRoute

__all__ = [
    "LoggedRoute",
]
