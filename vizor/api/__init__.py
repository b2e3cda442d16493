from .app import LatestCompletion, create_app, create_file_app

__all__ = [
    "LatestCompletion",
    "create_app",
    "create_file_app",
]
