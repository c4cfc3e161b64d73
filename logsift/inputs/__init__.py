from .file_input import FileLineSource

__all__ = ['FileLineSource']
