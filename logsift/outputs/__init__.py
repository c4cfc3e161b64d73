from .file_sink import FileLineSink
from .http_sink import HttpLineSink

__all__ = ['FileLineSink', 'HttpLineSink']
