from .common import DISPLAY_TIME_FORMAT, format_address, local_timestamp

__all__ = ["DISPLAY_TIME_FORMAT", "format_address", "local_timestamp"]
