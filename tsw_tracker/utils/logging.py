"""Shared logging configuration."""
import os
import sys
import json
import traceback
from typing import Optional
from aws_lambda_powertools import Logger

DEFAULT_SERVICE_NAME = "tsw-insights"

def format_exception(exc_info):
    """Format exception info into a single line."""
    if exc_info is True:
        exc_info = sys.exc_info()

    if exc_info and isinstance(exc_info, tuple) and len(exc_info) == 3:
        try:
            trace = ''.join(traceback.format_exception(*exc_info))
            return trace.replace('\n', ' | ').strip()
        except Exception as e:
            return f"Error formatting exception: {str(e)}"
    return None

class SingleLineLogger(Logger):
    """Logger that keeps exception tracebacks on a single line."""

    def exception(self, message, *args, **kwargs):
        exc_info = kwargs.pop('exc_info', True)
        extra = kwargs.pop('extra', {})
        extra['exception'] = format_exception(exc_info)
        kwargs['exc_info'] = False
        kwargs['extra'] = extra
        super().exception(message, *args, **kwargs)

def build_logger(service: Optional[str] = None) -> SingleLineLogger:
    """
    Create the insights logger from the environment.

    Args:
        service: Service name, defaults to POWERTOOLS_SERVICE_NAME or "tsw-insights"

    Returns:
        Logger at LOG_LEVEL with the deployment STAGE attached to every record
    """
    built = SingleLineLogger(
        service=service or os.environ.get('POWERTOOLS_SERVICE_NAME', DEFAULT_SERVICE_NAME),
        level=os.environ.get('LOG_LEVEL', 'INFO'),
        # Reports carry dates and enums
        json_serializer=lambda obj: json.dumps(obj, default=str),
        use_rfc3339=True
    )
    built.append_keys(stage=os.environ.get('STAGE', 'dev'))
    return built

# Every service module logs through this instance
logger = build_logger()
