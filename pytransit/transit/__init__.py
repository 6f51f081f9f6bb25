# pytransit/transit/__init__.py
"""
Request building, retrying execution and response decoding for transit calls.
"""
from pytransit.transit.decoder import decode_response, parse_body
from pytransit.transit.executor import RetryContext, RetryingExecutor
from pytransit.transit.request_builder import (
    build_request,
    encode_body,
    endpoint_path,
    make_request,
)

__all__ = [
    "RetryContext",
    "RetryingExecutor",
    "build_request",
    "decode_response",
    "encode_body",
    "endpoint_path",
    "make_request",
    "parse_body",
]
