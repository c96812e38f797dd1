"""
Render Option Validation
========================

Normalizes a raw render request into a RenderRequest. Runs before any
browser work so invalid requests never allocate resources.
"""

import json
import math
import re
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from image_renderer.config.logging import get_logger
from image_renderer.core.rendering.errors import BadRequestError, OverridesParseError
from image_renderer.models.schemas import (
    ALLOWED_ENCODINGS,
    RawRenderRequest,
    RenderOverrides,
    RenderRequest,
)

logger = get_logger(__name__)

DEFAULT_WIDTH = 1000
DEFAULT_HEIGHT = 500
DEFAULT_TIMEOUT = 30

MIN_SIZE = 10
MAX_SIZE = 3000

# Out of range sizes fall back to these, they are not clamped.
FALLBACK_WIDTH = 2500
FALLBACK_HEIGHT = 1500

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> Optional[int]:
    """Parse leading decimal digits the way query-string callers expect.

    "800" and "800px" both give 800; anything without leading digits gives None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def _size(value: Any, default: int, fallback: int) -> int:
    size = parse_int(value) or default
    if size > MAX_SIZE or size < MIN_SIZE:
        return fallback
    return size


def _timeout(value: Any) -> int:
    timeout = parse_int(value)
    if not timeout or timeout < 0:
        return DEFAULT_TIMEOUT
    return timeout


def _encoding(value: Optional[str]) -> str:
    encoding = "png" if value is None or value == "" else value
    if encoding not in ALLOWED_ENCODINGS:
        raise BadRequestError(f"Unsupported encoding {encoding}")
    return encoding


def parse_overrides(json_data: Optional[Union[str, Mapping[str, Any]]]) -> RenderOverrides:
    """Decode jsonData into RenderOverrides.

    Raises:
        OverridesParseError: If jsonData text is not valid JSON
        BadRequestError: If the decoded data is not an object or has invalid fields
    """
    if not json_data:
        return RenderOverrides()

    if isinstance(json_data, str):
        try:
            data = json.loads(json_data)
        except json.JSONDecodeError as e:
            raise OverridesParseError(f"Invalid jsonData: {e}", cause=e) from e
    else:
        data = dict(json_data)

    if not isinstance(data, dict):
        raise BadRequestError(f"jsonData must be an object, got {type(data).__name__}")

    try:
        return RenderOverrides.model_validate(data)
    except ValidationError as e:
        raise BadRequestError(f"Invalid jsonData: {e}", cause=e) from e


def validate_options(options: Union[RawRenderRequest, Mapping[str, Any]]) -> RenderRequest:
    """
    Validate and normalize a render request.

    Args:
        options: Raw request, as a model or a mapping using camelCase or snake_case keys

    Returns:
        Normalized RenderRequest

    Raises:
        BadRequestError: If the encoding is unsupported or the request is malformed
        OverridesParseError: If jsonData cannot be parsed
    """
    if not isinstance(options, RawRenderRequest):
        try:
            options = RawRenderRequest.model_validate(options)
        except ValidationError as e:
            raise BadRequestError(f"Invalid render request: {e}", cause=e) from e

    encoding = _encoding(options.encoding)
    overrides = parse_overrides(options.json_data)
    logger.debug("Render overrides", json_data=overrides.to_kwargs())

    values: Dict[str, Any] = {
        "url": options.url,
        "width": _size(options.width, DEFAULT_WIDTH, FALLBACK_WIDTH),
        "height": _size(options.height, DEFAULT_HEIGHT, FALLBACK_HEIGHT),
        "file_path": options.file_path or None,
        "timeout": _timeout(options.timeout),
        "render_key": options.render_key,
        "domain": options.domain,
        "timezone": options.timezone or None,
        "encoding": encoding,
        "json_data": overrides,
    }
    return RenderRequest(**values)
