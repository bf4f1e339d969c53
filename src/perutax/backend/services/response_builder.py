"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Response, jsonify


def build_calculation_response(payload: Mapping[str, Any]) -> tuple[Response, int]:
    """Return a Flask JSON response for the calculation ``payload``.

    The response advertises the locale its labels were rendered in.
    """

    response = jsonify(payload)
    meta = payload.get("meta")
    if isinstance(meta, Mapping) and meta.get("locale"):
        response.headers["Content-Language"] = str(meta["locale"])
    return response, 200
