import dataclasses
import json
import typing as tp
from datetime import datetime

from pasteur._core._aggregate import EntityList
from pasteur._utils import format_http_date

JSON_MIME_TYPE = "application/json"

__all__ = ("JSON_MIME_TYPE", "json_serializer")


def _encode_default(obj: tp.Any) -> tp.Any:
    if isinstance(obj, EntityList):
        return list(obj)
    if isinstance(obj, datetime):
        return format_http_date(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def json_serializer(obj: tp.Any) -> bytes:
    """
    Serializes an object into compact UTF-8 JSON.

    Entity lists become arrays, dataclasses become objects and datetimes
    become HTTP-dates.
    Anything else `json` cannot handle raises TypeError, which is left to
    propagate to the caller.

    :param obj: The object to render
    :type obj: tp.Any
    :return: Serialized body
    :rtype: bytes
    """
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=_encode_default).encode("utf-8")
