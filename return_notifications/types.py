"""Shared type aliases for the return-notification package."""

from __future__ import annotations

from typing import Any, Mapping

RawRequest = Mapping[str, Any]
TemplateData = dict[str, Any]
ResultDict = dict[str, Any]
Record = Mapping[str, Any]
