"""Optional sidecar descriptor (meta.json) lookup.

The descriptor is tried next to the model first, then at the asset root. A
missing or malformed file is a normal configuration state, so every failure
here is swallowed into ``None`` by ``resolve_descriptor``.
"""
import json
import logging
import re
from pathlib import Path
from typing import List, Optional
from urllib.parse import urljoin

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from .errors import ConfigurationAbsent

log = logging.getLogger("predictor.descriptor")


class ModelDescriptor(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    feature_names: Optional[List[str]] = None
    scaler_mean: Optional[List[float]] = None
    scaler_scale: Optional[List[float]] = None
    best_model_name: Optional[str] = None

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_bad_field(cls, v, handler, info: ValidationInfo):
        # a bad field is ignored on its own; the rest of the file still counts
        try:
            v = handler(v)
        except ValidationError:
            log.debug(f"descriptor field {info.field_name} ignored: {v!r}")
            return None
        if info.field_name == "feature_names" and v is not None and len(set(v)) != len(v):
            log.debug("descriptor feature_names ignored: duplicate names")
            return None
        return v


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def resolve_location(location: str, asset_root: str = ".") -> str:
    """Anchor a relative path or URL at the asset root."""
    if is_url(location):
        return location
    if is_url(asset_root):
        return urljoin(asset_root.rstrip("/") + "/", location)
    return str(Path(asset_root) / location)


def candidate_locations(model_url: str, meta_filename: str = "meta.json") -> List[str]:
    # same folder as the model, then the root
    sibling = re.sub(r"[^/]+$", meta_filename, model_url, count=1)
    if model_url.endswith("/"):
        sibling = model_url + meta_filename
    candidates = [sibling, meta_filename]
    return list(dict.fromkeys(candidates))


async def _fetch(location: str, client: Optional[httpx.AsyncClient]) -> bytes:
    if is_url(location):
        if client is None:
            raise ConfigurationAbsent(f"no http client for {location}")
        try:
            r = await client.get(location)
        except httpx.HTTPError as e:
            raise ConfigurationAbsent(f"{location}: {e}") from e
        if not r.is_success:
            raise ConfigurationAbsent(f"{location}: HTTP {r.status_code}")
        return r.content
    try:
        return Path(location).read_bytes()
    except OSError as e:
        raise ConfigurationAbsent(f"{location}: {e}") from e


def parse_descriptor(raw: bytes) -> ModelDescriptor:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ConfigurationAbsent(f"not JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationAbsent("descriptor must be a JSON object")
    try:
        return ModelDescriptor.model_validate(data)
    except ValidationError as e:
        raise ConfigurationAbsent(f"invalid descriptor: {e.error_count()} error(s)") from e


async def resolve_descriptor(
    model_url: str,
    meta_filename: str = "meta.json",
    asset_root: str = ".",
    timeout_s: float = 2.0,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[ModelDescriptor]:
    locations = list(dict.fromkeys(
        resolve_location(c, asset_root) for c in candidate_locations(model_url, meta_filename)))
    owns_client = client is None and any(is_url(loc) for loc in locations)
    if owns_client:
        client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_s))
    try:
        for location in locations:
            try:
                descriptor = parse_descriptor(await _fetch(location, client))
            except ConfigurationAbsent as e:
                log.debug(f"descriptor candidate skipped: {e}")
                continue
            log.info(f"Loaded descriptor from {location}")
            return descriptor
    finally:
        if owns_client:
            await client.aclose()
    log.info("No descriptor found, using static configuration")
    return None
