from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import pandas as pd


class StorageAdapter(ABC):
    """
    Where chart inputs are read from and artefacts are written to.

    Keys are logical, slash-separated names:
    - "input/economy-and-growth.csv"        input table read by key
    - "processed/year_aggregates.parquet"   per-year savings means
    - "exports/savings_growth_charts.png"   rendered charts

    Every write returns the resolved location, which is what gets printed.
    """

    @abstractmethod
    def location(self, key: str) -> str:
        """Human-readable location for `key` ("output/exports/x.png", "s3://bucket/exports/x.png")."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """True when something is stored under `key`."""

    @abstractmethod
    def write_raw(self, key: str, content: bytes) -> str:
        """Store bytes under `key`, replacing any previous content."""

    @abstractmethod
    def read_raw(self, key: str) -> bytes:
        """Bytes stored under `key`. Raises FileNotFoundError if absent."""

    @abstractmethod
    def list_keys(self, prefix: str) -> List[str]:
        """Sorted logical keys below `prefix`."""

    def write_parquet(self, df: pd.DataFrame, key: str) -> str:
        buffer = io.BytesIO()
        df.to_parquet(buffer, index=False)
        return self.write_raw(key, buffer.getvalue())

    def read_parquet(self, key: str) -> pd.DataFrame:
        return pd.read_parquet(io.BytesIO(self.read_raw(key)))


class LocalStorageAdapter(StorageAdapter):
    """
    Filesystem storage; keys are paths below `root_dir`.

        LocalStorageAdapter("output").write_raw("exports/charts.png", png)
        -> output/exports/charts.png

    Keys may not climb out of `root_dir`.
    """

    def __init__(self, root_dir: Path | str = ".") -> None:
        self.root_dir = Path(root_dir)

    def _path(self, key: str) -> Path:
        parts = Path(key.lstrip("/")).parts
        if ".." in parts:
            raise ValueError(f"Storage key escapes the storage root: {key!r}")
        return self.root_dir.joinpath(*parts)

    def location(self, key: str) -> str:
        return str(self._path(key))

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def write_raw(self, key: str, content: bytes) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    def read_raw(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def list_keys(self, prefix: str) -> List[str]:
        base = self._path(prefix)
        if not base.is_dir():
            return []
        return sorted(p.relative_to(self.root_dir).as_posix() for p in base.rglob("*") if p.is_file())


class S3StorageAdapter(StorageAdapter):
    """
    S3 storage via boto3 (install the `cloud` extra).

    Logical keys are stored below an optional `base_prefix` in one bucket and
    listed back without it.
    """

    def __init__(
        self,
        bucket: str,
        *,
        base_prefix: Optional[str] = None,
        boto3_client: Optional["boto3.client"] = None,
    ) -> None:
        import boto3  # only needed when artefacts go to S3

        self.bucket = bucket
        self.base_prefix = (base_prefix or "").strip("/")
        self._s3 = boto3_client or boto3.client("s3")

    def _object_key(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.base_prefix}/{key}" if self.base_prefix else key

    def _logical_key(self, object_key: str) -> str:
        if self.base_prefix and object_key.startswith(self.base_prefix + "/"):
            return object_key[len(self.base_prefix) + 1 :]
        return object_key

    def location(self, key: str) -> str:
        return f"s3://{self.bucket}/{self._object_key(key)}"

    def exists(self, key: str) -> bool:
        resp = self._s3.list_objects_v2(Bucket=self.bucket, Prefix=self._object_key(key), MaxKeys=1)
        return any(obj["Key"] == self._object_key(key) for obj in resp.get("Contents") or [])

    def write_raw(self, key: str, content: bytes) -> str:
        self._s3.put_object(Bucket=self.bucket, Key=self._object_key(key), Body=content)
        return self.location(key)

    def read_raw(self, key: str) -> bytes:
        try:
            resp = self._s3.get_object(Bucket=self.bucket, Key=self._object_key(key))
        except self._s3.exceptions.NoSuchKey as exc:
            raise FileNotFoundError(self.location(key)) from exc
        return resp["Body"].read()

    def list_keys(self, prefix: str) -> List[str]:
        object_prefix = self._object_key(prefix).rstrip("/") + "/"
        keys: List[str] = []
        for page in self._s3.get_paginator("list_objects_v2").paginate(Bucket=self.bucket, Prefix=object_prefix):
            keys.extend(self._logical_key(obj["Key"]) for obj in page.get("Contents") or [])
        return sorted(keys)


__all__ = ["StorageAdapter", "LocalStorageAdapter", "S3StorageAdapter"]
