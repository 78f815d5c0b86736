import pandas as pd
import pytest

from econ_savings_charts.adapters import LocalStorageAdapter, S3StorageAdapter


@pytest.fixture
def storage(tmp_path):
    return LocalStorageAdapter(tmp_path / "out")


def test_raw_round_trip_and_location(storage, tmp_path):
    location = storage.write_raw("exports/a.png", b"png")

    assert location == str(tmp_path / "out" / "exports" / "a.png")
    assert storage.location("exports/a.png") == location
    assert storage.read_raw("exports/a.png") == b"png"
    assert storage.exists("exports/a.png")
    assert not storage.exists("exports/b.png")


def test_parquet_keeps_missing_means(storage):
    df = pd.DataFrame({"year": [2019, 2020], "mean_gross_savings_pct": [20.0, None]})
    storage.write_parquet(df, "processed/year_aggregates.parquet")

    back = storage.read_parquet("processed/year_aggregates.parquet")
    assert back["year"].tolist() == [2019, 2020]
    assert back["mean_gross_savings_pct"].isna().tolist() == [False, True]


def test_list_keys_is_sorted_and_relative(storage):
    storage.write_raw("exports/b.png", b"")
    storage.write_raw("exports/a.png", b"")
    storage.write_raw("processed/x.parquet", b"")

    assert storage.list_keys("exports") == ["exports/a.png", "exports/b.png"]
    assert storage.list_keys("nothing") == []


def test_missing_key_raises_file_not_found(storage):
    with pytest.raises(FileNotFoundError):
        storage.read_raw("input/absent.csv")


def test_keys_cannot_escape_root(storage):
    with pytest.raises(ValueError):
        storage.write_raw("../outside.csv", b"")


class FakeS3:
    class exceptions:
        class NoSuchKey(Exception):
            pass

    def __init__(self):
        self.objects = {}

    def put_object(self, Bucket, Key, Body):
        self.objects[(Bucket, Key)] = Body

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise self.exceptions.NoSuchKey(Key)
        body = self.objects[(Bucket, Key)]
        return {"Body": type("Body", (), {"read": lambda self: body})()}

    def list_objects_v2(self, Bucket, Prefix, MaxKeys=1000):
        keys = sorted(k for b, k in self.objects if b == Bucket and k.startswith(Prefix))
        return {"Contents": [{"Key": k} for k in keys[:MaxKeys]]}

    def get_paginator(self, name):
        client = self

        class Paginator:
            def paginate(self, Bucket, Prefix):
                yield client.list_objects_v2(Bucket, Prefix)

        return Paginator()


def test_s3_adapter_with_base_prefix():
    pytest.importorskip("boto3")
    client = FakeS3()
    storage = S3StorageAdapter("charts", base_prefix="/runs/", boto3_client=client)

    location = storage.write_raw("exports/a.png", b"png")

    assert location == "s3://charts/runs/exports/a.png"
    assert ("charts", "runs/exports/a.png") in client.objects
    assert storage.read_raw("exports/a.png") == b"png"
    assert storage.exists("exports/a.png")
    assert storage.list_keys("exports") == ["exports/a.png"]
    with pytest.raises(FileNotFoundError):
        storage.read_raw("exports/missing.png")
