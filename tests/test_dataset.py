import json

import pytest

from myturn_watch.core import dataset
from myturn_watch.core.models import GeoPoint


def zip_record(lat, lng, **extra_fields):
    fields = {
        "city": "San Francisco",
        "zip": "94103",
        "dst": 1,
        "geopoint": [lat, lng],
        "latitude": lat,
        "longitude": lng,
        "state": "CA",
        "timezone": -8,
    }
    fields.update(extra_fields)
    return {
        "datasetid": "us-zip-code-latitude-and-longitude",
        "recordid": "abc",
        "fields": fields,
        "geometry": {"type": "Point", "coordinates": [lng, lat]},
        "record_timestamp": "2018-02-09T09:33:38.603-07:00",
    }


def write_dataset(tmp_path, data):
    path = tmp_path / "zips.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_points_preserves_file_order(tmp_path):
    path = write_dataset(tmp_path, [zip_record(37.77, -122.41), zip_record(34.05, -118.24)])

    points = dataset.load_points(path)

    assert points == [GeoPoint(37.77, -122.41), GeoPoint(34.05, -118.24)]


def test_load_points_rejects_unknown_fields(tmp_path):
    path = write_dataset(tmp_path, [zip_record(37.77, -122.41, county="SF")])

    with pytest.raises(dataset.DatasetError, match="record 0"):
        dataset.load_points(path)


def test_load_points_rejects_unknown_top_level_key(tmp_path):
    record = zip_record(37.77, -122.41)
    record["extra"] = True
    path = write_dataset(tmp_path, [record])

    with pytest.raises(dataset.DatasetError):
        dataset.load_points(path)


def test_load_points_requires_coordinates(tmp_path):
    record = zip_record(37.77, -122.41)
    del record["fields"]["latitude"]
    path = write_dataset(tmp_path, [record])

    with pytest.raises(dataset.DatasetError):
        dataset.load_points(path)


def test_load_points_missing_file(tmp_path):
    with pytest.raises(dataset.DatasetError, match="cannot read"):
        dataset.load_points(tmp_path / "missing.json")


def test_load_points_invalid_json(tmp_path):
    path = tmp_path / "zips.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(dataset.DatasetError, match="not valid JSON"):
        dataset.load_points(path)


def test_parse_points_requires_array():
    with pytest.raises(dataset.DatasetError):
        dataset.parse_points({"fields": {}})
