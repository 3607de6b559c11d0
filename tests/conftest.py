# tests/conftest.py
import json
import pytest


@pytest.fixture
def mission_set():
    """Two missions; the second portal of mission 1 has no coordinates."""
    return {
        "missionSetName": "Wellington Day",
        "missionSetDescription": "Walk & talk",
        "missions": [
            {
                "missionTitle": "Harbour",
                "portals": [
                    {"title": "Wharf", "location": {"latitude": -41.29, "longitude": 174.77},
                     "description": "Old\n  wharf   building", "imageUrl": "https://img.example/1.jpg",
                     "guid": "abc.16"},
                    {"title": "Nowhere"},
                    {"location": {"lat": -41.30, "lng": 174.78}},
                ],
            },
            {
                "portals": [
                    {"title": "Point", "geometry": {"type": "Point", "coordinates": [174.79, -41.31]}},
                ],
            },
        ],
    }


@pytest.fixture
def write_json(tmp_path):
    def _write(data, name="points.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
