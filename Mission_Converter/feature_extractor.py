"""
Feature extraction for mission set JSON.

Accepts any parsed JSON value and turns it into an ordered list of GeoJSON
Point features. Three input shapes are recognized, checked in this order:

    FeatureCollection   {"type": "FeatureCollection", "features": [...]}
    flat point list     [{"lat": ..., "lng": ..., "title"|"name": ...}, ...]
    mission set         {"missions": [{"portals": [...]}, ...]}

Anything else yields an empty list. Nothing in this module raises for bad
input; portals without usable coordinates are skipped.
"""

from .utils import is_number

SHAPE_FEATURE_COLLECTION = 'FeatureCollection'
SHAPE_FLAT_POINTS = 'FlatPointList'
SHAPE_MISSION_SET = 'MissionPortalTree'
SHAPE_UNRECOGNIZED = 'Unrecognized'


def make_feature(title, longitude, latitude):
    """Build a GeoJSON Point feature."""
    return {
        'type': 'Feature',
        'properties': {'title': title},
        'geometry': {'type': 'Point', 'coordinates': [longitude, latitude]}
    }


def feature_title(feature):
    """Return the title stored on a feature, or an empty string."""
    if not isinstance(feature, dict):
        return ''
    properties = feature.get('properties')
    if not isinstance(properties, dict):
        return ''
    title = properties.get('title')
    return title if isinstance(title, str) else ''


def feature_coordinates(feature):
    """Return (longitude, latitude) for a Point feature, or None."""
    if not isinstance(feature, dict):
        return None
    geometry = feature.get('geometry')
    if not isinstance(geometry, dict) or geometry.get('type') != 'Point':
        return None
    coords = geometry.get('coordinates')
    if not isinstance(coords, list) or len(coords) < 2:
        return None
    lng, lat = coords[0], coords[1]
    if is_number(lng) and is_number(lat):
        return lng, lat
    return None


def portal_placeholder_title(mission_index, portal_index):
    """Title for an untitled portal, numbered from 1."""
    return f"Portal {mission_index + 1}-{portal_index + 1}"


def classify_input(raw):
    """Return the shape tag for a parsed JSON value."""
    if isinstance(raw, dict):
        if raw.get('type') == 'FeatureCollection' and isinstance(raw.get('features'), list):
            return SHAPE_FEATURE_COLLECTION
    elif isinstance(raw, list):
        if raw and isinstance(raw[0], dict) and is_number(raw[0].get('lat')):
            return SHAPE_FLAT_POINTS

    if isinstance(raw, dict) and isinstance(raw.get('missions'), list):
        return SHAPE_MISSION_SET

    return SHAPE_UNRECOGNIZED


def extract_feature_collection(raw):
    """Features of a FeatureCollection, unchanged."""
    return raw['features']


def extract_flat_points(raw):
    """One feature per element of a flat point list. No element is skipped."""
    features = []
    for point in raw:
        if not isinstance(point, dict):
            point = {}
        title = point.get('title') or point.get('name') or ''
        features.append(make_feature(title, point.get('lng'), point.get('lat')))
    return features


def is_present(value):
    """True unless value is None, False, zero, NaN or an empty string.

    Empty dicts and lists count as present.
    """
    if value is None or value is False or value == '':
        return False
    if is_number(value):
        return value == value and value != 0
    return True


def first_present(*values):
    """First value that is_present, else the last one."""
    for value in values:
        if is_present(value):
            return value
    return values[-1]


def _numeric_pair(source, lat_key, lng_key):
    if not isinstance(source, dict):
        return None
    lat = source.get(lat_key)
    lng = source.get(lng_key)
    if is_number(lat) and is_number(lng):
        return lng, lat
    return None


def resolve_portal_coordinates(portal):
    """Return (longitude, latitude) for a portal, or None if unresolvable."""
    if not isinstance(portal, dict):
        return None

    location = first_present(portal.get('location'), portal.get('lat'), portal.get('geometry'))

    coords = _numeric_pair(location, 'latitude', 'longitude')
    if coords is None:
        coords = _numeric_pair(location, 'lat', 'lng')
    if coords is None:
        geometry = portal.get('geometry')
        if isinstance(geometry, dict) and geometry.get('type') == 'Point':
            points = geometry.get('coordinates')
            if isinstance(points, list) and len(points) >= 2:
                if is_number(points[0]) and is_number(points[1]):
                    coords = points[0], points[1]
    return coords


def mission_portals(mission):
    """Portal list of a mission; anything that is not a list counts as empty."""
    if not isinstance(mission, dict):
        return []
    portals = mission.get('portals')
    return portals if isinstance(portals, list) else []


def extract_portal_feature(portal, mission_index, portal_index):
    """Feature for one portal, or None when it has no usable coordinates."""
    coords = resolve_portal_coordinates(portal)
    if coords is None:
        return None
    title = portal.get('title') or portal_placeholder_title(mission_index, portal_index)
    return make_feature(title, coords[0], coords[1])


def extract_mission_features(raw, debug=False):
    """Walk missions then portals, keeping portals with resolvable coordinates."""
    features = []
    skipped = 0
    for mi, mission in enumerate(raw['missions']):
        for pi, portal in enumerate(mission_portals(mission)):
            feature = extract_portal_feature(portal, mi, pi)
            if feature is None:
                skipped += 1
                continue
            features.append(feature)

    if debug and skipped:
        print(f"Warning: Skipped {skipped} portal(s) without coordinates")
    return features


def normalize(raw=None, debug=False):
    """Turn any parsed JSON value into a list of point features."""
    shape = classify_input(raw)
    if debug:
        print(f"Detected input shape: {shape}")

    if shape == SHAPE_FEATURE_COLLECTION:
        return extract_feature_collection(raw)
    if shape == SHAPE_FLAT_POINTS:
        return extract_flat_points(raw)
    if shape == SHAPE_MISSION_SET:
        return extract_mission_features(raw, debug)
    return []
