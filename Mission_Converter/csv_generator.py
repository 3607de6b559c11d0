import io
import re
import csv

from .feature_extractor import (
    SHAPE_MISSION_SET, classify_input, normalize, mission_portals,
    resolve_portal_coordinates, feature_coordinates, feature_title
)

CSV_HEADER = ["Mission", "Index", "Title", "Description", "Latitude", "Longitude", "Image"]


def clean_description(text):
    """Collapse runs of whitespace into single spaces."""
    return re.sub(r'\s+', ' ', str(text or '')).strip()


def portal_rows(raw):
    """One row per portal of a mission set; portals without coordinates keep blank cells."""
    rows = []
    for mi, mission in enumerate(raw['missions']):
        for pi, portal in enumerate(mission_portals(mission)):
            if not isinstance(portal, dict):
                portal = {}
            coords = resolve_portal_coordinates(portal)
            lng, lat = coords if coords is not None else ('', '')
            rows.append([
                mi + 1,
                pi + 1,
                portal.get('title') or '',
                clean_description(portal.get('description')),
                lat,
                lng,
                portal.get('imageUrl') or '',
            ])
    return rows


def feature_rows(features):
    """Rows for normalized features, all listed under mission 1."""
    rows = []
    for i, feature in enumerate(features):
        coords = feature_coordinates(feature)
        lng, lat = coords if coords is not None else ('', '')
        rows.append([1, i + 1, feature_title(feature), '', lat, lng, ''])
    return rows


def build_csv(raw, debug=False):
    """Build the portal table as CSV text with every field quoted."""
    if classify_input(raw) == SHAPE_MISSION_SET:
        rows = portal_rows(raw)
    else:
        rows = feature_rows(normalize(raw, debug))

    if debug:
        print(f"Built CSV with {len(rows)} row(s)")

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(CSV_HEADER)
    writer.writerows(rows)
    return output.getvalue()
