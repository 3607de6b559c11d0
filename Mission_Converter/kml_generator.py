import re
import html
from lxml import etree

from .feature_extractor import (
    SHAPE_MISSION_SET, classify_input, normalize, mission_portals,
    resolve_portal_coordinates, feature_coordinates, feature_title
)

KML_NS = 'http://www.opengis.net/kml/2.2'
NAMESPACES = {'kml': KML_NS}

# 24 distinct, readable colours (roughly Tableau/D3 palettes plus a few extras)
PALETTE = [
    '#E6194B', '#3CB44B', '#0082C8', '#F58231', '#911EB4', '#46F0F0',
    '#F032E6', '#D2F53C', '#FABEBE', '#008080', '#E6BEFF', '#AA6E28',
    '#800000', '#FFD8B1', '#000080', '#808000', '#F0E442', '#4E79A7',
    '#59A14F', '#E15759', '#EDC948', '#B07AA1', '#76B7B2', '#FF9DA7'
]

POINT_ICON_HREF = 'https://www.gstatic.com/mapspro/images/stock/959-wht-circle-blank.png'


def _el(parent, tag, text=None):
    elem = etree.SubElement(parent, f"{{{KML_NS}}}{tag}")
    if text is not None:
        elem.text = text
    return elem


def kml_color(rgb, alpha='FF'):
    """Convert CSS #RRGGBB to KML AABBGGRR."""
    match = re.search(r'([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})', (rgb or '').replace('#', ''))
    if not match:
        return (alpha + 'FFFFFF').upper()
    r, g, b = match.groups()
    return (alpha + b + g + r).upper()


def mission_title(mission, index):
    """Display title of a mission, 'Mission 01' style when untitled."""
    title = mission.get('missionTitle') if isinstance(mission, dict) else None
    return title or f"Mission {index + 1:02d}"


def collect_groups(raw, debug=False):
    """Group resolvable points for rendering, one group per mission.

    Inputs that are not mission sets are normalized and returned as a single
    group; features without numeric coordinates are left out.
    """
    groups = []
    if classify_input(raw) == SHAPE_MISSION_SET:
        for mi, mission in enumerate(raw['missions']):
            points = []
            for portal in mission_portals(mission):
                coords = resolve_portal_coordinates(portal)
                if coords is None:
                    continue
                points.append({
                    'title': portal.get('title') or 'Untitled',
                    'longitude': coords[0],
                    'latitude': coords[1],
                    'description': portal.get('description'),
                    'imageUrl': portal.get('imageUrl'),
                    'guid': portal.get('guid'),
                })
            groups.append({'title': mission_title(mission, mi), 'points': points})
        return groups

    points = []
    for feature in normalize(raw, debug):
        coords = feature_coordinates(feature)
        if coords is None:
            if debug:
                print(f"Warning: Feature without point coordinates skipped: {feature_title(feature) or 'Untitled'}")
            continue
        points.append({
            'title': feature_title(feature) or 'Untitled',
            'longitude': coords[0],
            'latitude': coords[1],
        })
    if points:
        groups.append({'title': 'Points', 'points': points})
    return groups


def add_style_pair(doc, index, rgb):
    """Add the point and line styles for one group."""
    point_style = _el(doc, 'Style')
    point_style.set('id', f"m{index}-point")
    icon_style = _el(point_style, 'IconStyle')
    _el(icon_style, 'color', kml_color(rgb, 'FF'))
    _el(icon_style, 'scale', '0.3')
    icon = _el(icon_style, 'Icon')
    _el(icon, 'href', POINT_ICON_HREF)
    label_style = _el(point_style, 'LabelStyle')
    _el(label_style, 'scale', '0.0')  # hide labels

    line_style_root = _el(doc, 'Style')
    line_style_root.set('id', f"m{index}-line")
    line_style = _el(line_style_root, 'LineStyle')
    _el(line_style, 'color', kml_color(rgb, 'CC'))
    _el(line_style, 'width', '3')


def point_description(point):
    """HTML description for a point, or None if there is nothing to show."""
    parts = []
    if point.get('imageUrl'):
        parts.append(f'<img src="{html.escape(str(point["imageUrl"]))}" width="240"/>')
    if point.get('guid'):
        parts.append(f"<p><b>GUID:</b> {html.escape(str(point['guid']))}</p>")
    return ''.join(parts) or None


def add_point_placemark(folder, point, style_id):
    placemark = _el(folder, 'Placemark')
    _el(placemark, 'name', str(point['title']))
    description = point_description(point)
    if description:
        _el(placemark, 'description').text = etree.CDATA(description)
    _el(placemark, 'styleUrl', f"#{style_id}")
    geometry = _el(placemark, 'Point')
    _el(geometry, 'coordinates', f"{point['longitude']},{point['latitude']},0")
    return placemark


def add_route_placemark(folder, points, name, style_id):
    """Connect points in order with a LineString. Needs at least two points."""
    if len(points) < 2:
        return None
    placemark = _el(folder, 'Placemark')
    _el(placemark, 'name', name)
    _el(placemark, 'styleUrl', f"#{style_id}")
    line = _el(placemark, 'LineString')
    _el(line, 'tessellate', '1')
    path = ' '.join(f"{p['longitude']},{p['latitude']},0" for p in points)
    _el(line, 'coordinates', path)
    return placemark


def build_kml(raw, debug=False):
    """Build a KML document (UTF-8 bytes) with one style pair and route per group."""
    meta = raw if isinstance(raw, dict) else {}
    root = etree.Element(f"{{{KML_NS}}}kml", nsmap={None: KML_NS})
    doc = _el(root, 'Document')
    _el(doc, 'name', str(meta.get('missionSetName') or 'Mission Set'))
    _el(doc, 'description', str(meta.get('missionSetDescription') or ''))

    groups = collect_groups(raw, debug)
    for i in range(len(groups)):
        add_style_pair(doc, i, PALETTE[i % len(PALETTE)])

    folder = _el(doc, 'Folder')
    _el(folder, 'name', 'All Missions')
    for i, group in enumerate(groups):
        for point in group['points']:
            add_point_placemark(folder, point, f"m{i}-point")
        add_route_placemark(folder, group['points'], f"{group['title']} - Route", f"m{i}-line")

    if debug:
        total = sum(len(g['points']) for g in groups)
        print(f"Built KML with {len(groups)} group(s) and {total} placemark(s)")

    return etree.tostring(root, pretty_print=True, xml_declaration=True, encoding='UTF-8')


if __name__ == "__main__":
    print("This module provides functions for generating KML documents.")
