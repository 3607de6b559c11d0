import html
import json

from .utils import load_json, is_number

DEFAULT_TITLE = 'Mission Day 2025 - Wellington'
DEFAULT_CENTER = (-41.2924, 174.7787)
DEFAULT_ZOOM = 14

LEAFLET_VERSION = '1.9.4'
TILE_URL = 'https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png'

# Overlay markers cycle through these when no colour is given
RAINBOW_COLORS = ["#E40303", "#FF8C00", "#FFED00", "#008026", "#004DFF", "#750787"]


def script_json(value):
    """Serialize value as JSON that is safe inside a <script> block."""
    return json.dumps(value, ensure_ascii=False).replace('</', '<\\/')


def load_overlay_points(file_path):
    """Load highlighted overlay points from a JSON list of {name, lat, lng, color?, isPrimary?}."""
    data = load_json(file_path)
    if not isinstance(data, list):
        raise ValueError(f"Overlay file {file_path} must contain a JSON list")

    points = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or not is_number(item.get('lat')) or not is_number(item.get('lng')):
            print(f"Warning: Skipping overlay entry {i + 1}: missing lat/lng")
            continue
        points.append({
            'name': str(item.get('name') or f"Point {i + 1}"),
            'lat': item['lat'],
            'lng': item['lng'],
            'color': item.get('color') or RAINBOW_COLORS[i % len(RAINBOW_COLORS)],
            'isPrimary': bool(item.get('isPrimary', True)),
        })
    return points


def overlay_collection(points):
    """FeatureCollection for the overlay markers."""
    return {
        'type': 'FeatureCollection',
        'features': [
            {
                'type': 'Feature',
                'properties': {'title': p['name'], 'color': p['color'], 'isPrimary': p['isPrimary']},
                'geometry': {'type': 'Point', 'coordinates': [p['lng'], p['lat']]}
            }
            for p in points
        ]
    }


def build_map_html(features, title=DEFAULT_TITLE, center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM, overlay=None):
    """Render a self-contained Leaflet page for the given point features."""
    data = {'type': 'FeatureCollection', 'features': list(features)}
    overlay_data = overlay_collection(overlay or [])
    page_title = html.escape(title)
    lat, lng = center

    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<title>{page_title}</title>
<meta name="viewport" content="width=device-width,initial-scale=1" />
<link rel="stylesheet" href="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.css"/>
<style>
  html,body {{ height:100%; margin:0; background:#111; }}
  header, footer {{ background:#111; color:#eee; font-family:system-ui; }}
  #map {{ height:calc(100% - 70px); width:100%; background:#000; }}
  .leaflet-popup-content-wrapper {{ background:#222; color:#fff; }}
</style>
</head>
<body>
<header><strong>{page_title}</strong></header>
<div id="map" role="region" aria-label="Map of portals"></div>
<footer id="status">Loaded {len(data['features'])} points</footer>

<script src="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.js"></script>
<script>
  const data = {script_json(data)};
  const overlay = {script_json(overlay_data)};

  const map = L.map('map').setView([{lat},{lng}], {zoom});

  L.tileLayer('{TILE_URL}', {{
    maxZoom: 20,
    attribution: '&copy; OpenStreetMap contributors &copy; CARTO'
  }}).addTo(map);

  function escapeHtml(s) {{
    return String(s).replace(/[&<>"']/g, c => ({{'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;',"'":'&#39;'}}[c]));
  }}

  function pointToLayer(feature, latlng) {{
    return L.circleMarker(latlng, {{ radius: 5, weight: 1, color: '#fff', fillColor: '#fff', fillOpacity: 0.9 }});
  }}

  function onEachFeature(feature, layer) {{
    const title = (feature.properties && feature.properties.title) || 'Portal';
    layer.bindPopup('<strong>' + escapeHtml(title) + '</strong>');
  }}

  const gj = L.geoJSON(data, {{ pointToLayer, onEachFeature }}).addTo(map);

  L.geoJSON(overlay, {{
    pointToLayer: (feature, latlng) =>
      L.circleMarker(latlng, {{
        radius: feature.properties.isPrimary ? 8 : 5,
        weight: 2,
        color: feature.properties.color,
        fillColor: feature.properties.color,
        fillOpacity: 1
      }}),
    onEachFeature: (feature, layer) => {{
      layer.bindPopup('<strong>' + escapeHtml(feature.properties.title) + '</strong>');
    }}
  }}).addTo(map);

  try {{
    map.fitBounds(gj.getBounds().pad(0.1));
  }} catch (e) {{
    // no valid bounds, keep the initial view
  }}
</script>
</body>
</html>
"""
