import os
import sys
import argparse
from urllib.parse import urlencode

import requests

from .utils import load_json, write_bytes_atomic, ParseError
from .feature_extractor import normalize, feature_coordinates

STATIC_MAP_ENDPOINT = 'https://maps.googleapis.com/maps/api/staticmap'
API_KEY_ENV = 'GOOGLE_MAPS_API_KEY'
USER_AGENT = 'Mission-Converter/1.0'

DEFAULT_CENTER = '-41.2924,174.7787'
DEFAULT_ZOOM = 14
DEFAULT_SIZE = '1200x1200'
DEFAULT_MAPTYPE = 'roadmap'


def build_static_map_url(points, api_key, center=DEFAULT_CENTER, zoom=DEFAULT_ZOOM,
                         size=DEFAULT_SIZE, maptype=DEFAULT_MAPTYPE):
    """Build a Static Maps URL with one marker per (lat, lng) point."""
    params = [
        ('center', center),
        ('zoom', zoom),
        ('size', size),
        ('maptype', maptype),
    ]
    params.extend(('markers', f"{lat},{lng}") for lat, lng in points)
    params.append(('key', api_key))
    return f"{STATIC_MAP_ENDPOINT}?{urlencode(params, safe=',')}"


def marker_points(features):
    """(lat, lng) pairs for every feature with point coordinates."""
    points = []
    for feature in features:
        coords = feature_coordinates(feature)
        if coords is not None:
            points.append((coords[1], coords[0]))
    return points


def download_static_map(url, output_path, timeout=15):
    """Fetch the map image and write it to output_path."""
    response = requests.get(url, timeout=timeout, headers={'User-Agent': USER_AGENT})
    response.raise_for_status()
    write_bytes_atomic(output_path, response.content)
    return output_path


def main(argv=None):
    parser = argparse.ArgumentParser(description='Download a static Google map with a marker for every point')
    parser.add_argument('input_file', nargs='?', default='points.json', help='JSON file with points (default: points.json)')
    parser.add_argument('--key', default=None, help=f'Static Maps API key (default: ${API_KEY_ENV})')
    parser.add_argument('--output', default='static_map.png', help='Image file to write (default: static_map.png)')
    parser.add_argument('--center', default=DEFAULT_CENTER, help=f'Map centre as LAT,LNG (default: {DEFAULT_CENTER})')
    parser.add_argument('--zoom', type=int, default=DEFAULT_ZOOM, help=f'Zoom level (default: {DEFAULT_ZOOM})')
    parser.add_argument('--size', default=DEFAULT_SIZE, help=f'Image size WxH (default: {DEFAULT_SIZE})')
    parser.add_argument('--maptype', default=DEFAULT_MAPTYPE, help=f'Map type (default: {DEFAULT_MAPTYPE})')
    parser.add_argument('--debug', action='store_true', help='Show detailed diagnostic information')
    args = parser.parse_args(argv)

    api_key = args.key or os.environ.get(API_KEY_ENV)
    if not api_key:
        print(f"Error: No API key given. Use --key or set {API_KEY_ENV}.")
        sys.exit(1)

    try:
        raw = load_json(args.input_file)
    except (OSError, ParseError) as e:
        print(f"Error: Failed to read/parse {args.input_file}: {e}")
        sys.exit(1)

    points = marker_points(normalize(raw, args.debug))
    if not points:
        print(f"Error: No points found in {args.input_file}")
        sys.exit(1)

    url = build_static_map_url(points, api_key, args.center, args.zoom, args.size, args.maptype)
    if args.debug:
        print(f"Request URL: {url.replace(api_key, '***')}")

    try:
        download_static_map(url, args.output)
    except (requests.RequestException, OSError) as e:
        print(f"Error: Failed to download static map: {e}")
        sys.exit(1)

    print(f"Wrote {args.output} with {len(points)} markers.")


if __name__ == "__main__":
    main()
