# Import key modules to make them accessible at the package level
from .feature_extractor import normalize, classify_input, resolve_portal_coordinates
from .kml_generator import build_kml
from .csv_generator import build_csv
from .map_generator import build_map_html, load_overlay_points
from .utils import load_json, write_text_atomic, write_bytes_atomic, sanitize_filename, ParseError

__all__ = [
    'normalize',
    'classify_input',
    'resolve_portal_coordinates',
    'build_kml',
    'build_csv',
    'build_map_html',
    'load_overlay_points',
    'load_json',
    'write_text_atomic',
    'write_bytes_atomic',
    'sanitize_filename',
    'ParseError'
]
