import sys
import os
import argparse

from Mission_Converter.utils import load_json, write_text_atomic, write_bytes_atomic, sanitize_filename, ParseError
from Mission_Converter.feature_extractor import normalize
from Mission_Converter.kml_generator import build_kml
from Mission_Converter.csv_generator import build_csv
from Mission_Converter.map_generator import build_map_html, load_overlay_points, DEFAULT_TITLE

FORMAT_EXTENSIONS = {
    'kml': '.kml',
    'csv': '.csv',
    'html': '.html',
}


def default_output_path(input_file, output_format, output_dir):
    """Output path named after the input file, with the format's extension."""
    base = sanitize_filename(os.path.splitext(os.path.basename(input_file))[0])
    return os.path.join(output_dir, base + FORMAT_EXTENSIONS[output_format])


def render(raw, features, args):
    """Produce the output document for the requested format."""
    if args.format == 'kml':
        return build_kml(raw, args.debug)
    if args.format == 'csv':
        return build_csv(raw, args.debug)

    overlay = load_overlay_points(args.overlay) if args.overlay else None
    return build_map_html(features, title=args.title, overlay=overlay)


def main(argv=None):
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(description='Convert mission set JSON to KML, CSV or an HTML map')
    parser.add_argument('input_file', nargs='?', default='points.json', help='JSON file to convert (default: points.json)')
    parser.add_argument('--format', choices=sorted(FORMAT_EXTENSIONS), default='html',
                        help='Output format (default: html)')
    parser.add_argument('--output', dest='output', default=None,
                        help='Output file (default: input name with the format extension)')
    parser.add_argument('--output-dir', dest='output_dir', default=None,
                        help='Directory for the output file when --output is not given (default: current directory)')
    parser.add_argument('--title', default=DEFAULT_TITLE, help='Page title for the HTML map')
    parser.add_argument('--overlay', default=None, help='JSON list of highlighted points to draw on the HTML map')
    parser.add_argument('--debug', action='store_true', help='Show detailed diagnostic information')
    args = parser.parse_args(argv)

    # Check if the input file exists
    if not os.path.exists(args.input_file):
        print(f"Error: File '{args.input_file}' not found.")
        sys.exit(1)

    output_path = args.output or default_output_path(args.input_file, args.format, args.output_dir or os.getcwd())
    output_dir = os.path.dirname(os.path.abspath(output_path))

    print(f"Processing: {args.input_file}")
    print(f"Output file: {output_path}")

    try:
        raw = load_json(args.input_file)
    except (OSError, ParseError) as e:
        print(f"Error: Failed to read/parse {args.input_file}: {e}")
        sys.exit(1)

    features = normalize(raw, args.debug)
    if not features:
        print(f"Error: No points found in {args.input_file}")
        sys.exit(1)

    os.makedirs(output_dir, exist_ok=True)

    # Check if the output directory is writable
    if not os.access(output_dir, os.W_OK):
        print(f"Error: Output directory '{output_dir}' is not writable.")
        sys.exit(1)

    try:
        document = render(raw, features, args)
        if isinstance(document, bytes):
            write_bytes_atomic(output_path, document)
        else:
            write_text_atomic(output_path, document)
    except Exception as e:
        print(f"Error: Failed to build {args.format.upper()} output: {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    print(f"Wrote {output_path} with {len(features)} points.")


if __name__ == "__main__":
    main()
