#!/usr/bin/env python3
"""
AHI CLI - Command-line interface for .ahi image collections and .ahf fonts.

Usage:
    ahi info sprites.ahi
    ahi verify sprites.ahi font.ahf
    ahi normalize sprites.ahi --output clean.ahi
    ahi to-png sprites.ahi --output-dir ./png/
    ahi from-png a.png b.png --output sprites.ahi
"""

import argparse
import logging
import sys
from pathlib import Path

from ahi.collection import Collection, decode_collection, select_format
from ahi.files import detect_format, read_ahi, write_ahf, write_ahi
from ahi.font import decode_font

logger = logging.getLogger(__name__)


def _load(path):
    """Read an .ahi or .ahf file, picking the codec from its magic bytes."""
    data = Path(path).read_bytes()
    kind = detect_format(data)
    if kind == "ahi":
        return kind, decode_collection(data), data
    if kind == "ahf":
        return kind, decode_font(data), data
    raise ValueError(f"{path} is not an AHI or AHF file")


def _palette_option(collection, index):
    if index is None:
        return None
    if not 0 <= index < len(collection.palettes):
        raise ValueError(f"palette {index} does not exist (file has {len(collection.palettes)})")
    return collection.palettes[index]


def cmd_info(args):
    """Show information about an .ahi or .ahf file."""
    try:
        kind, document, _ = _load(args.file)

        if kind == "ahi":
            params = select_format(document)
            print(f"Format: AHI (canonical v{params.version}, flags 0x{params.flags:X})")
            print(f"Palettes: {len(document.palettes)}")
            print(f"\nImages: {len(document.images)}")
            for index, image in enumerate(document.images):
                line = f"  [{index}] {image.width}x{image.height}"
                if image.tag:
                    line += f" tag={image.tag!r}"
                if image.metadata:
                    line += f" metadata={image.metadata}"
                print(line)
        else:
            print("Format: AHF v0")
            print(f"Glyph height: {document.glyph_height}")
            print(f"Baseline: {document.baseline}")
            default = document.default_glyph
            print(f"Default glyph: w{default.image.width} l{default.left} r{default.right}")
            print(f"\nGlyphs: {len(document)}")
            for char in document.chars():
                glyph = document[char]
                print(f"  {char!r}: w{glyph.image.width} l{glyph.left} r{glyph.right}")

        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_verify(args):
    """Check that files parse, and report whether they are in canonical form."""
    failures = 0
    for path in args.files:
        try:
            kind, document, data = _load(path)
        except (OSError, ValueError) as e:
            print(f"✗ {path}: {e}")
            failures += 1
            continue

        canonical = document.to_bytes() == data
        note = "canonical" if canonical else "valid, not canonical"
        print(f"✓ {path}: {kind.upper()} {note}")
        if args.strict and not canonical:
            failures += 1

    return 1 if failures else 0


def cmd_normalize(args):
    """Rewrite a file in canonical form."""
    try:
        output = Path(args.output or args.file)
        kind, document, _ = _load(args.file)
        if kind == "ahi":
            write_ahi(output, document, version=args.version)
        else:
            if args.version is not None:
                raise ValueError("--version only applies to .ahi files")
            write_ahf(output, document)
        print(f"Success: {output}")
        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_to_png(args):
    """Export the images of an .ahi file as PNGs."""
    try:
        from ahi.raster import export_collection

        palette = _palette_option(read_ahi(args.file), args.palette)
        written = export_collection(args.file, output_dir=args.output_dir, palette=palette)
        for path in written:
            print(f"Wrote: {path}")
        return 0
    except (OSError, ValueError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_from_png(args):
    """Build an .ahi collection from PNG files."""
    try:
        from ahi.raster import read_png

        palette = None
        palettes = []
        if args.palette_from:
            source = read_ahi(args.palette_from)
            palette = _palette_option(source, args.palette or 0)
            palettes = [palette]

        images = []
        for path in args.inputs:
            image = read_png(path, palette)
            if args.tags:
                image.tag = Path(path).stem
            images.append(image)

        output = write_ahi(args.output, Collection(palettes=palettes, images=images))
        print(f"Success: {output} ({len(images)} image(s))")
        return 0
    except (OSError, ValueError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser():
    parser = argparse.ArgumentParser(
        description="AHI CLI - Inspect and convert ASCII Hex Image and Font files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ahi info sprites.ahi
  ahi verify --strict sprites.ahi font.ahf
  ahi normalize sprites.ahi --output clean.ahi
  ahi to-png sprites.ahi --output-dir ./png/
  ahi from-png idle.png walk.png --output sprites.ahi --tags
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about an .ahi or .ahf file",
    )
    info_parser.add_argument("file", help="Path to .ahi or .ahf file")
    info_parser.set_defaults(func=cmd_info)

    # verify
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check that files parse",
    )
    verify_parser.add_argument("files", nargs="+", help="Paths to .ahi or .ahf files")
    verify_parser.add_argument("--strict", action="store_true", help="Also fail on files not in canonical form")
    verify_parser.set_defaults(func=cmd_verify)

    # normalize
    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Rewrite a file in canonical form",
    )
    normalize_parser.add_argument("file", help="Path to .ahi or .ahf file")
    normalize_parser.add_argument("--output", "-o", help="Output file (default: overwrite input)")
    normalize_parser.add_argument("--version", type=int, choices=(0, 1), help="Force an AHI format version")
    normalize_parser.set_defaults(func=cmd_normalize)

    # to-png
    to_png_parser = subparsers.add_parser(
        "to-png",
        help="Export the images of an .ahi file as PNGs",
    )
    to_png_parser.add_argument("file", help="Path to .ahi file")
    to_png_parser.add_argument("--output-dir", "-o", help="Output directory (default: next to the input)")
    to_png_parser.add_argument("--palette", "-p", type=int, help="Use palette N from the file instead of the default")
    to_png_parser.set_defaults(func=cmd_to_png)

    # from-png
    from_png_parser = subparsers.add_parser(
        "from-png",
        help="Build an .ahi file from PNG images",
    )
    from_png_parser.add_argument("inputs", nargs="+", help="Input PNG files")
    from_png_parser.add_argument("--output", "-o", required=True, help="Output .ahi file")
    from_png_parser.add_argument("--palette-from", help="Match colors against a palette from this .ahi file")
    from_png_parser.add_argument("--palette", "-p", type=int, help="Palette index in --palette-from (default: 0)")
    from_png_parser.add_argument("--tags", action="store_true", help="Tag each image with its file name")
    from_png_parser.set_defaults(func=cmd_from_png)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    logger.debug("Running command %s", args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
