"""Segment a chat content file (plain text or rich-editor HTML) and print it as JSON."""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chat_content.segmentation.converters import HtmlConverterKind, get_html_converter
from chat_content.segmentation.extractor import ChatSegmenter


def segment_file(path: str, allow_single: bool = False, converter: str = "dom") -> dict:
    """Read *path* and return its transcript view as a JSON-ready dict."""
    content = Path(path).read_text(encoding="utf-8")
    segmenter = ChatSegmenter(get_html_converter(converter))

    segments = segmenter.extract_segments(content, allow_single=allow_single)
    return {
        "source_file": Path(path).name,
        "is_transcript": segmenter.is_transcript(content),
        "segments": [s.to_dict() for s in segments],
        "explanation": segmenter.extract_explanation(content),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path")
    parser.add_argument("--allow-single", action="store_true")
    parser.add_argument(
        "--converter",
        default=HtmlConverterKind.DOM.value,
        choices=[k.value for k in HtmlConverterKind],
    )
    args = parser.parse_args(argv)

    try:
        result = segment_file(args.path, args.allow_single, args.converter)
    except OSError as e:
        print(f"ERROR {args.path}: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
