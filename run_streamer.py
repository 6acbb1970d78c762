#!/usr/bin/env python3
"""
Command-line script to extract nodes from a large XML file, URL or stdin.

Defaults for the flags can come from the environment (or a .env file):
  XML_STREAMER_CHUNK_SIZE, XML_STREAMER_CAPTURE_DEPTH, XML_STREAMER_LOG_LEVEL

Usage:
    python run_streamer.py feed.xml
    python run_streamer.py feed.xml --capture-depth 3 --limit 10
    cat feed.xml | python run_streamer.py - --count
    python run_streamer.py https://example.com/feed.xml -o nodes.json --extract-container
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Load .env file automatically
from dotenv import load_dotenv
load_dotenv()

from xml_streamer.exceptions import XMLStreamerError
from xml_streamer.logger import setup_logger
from xml_streamer.parser import StringWalker
from xml_streamer.streamer import XMLStringStreamer
from xml_streamer.streams import open_stream


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Extract XML nodes from a file, URL or stdin without loading it into memory"
    )
    parser.add_argument(
        "source",
        help="XML file path, http(s) URL, or '-' for stdin"
    )
    parser.add_argument(
        "--capture-depth", "-d",
        type=int,
        default=int(os.getenv("XML_STREAMER_CAPTURE_DEPTH", "2")),
        help="Depth whose elements are extracted (default: 2, children of the root)"
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=int(os.getenv("XML_STREAMER_CHUNK_SIZE", "0")) or None,
        help="Bytes read per chunk (default: 16384, 1024 for stdin)"
    )
    parser.add_argument(
        "--expect-gt",
        action="store_true",
        help="Allow '>' inside comments and CDATA sections"
    )
    parser.add_argument(
        "--extract-container",
        action="store_true",
        help="Also output the markup surrounding the extracted nodes"
    )
    parser.add_argument(
        "--limit", "-n",
        type=positive_int,
        help="Stop after this many nodes"
    )
    parser.add_argument(
        "--count", "-c",
        action="store_true",
        help="Only print the number of nodes"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output file for the JSON result (default: print to stdout)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, os.getenv("XML_STREAMER_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    setup_logger(level=log_level)

    try:
        walker = StringWalker({
            "capture_depth": args.capture_depth,
            "expect_gt": args.expect_gt,
            "extract_container": args.extract_container,
        })
        stream = open_stream(args.source, chunk_size=args.chunk_size)
    except XMLStreamerError as e:
        print(f"✗ Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    nodes = []
    count = 0
    exhausted = False

    with XMLStringStreamer(walker, stream) as streamer:
        for node in streamer:
            count += 1
            if not args.count:
                nodes.append(node.decode("utf-8", errors="replace"))
            if args.limit is not None and count >= args.limit:
                break
        else:
            exhausted = True

        print(f"✓ {count} nodes, {stream.read_bytes} bytes read", file=sys.stderr)

        if args.count:
            print(count)
            return

        result = {
            "source": args.source,
            "count": count,
            "nodes": nodes,
        }
        if args.extract_container:
            # Only complete when the whole stream was walked
            result["container"] = walker.get_extracted_container().decode("utf-8", errors="replace")
            result["container_complete"] = exhausted

    # ensure_ascii=False keeps non-ASCII node text readable
    output = json.dumps(result, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Saved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
