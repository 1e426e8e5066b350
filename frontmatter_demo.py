"""
Example: extract page metadata from a local Markdown file or from a running wiki.

Usage:
    python3 frontmatter_demo.py --file ./page.md
    python3 frontmatter_demo.py --base-url http://localhost:3000 --page-id 6999390af17c96c558f7d57e
    python3 frontmatter_demo.py --base-url http://localhost:3000 --page-id 6999390af17c96c558f7d57e --revision-id 65a0...
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import httpx

from frontmatter_viewer.sync import DocumentFetcher, extract_metadata


async def fetch_remote(base_url: str, page_id: str, revision_id: Optional[str] = None):
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        fetcher = DocumentFetcher(client)
        return await fetcher.fetch_metadata(page_id, revision_id)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", type=Path, default=None, help="Path to a Markdown file")
    parser.add_argument("--base-url", default="http://localhost:3000", help="Wiki base URL")
    parser.add_argument("--page-id", default=None, help="24-character page id to fetch")
    parser.add_argument("--revision-id", default=None, help="Optional revision id")
    parser.add_argument("--raw", action="store_true", help="Print the raw block text instead of JSON")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    if args.file:
        if not args.file.exists():
            raise FileNotFoundError(f"File not found: {args.file}")
        block = extract_metadata(args.file.read_text(encoding="utf-8"))
    elif args.page_id:
        block = asyncio.run(fetch_remote(args.base_url, args.page_id, args.revision_id))
    else:
        parser.error("either --file or --page-id is required")

    if block is None or block.is_empty:
        print("No metadata found")
        return
    if args.raw:
        print(block.raw_text)
    else:
        print(json.dumps(block.structured, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
