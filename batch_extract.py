#!/usr/bin/env python3
"""
Batch-extract a folder of scanned project documents through the API.

Uploads every image in the folder in one request (they are merged into a
single table), then writes the markdown and CSV exports next to the images.

Usage:
    python batch_extract.py ./scans --api http://127.0.0.1:8000
"""
import argparse
import mimetypes
from pathlib import Path
import requests

API_BASE_URL = "http://127.0.0.1:8000"
IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".webp", ".heic", ".heif"}


def collect_images(folder: Path) -> list[Path]:
    return sorted(p for p in folder.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)


def extract_folder(folder: Path, api_base_url: str = API_BASE_URL) -> dict | None:
    """Upload all images in the folder and return the extraction response"""
    images = collect_images(folder)
    if not images:
        print(f"⚠️  No images found in {folder}")
        return None

    print(f"🔄 Uploading {len(images)} image(s) from {folder}...")
    handles = [open(p, "rb") for p in images]
    try:
        files = [
            ("files", (p.name, fh, mimetypes.guess_type(p.name)[0] or "image/png"))
            for p, fh in zip(images, handles)
        ]
        # The model call has no server-side timeout of its own
        response = requests.post(f"{api_base_url}/tables/extract", files=files, timeout=None)
    finally:
        for fh in handles:
            fh.close()

    if response.status_code != 200:
        print(f"❌ ERROR: {response.status_code} - {response.text}")
        return None

    data = response.json()
    print(f"✅ Extracted {max(len(data['rows']) - 1, 0)} row(s), {data['column_count']} column(s)")
    for warning in data.get("warnings", []):
        print(f"   ⚠️  {warning}")
    return data


def write_exports(folder: Path, markdown: str, api_base_url: str = API_BASE_URL) -> list[Path]:
    """Fetch the .md and .csv exports for the markdown and save them in the folder"""
    written = []
    for fmt in ("markdown", "csv"):
        response = requests.post(f"{api_base_url}/tables/export/{fmt}", json={"markdown": markdown})
        response.raise_for_status()

        disposition = response.headers.get("content-disposition", "")
        filename = disposition.split("filename=")[-1].strip('"') or f"table-export.{fmt}"
        path = folder / filename
        path.write_bytes(response.content)
        written.append(path)
        print(f"📁 Wrote {path}")
    return written


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("folder", type=Path, help="Folder with scanned document images")
    parser.add_argument("--api", default=API_BASE_URL, help="Base URL of the running API")
    args = parser.parse_args()

    print("=" * 70)
    print("Batch Table Extraction")
    print("=" * 70)

    data = extract_folder(args.folder, args.api)
    if data:
        write_exports(args.folder, data["markdown"], args.api)


if __name__ == "__main__":
    main()
