"""
Main entry point for the photo compression script.

This module compresses every photo in a folder the same way a profile
photo upload is compressed: at most 800x800 pixels, re-encoded as JPEG
at the highest quality that fits the size target.

It interactively asks the user for the folder path.
If no input is provided, it defaults to the 'images' directory.

Example:
    $ python main.py
"""

import os
import asyncio
from photo_compressor import compress_folder_async


async def main():
    """Interactive entry point for photo compression."""
    input_folder = input("📁 Enter the path to the folder with images (default: ./images): ").strip() or "images"
    output_folder = "compressed"

    if not os.path.exists(input_folder):
        print(f"❌ The folder '{input_folder}' does not exist.")
        return

    print(f"🚀 Starting compression from: {input_folder}")
    summary = await compress_folder_async(input_folder, output_folder)
    if summary.failed:
        print(f"⚠️ {len(summary.failed)} file(s) could not be compressed, see compressor.log")


if __name__ == "__main__":
    asyncio.run(main())
