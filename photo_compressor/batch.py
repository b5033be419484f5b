"""
Batch Photo Compressor Module.

This module compresses whole folders of photos using `ProcessPoolExecutor`
for the CPU-bound work. Every image goes through the same adaptive JPEG
pipeline as a single upload and is written next to its siblings as `.jpg`.

Functions:
    - compress_folder_async: Compress all images in a folder asynchronously.
    - process_image: Compress a single image using a separate process.
    - logger_worker: Reads results from a queue and logs them immediately.
    - compress_file: Compress one file on disk (runs inside the worker process).
"""

import os
import asyncio
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .compression import compress_image
from .config import CompressionConfig
from .errors import CompressionError
from .logger_setup import BATCH_LOG_FILE, BATCH_LOGGER, setup_logger

log = setup_logger(BATCH_LOGGER, BATCH_LOG_FILE)

SUPPORTED_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp', '.bmp', '.tiff', '.tif')


@dataclass
class BatchSummary:
    """Outcome of a folder compression run."""
    compressed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    original_bytes: int = 0
    compressed_bytes: int = 0


def is_supported_image(name: str) -> bool:
    """Check the file extension against the formats the compressor accepts."""
    return name.lower().endswith(SUPPORTED_EXTENSIONS)


def jpeg_filename(name: str) -> str:
    """Replace the extension of ``name`` with ``.jpg``."""
    return os.path.splitext(name)[0] + ".jpg"


def compression_status(original_bytes: int, compressed_bytes: int) -> str:
    """
    Human-readable status for a finished compression.

    Returns an empty string when the output is not smaller than the input.
    """
    original_kb = original_bytes / 1024
    compressed_kb = compressed_bytes / 1024
    if original_kb <= compressed_kb:
        return ""
    return f"Compressed: {original_kb:.0f}KB → {compressed_kb:.0f}KB"


def compress_file(
        input_path: str,
        output_path: str,
        config: Optional[CompressionConfig] = None
) -> Tuple[int, int, float, float]:
    """
    Compress one image file and write the JPEG result to disk.

    Returns:
        Tuple[int, int, float, float]: (original_size_bytes, new_size_bytes, elapsed_time_seconds, quality)

    Raises:
        CompressionError: If the file cannot be read, decoded or encoded.
    """
    start_time = time.time()
    result = compress_image(input_path, config)

    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(output_path, "wb") as f:
        f.write(result.data)

    return result.original_size, result.size_bytes, time.time() - start_time, result.quality


async def process_image(
        executor: ProcessPoolExecutor,
        input_path: str,
        output_path: str,
        config: Optional[CompressionConfig],
        start_total: float,
        log_queue: asyncio.Queue
) -> None:
    """
    Compress a single image in a separate process and send the outcome to a queue.

    Args:
        executor (ProcessPoolExecutor): Executor for running CPU-bound compression.
        input_path (str): Path to the source image.
        output_path (str): Path to save the compressed JPEG.
        config (CompressionConfig, optional): Compression settings.
        start_total (float): Timestamp when the batch started (for total time calculation).
        log_queue (asyncio.Queue): Queue for sending results to the logger worker.

    Notes:
        - A `CompressionError` is reported through the queue; it never stops the batch.
    """
    loop = asyncio.get_running_loop()
    try:
        orig_size, new_size, elapsed, quality = await loop.run_in_executor(
            executor,
            compress_file,
            input_path,
            output_path,
            config
        )
    except (CompressionError, OSError) as e:
        await log_queue.put((input_path, e))
        return
    await log_queue.put((input_path, (orig_size, new_size, elapsed, quality, time.time() - start_total)))


async def logger_worker(log_queue: asyncio.Queue, summary: BatchSummary) -> None:
    """
    Asynchronous logger worker that logs results in real-time from the queue.

    Args:
        log_queue (asyncio.Queue): Queue containing outcomes from `process_image`.
        summary (BatchSummary): Collects the compressed and failed paths.

    Notes:
        - Exits when `None` is put into the queue.
    """
    while True:
        msg = await log_queue.get()
        if msg is None:
            log_queue.task_done()
            break
        input_path, outcome = msg
        name = os.path.basename(input_path)
        if isinstance(outcome, Exception):
            summary.failed.append(input_path)
            log.error(f"{name:<45} | {type(outcome).__name__}: {outcome}")
        else:
            orig_size, new_size, processing_time, quality, total_time = outcome
            summary.compressed.append(input_path)
            summary.original_bytes += orig_size
            summary.compressed_bytes += new_size
            status = compression_status(orig_size, new_size) or f"Kept size: {new_size/1024:.0f}KB"
            log.info(
                f"{name:<45} | {status:<32} | q={quality:.2f} "
                f"| processing: {processing_time:5.2f}s | total: {total_time:5.2f}s"
            )
        log_queue.task_done()


async def compress_folder_async(
        input_folder: str = "images",
        output_folder: str = "compressed",
        config: Optional[CompressionConfig] = None,
        max_workers: Optional[int] = None
) -> BatchSummary:
    """
    Compress all images in a folder asynchronously using multiple CPU processes.

    Args:
        input_folder (str, optional): Source folder containing images. Defaults to "images".
        output_folder (str, optional): Destination folder for the JPEG files. Defaults to "compressed".
        config (CompressionConfig, optional): Compression settings shared by every image.
        max_workers (int, optional): Number of worker processes. Defaults to the CPU count.

    Returns:
        BatchSummary: Paths that were compressed or failed, and the byte totals.

    Notes:
        - Supports JPG, JPEG, PNG, GIF, WEBP, BMP and TIFF files.
        - Mirrors the input directory structure in the output folder.
    """
    start_total = time.time()
    image_tasks = []
    log_queue = asyncio.Queue()
    summary = BatchSummary()

    log_task = asyncio.create_task(logger_worker(log_queue, summary))

    for root, _, files in os.walk(input_folder):
        for file in sorted(files):
            if is_supported_image(file):
                input_path = os.path.join(root, file)
                rel_path = os.path.relpath(root, input_folder)
                output_dir = os.path.normpath(os.path.join(output_folder, rel_path))
                output_path = os.path.join(output_dir, jpeg_filename(file))
                image_tasks.append((input_path, output_path))

    try:
        if image_tasks:
            max_workers = max_workers or os.cpu_count() or 8
            log.info(f"🧠 Using {max_workers} parallel processes for {len(image_tasks)} images")

            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                tasks = [
                    process_image(executor, inp, out, config, start_total, log_queue)
                    for inp, out in image_tasks
                ]
                await asyncio.gather(*tasks)
        else:
            log.warning(f"No supported images found in {input_folder}")
    finally:
        # drain what was reported so far, even when a worker crashed
        await log_queue.put(None)
        await log_task

    if summary.compressed:
        log.info(
            f"Done: {len(summary.compressed)} compressed, {len(summary.failed)} failed | "
            f"{summary.original_bytes/1024:.0f}KB → {summary.compressed_bytes/1024:.0f}KB"
        )
    return summary
