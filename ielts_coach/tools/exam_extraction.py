"""Batch extraction of reading exams from a set of PDFs."""
import logging
from pathlib import Path
from typing import Callable, Optional

from ielts_coach.tools.errors import PipelineError
from ielts_coach.tools.gateway import AIGateway
from ielts_coach.tools.handlers import extract_exam
from ielts_coach.tools.storage_io import save_model_json

logger = logging.getLogger(__name__)


async def extract_all_exams(
    gateway: AIGateway,
    pdf_paths: list[Path],
    output_dir: Path,
    progress_callback: Optional[Callable[[Path], None]] = None,
    force: bool = False,
) -> dict:
    """
    Extract every PDF into `<output_dir>/<pdf stem>.json`.

    A failed file is logged and counted; nothing is written for it and the
    batch carries on.

    Returns:
        dict with stats: {"extracted": int, "skipped": int, "failed": int,
        "errors": {filename: message}}
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    stats = {"extracted": 0, "skipped": 0, "failed": 0, "errors": {}}

    for pdf_path in pdf_paths:
        output_path = output_dir / f"{pdf_path.stem}.json"
        if output_path.exists() and not force:
            stats["skipped"] += 1
            if progress_callback:
                progress_callback(pdf_path)
            continue

        try:
            exam = await extract_exam(gateway, pdf_path.read_bytes())
        except PipelineError as e:
            logger.error(f"Extraction failed for {pdf_path.name}: {e}")
            stats["failed"] += 1
            stats["errors"][pdf_path.name] = str(e)
        else:
            save_model_json(exam, output_path)
            stats["extracted"] += 1

        if progress_callback:
            progress_callback(pdf_path)

    return stats
