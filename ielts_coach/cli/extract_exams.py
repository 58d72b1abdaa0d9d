"""CLI to extract IELTS reading exams from PDFs."""
import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from ielts_coach.cli.common import add_logging_args, configure_logging, setup_gateway
from ielts_coach.tools.exam_extraction import extract_all_exams
from ielts_coach.tools.storage_io import load_exam


def main():
    """Extract every PDF given (files or directories) into exam JSON files."""
    load_dotenv()
    parser = argparse.ArgumentParser(description="Extract IELTS reading exams from PDFs")
    parser.add_argument("paths", nargs="+", type=Path, help="PDF files or directories of PDFs")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("storage/state/exams"),
        help="Directory to save exam JSON files"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-extract even if an exam file already exists"
    )
    add_logging_args(parser)
    args = parser.parse_args()
    configure_logging(args)

    pdf_paths = _collect_pdfs(args.paths)
    if not pdf_paths:
        print("No PDF files found.")
        return

    try:
        gateway = setup_gateway()
    except RuntimeError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Extracting {len(pdf_paths)} exam PDF(s)...\n")
    pbar = tqdm(total=len(pdf_paths), desc="Extracting exams", unit="pdf")

    def progress_callback(pdf_path: Path):
        pbar.set_postfix_str(pdf_path.name[:40])
        pbar.update(1)

    try:
        stats = asyncio.run(extract_all_exams(
            gateway,
            pdf_paths,
            args.output_dir,
            progress_callback=progress_callback,
            force=args.force,
        ))
    finally:
        pbar.close()

    print("\n=== Extraction Summary ===")
    print(f"Successfully extracted: {stats['extracted']}")
    print(f"Failed:                 {stats['failed']}")
    print(f"Skipped:                {stats['skipped']}")

    if stats["errors"]:
        print("\n=== Failed Files ===")
        for filename, error in stats["errors"].items():
            print(f"  {filename}: {error}")

    if stats["extracted"]:
        print("\n=== Exams ===")
        for exam_file in sorted(args.output_dir.glob("*.json")):
            exam = load_exam(exam_file)
            print(f"  [{exam_file.stem:30}] {exam.title}: "
                  f"{len(exam.sections)} sections, {exam.total_questions} questions")

    if stats["failed"]:
        sys.exit(1)


def _collect_pdfs(paths: list[Path]) -> list[Path]:
    pdfs = []
    for path in paths:
        if path.is_dir():
            pdfs.extend(sorted(path.rglob("*.pdf")))
        elif path.suffix.lower() == ".pdf" and path.is_file():
            pdfs.append(path)
    return pdfs


if __name__ == "__main__":
    main()
