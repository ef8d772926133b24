"""
StoryPulse - Story Reply Statistics

CLI entry point for running the extraction pipeline.
"""

import argparse
import logging
import sys

from src.orchestrator import PipelineOrchestrator
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="StoryPulse - Extract and aggregate story replies from OCR text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process every OCR result in the default directory
  python main.py

  # Process selected stories from a custom directory
  python main.py --ocr-dir ./ocr_results --story story_1 --story story_2

  # Run on synthetic data
  python main.py --mock
        """
    )

    parser.add_argument(
        "--ocr-dir",
        default=str(settings.OCR_INPUT_DIR),
        help=f"Directory of OCR result JSON files (default: {settings.OCR_INPUT_DIR})"
    )

    parser.add_argument(
        "--story",
        action="append",
        dest="stories",
        help="Story id to process (repeatable). Defaults to all available stories"
    )

    parser.add_argument(
        "--mock",
        action="store_true",
        default=settings.USE_MOCK_DATA,
        help="Generate mock OCR text instead of reading files"
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory for the overview table (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    print("=" * 60)
    print("StoryPulse - Story Reply Statistics")
    print("=" * 60)
    print(f"OCR input: {'mock data' if args.mock else args.ocr_dir}")
    print(f"Stories: {', '.join(args.stories) if args.stories else 'all'}")
    print(f"Data root: {args.data_root}")
    print("=" * 60)
    print()

    try:
        logger.info("Initializing StoryPulse pipeline...")
        orchestrator = PipelineOrchestrator(
            data_root=args.data_root,
            ocr_dir=args.ocr_dir,
            use_mock_data=args.mock
        )

        output_path = orchestrator.run(
            story_ids=args.stories,
            output_dir=args.output_dir
        )

        print()
        print("=" * 60)
        print("✅ Pipeline completed successfully!")
        print("=" * 60)
        print(f"Overview table: {output_path}")
        print(f"Statistics: {orchestrator.storage.statistics_dir}")
        print("=" * 60)

        logger.info("StoryPulse completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\n⚠️  Pipeline interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\n❌ Pipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
