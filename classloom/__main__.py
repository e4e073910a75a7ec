import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .core.ast_parser import is_supported_file, should_skip_directory
from .core.translator import TranslationError, Translator, load_conventions


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


logger = logging.getLogger(__name__)

# Constants
DEFAULT_INPUT_DIR = "in"
DEFAULT_OUTPUT_DIR = "out"
TARGET_EXTENSION = ".ts"


@dataclass
class BatchResult:
    processed: int = 0
    failed: List[str] = field(default_factory=list)


def iter_source_files(in_dir: Path):
    """Yield every supported source file under in_dir, in sorted order."""
    for root, dirs, files in os.walk(in_dir):
        dirs[:] = sorted(d for d in dirs if not should_skip_directory(d))
        for name in sorted(files):
            if is_supported_file(name):
                yield Path(root) / name


def translate_directory(in_dir: Path, out_dir: Path, translator: Translator) -> BatchResult:
    """Translate every C# file under in_dir into a mirrored .ts file under out_dir."""
    result = BatchResult()
    for in_path in iter_source_files(in_dir):
        rel_path = in_path.relative_to(in_dir)
        out_path = (out_dir / rel_path).with_suffix(TARGET_EXTENSION)

        try:
            source_text = in_path.read_text(encoding="utf-8-sig")
            output = translator.translate(source_text, str(rel_path))
        except (OSError, UnicodeDecodeError, TranslationError) as e:
            logger.error(f"Failed to translate {rel_path}: {e}")
            result.failed.append(str(rel_path))
            continue

        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(output, encoding="utf-8")
        logger.info(f"Translated {rel_path} -> {out_path}")
        result.processed += 1

    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="classloom",
        description="Translate C# classes into TypeScript class skeletons.",
    )
    parser.add_argument("--input", default=DEFAULT_INPUT_DIR, help="directory of .cs files (default: ./in)")
    parser.add_argument("--output", default=DEFAULT_OUTPUT_DIR, help="directory for .ts files (default: ./out)")
    parser.add_argument(
        "--config",
        default=os.getenv("CLASSLOOM_CONVENTIONS"),
        help="YAML file overriding naming/type conventions",
    )
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    in_dir = Path(args.input)
    if not in_dir.is_dir():
        logger.error(f"Input directory not found: {in_dir}")
        return 1

    try:
        conventions = load_conventions(args.config)
    except TranslationError as e:
        logger.error(str(e))
        return 1

    result = translate_directory(in_dir, Path(args.output), Translator(conventions))

    print(f"Processed {result.processed} file(s).")
    if result.failed:
        logger.error(f"{len(result.failed)} file(s) failed: {', '.join(result.failed)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
