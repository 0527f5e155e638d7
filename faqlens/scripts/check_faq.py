"""
FAQLens - FAQ Match Check
==========================
CLI entry point that runs one question through the FAQ augmentation
flow against the live Gemini providers:
    1. Validate that ``GOOGLE_API_KEY`` is set (fail-fast).
    2. Load the FAQ list (``--faq-file`` or ``settings.FAQ_FILE``).
    3. Run ``FaqAugmenter.augment`` and report whether FAQ context was
       injected.
    4. Optionally generate the final answer from those same augmented
       messages (``--generate``).
    5. Print a structured summary with timing breakdown.

Usage:
    python -m faqlens.scripts.check_faq "What is the capital of France?"
    python -m faqlens.scripts.check_faq "Hi there" --faq-file my_faqs.json
    python -m faqlens.scripts.check_faq "What is the capital of France?" --generate
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv(_PROJECT_ROOT / ".env")


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="check_faq", description="FAQLens — Check which FAQ (if any) would be injected for a question.")
    parser.add_argument("question", help="The user message to test.")
    parser.add_argument("--faq-file", type=Path, default=None, help="JSON FAQ list to match against (defaults to settings.FAQ_FILE).")
    parser.add_argument("--generate", action="store_true", default=False, help="Also call the LLM and print the final answer.")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

async def _run(args: argparse.Namespace) -> int:
    t_start = time.perf_counter()

    try:
        from faqlens.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error — check your .env file:\n")
        print(f"  {exc}")
        print()
        return 1

    # Settings are valid, so the logger can be imported now
    from faqlens.src.core.assistant import FaqAssistant
    from faqlens.src.core.models import Message
    from faqlens.src.database.faq_source import load_faqs
    from faqlens.src.utils.logger import get_logger

    logger = get_logger(__name__)

    faq_file = args.faq_file or settings.FAQ_FILE
    faqs = load_faqs(faq_file)
    _print_header(settings, faq_file, len(faqs))

    assistant = FaqAssistant.from_settings()
    messages = [Message(role="user", content=args.question)]

    t_augment = time.perf_counter()
    try:
        augmented = await assistant.augmenter.augment(messages, faqs)
    except Exception:
        logger.exception("Augmentation failed.")
        return 1
    augment_ms = (time.perf_counter() - t_augment) * 1000

    injected = len(augmented[-1].content) > len(messages[-1].content)

    answer_text: str | None = None
    generate_ms = 0.0
    if args.generate:
        t_generate = time.perf_counter()
        try:
            result = await assistant.generate(augmented)
        except Exception:
            logger.exception("Generation failed.")
            return 1
        answer_text = result.text
        generate_ms = (time.perf_counter() - t_generate) * 1000

    elapsed = time.perf_counter() - t_start
    _print_footer(injected, augmented[-1].content[0].text if injected else None, answer_text, augment_ms, generate_ms, elapsed)  # type: ignore[union-attr]
    return 0


def main(argv: list[str] | None = None) -> None:
    sys.exit(asyncio.run(_run(_parse_args(argv))))


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_header(settings: object, faq_file: Path, faq_count: int) -> None:
    api_key_val = settings.GOOGLE_API_KEY.get_secret_value()  # type: ignore[attr-defined]
    masked = f"****{api_key_val[-4:]}" if len(api_key_val) > 4 else "****"

    print()
    print("=" * 60)
    print("  FAQLENS — FAQ Match Check")
    print("=" * 60)
    print(f"  Environment  : {settings.ENV}")                    # type: ignore[attr-defined]
    print(f"  Embedding    : {settings.EMBEDDING_MODEL}")        # type: ignore[attr-defined]
    print(f"  Classifier   : {settings.CLASSIFIER_MODEL}")       # type: ignore[attr-defined]
    print(f"  Threshold    : {settings.SIMILARITY_THRESHOLD} ({'inclusive' if settings.SIMILARITY_INCLUSIVE else 'exclusive'})")  # type: ignore[attr-defined]
    print(f"  FAQ file     : {faq_file} ({faq_count} entries)")
    print(f"  API Key      : {masked}")
    print("=" * 60)
    print()


def _print_footer(injected: bool, context: str | None, answer: str | None, augment_ms: float, generate_ms: float, elapsed: float) -> None:
    print()
    print("=" * 60)
    print("  RESULT")
    print("-" * 60)
    print(f"  FAQ injected         : {'yes' if injected else 'no'}")
    if context:
        for line in context.splitlines():
            print(f"    {line}")
    if answer is not None:
        print("-" * 60)
        print("  ANSWER")
        print("-" * 60)
        print(f"  {answer}")
    print("-" * 60)
    print("  TIMING BREAKDOWN")
    print("-" * 60)
    print(f"  Augmentation         : {augment_ms:>8.1f}ms")
    if answer is not None:
        print(f"  Generation           : {generate_ms:>8.1f}ms")
    print(f"  Total elapsed        : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    main()
