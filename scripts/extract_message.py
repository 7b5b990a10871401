"""
CLI tool to run the extraction engine on a single message.

Usage:
    python scripts/extract_message.py "<message>" [--extractor KEY | --question ID]
    python scripts/extract_message.py "<message>" --history "..." --history "..."

Examples:
    # Smart extraction across all relevant fields
    python scripts/extract_message.py "I'm married with two kids"

    # Try one extractor directly
    python scripts/extract_message.py "5ft 8in" --extractor height

    # Answer to a bare yes/no, with the assistant's question as context
    python scripts/extract_message.py "yes" --history "Do you smoke?" --history "yes"
"""

import argparse
import json
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from dotenv import load_dotenv
load_dotenv(".env.local")

from factfind.logging_config import setup_logging, get_logger
from factfind.schemas.extraction import ExtractionContext
from factfind.services.acceptance import AcceptancePolicy
from factfind.services.data_extraction import get_extraction_service

setup_logging()
logger = get_logger(__name__)


def extract_message(
    message: str,
    extractor: str | None = None,
    question: str | None = None,
    history: list[str] | None = None,
    last_assistant_message: str = "",
    decide: bool = False,
) -> dict:
    """Run one extraction and return its JSON-ready payload."""
    service = get_extraction_service()

    if extractor:
        return service.test_extractor(extractor, message).model_dump(by_alias=True)

    if question:
        return service.extract_for_question(message, question).model_dump(by_alias=True)

    context = ExtractionContext(
        conversation_history=history or [],
        last_assistant_message=last_assistant_message,
    )
    result = service.smart_extract(message, context)
    payload = result.model_dump(by_alias=True)

    if decide:
        decisions = AcceptancePolicy.from_settings().partition(result)
        payload["decisions"] = decisions.model_dump(by_alias=True)

    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract fact-find fields from a message")
    parser.add_argument("message", nargs="?", help="User utterance to extract from")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--extractor", help="Run a single extractor by key")
    target.add_argument("--question", help="Run the extractor mapped to a question ID")
    parser.add_argument(
        "--history", action="append", default=[],
        help="Conversation history entry, oldest first (repeatable)",
    )
    parser.add_argument("--assistant", default="", help="The assistant message being answered")
    parser.add_argument("--decide", action="store_true", help="Also show the accept/confirm/ignore split")
    parser.add_argument("--list", action="store_true", help="List extractor keys and exit")

    args = parser.parse_args()

    if args.list:
        print("\n".join(get_extraction_service().available_extractors()))
        return

    if args.message is None:
        parser.error("message is required unless --list is given")

    if args.decide and (args.extractor or args.question):
        parser.error("--decide only applies to smart extraction")

    payload = extract_message(
        message=args.message,
        extractor=args.extractor,
        question=args.question,
        history=args.history,
        last_assistant_message=args.assistant,
        decide=args.decide,
    )
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":
    main()
