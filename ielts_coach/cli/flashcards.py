"""CLI for the vocabulary flashcard deck: add, list due, record reviews."""
import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ielts_coach.cli.common import add_logging_args, configure_logging, setup_gateway
from ielts_coach.tools.errors import InvalidSelection, PipelineError
from ielts_coach.tools.handlers import create_flashcard, now_ms
from ielts_coach.tools.scheduler import SchedulePolicy, cards_for_owner, due_cards, record_review
from ielts_coach.tools.storage_io import find_card, load_deck, replace_card, save_deck

console = Console()


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Manage vocabulary flashcards")
    parser.add_argument(
        "--deck",
        type=Path,
        default=Path("storage/state/flashcards.json"),
        help="Path to the flashcard deck JSON"
    )
    parser.add_argument("--owner", required=True, help="uid of the learner who owns the cards")
    add_logging_args(parser)
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Save a word or phrase (max 3 words) from a passage")
    add.add_argument("selection", help="The selected word or phrase")
    add.add_argument("--passage", type=Path, required=True, help="Text file with the passage")

    sub.add_parser("due", help="List cards due for review")

    review = sub.add_parser("review", help="Record a review outcome")
    review.add_argument("card_id")
    outcome = review.add_mutually_exclusive_group(required=True)
    outcome.add_argument("--recalled", action="store_true", help="Recalled correctly")
    outcome.add_argument("--missed", action="store_true", help="Recalled incorrectly or skipped")
    review.add_argument(
        "--lapse",
        choices=["reset", "decrement"],
        default="decrement",
        help="What a missed review does to mastery"
    )

    args = parser.parse_args()
    configure_logging(args)

    if args.command == "add":
        _add(args)
    elif args.command == "due":
        _due(args)
    else:
        _review(args)


def _add(args):
    if not args.passage.exists():
        console.print(f"[red]Error: passage file not found: {args.passage}[/red]")
        sys.exit(1)

    passage = args.passage.read_text(encoding="utf-8")
    try:
        gateway = setup_gateway()
        card = asyncio.run(create_flashcard(gateway, args.owner, args.selection, passage))
    except InvalidSelection as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(1)
    except (PipelineError, RuntimeError) as e:
        console.print(f"[red]✗ Could not create flashcard: {e}[/red]")
        sys.exit(1)

    deck = load_deck(args.deck)
    deck.cards.append(card)
    save_deck(deck, args.deck)

    console.print(f'✓ [green]Saved "{card.word}" to Flashcards![/green]')
    console.print(f'  Context: "{card.original_sentence}"')
    console.print(f"  Definition: {card.definition}")


def _due(args):
    deck = load_deck(args.deck)
    cards = due_cards(now_ms(), cards_for_owner(deck.cards, args.owner))
    if not cards:
        console.print("No flashcards due. Highlight words in a reading test to add some!")
        return

    table = Table(title=f"Due flashcards ({len(cards)})")
    table.add_column("ID", style="dim")
    table.add_column("Word", style="cyan")
    table.add_column("Context")
    table.add_column("Mastery", justify="right", style="magenta")
    table.add_column("Due since")
    for card in cards:
        table.add_row(
            card.id,
            card.word,
            card.original_sentence,
            str(card.mastery_level),
            datetime.fromtimestamp(card.next_review / 1000).strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def _review(args):
    deck = load_deck(args.deck)
    card = find_card(deck, args.card_id)
    if card is None or card.owner_uid != args.owner:
        console.print(f"[red]Error: card {args.card_id} not found[/red]")
        sys.exit(1)

    updated = record_review(card, recalled=args.recalled, now=now_ms(), policy=SchedulePolicy(lapse=args.lapse))
    replace_card(deck, updated)
    save_deck(deck, args.deck)

    next_due = datetime.fromtimestamp(updated.next_review / 1000).strftime("%Y-%m-%d %H:%M")
    console.print(f"{updated.word}: mastery {card.mastery_level} → {updated.mastery_level}, next review {next_due}")


if __name__ == "__main__":
    main()
