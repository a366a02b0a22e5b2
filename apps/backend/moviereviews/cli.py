"""
Command-line interface for movie reviews.

Provides commands for:
- list: Show a movie's reviews with local vote counts
- show: Show a single review
- add: Write a new review
- edit: Edit a review in place (prompts pre-filled with current values)
- delete: Delete a review after confirmation
- vote: Mark a review helpful or not helpful on this device
- stats: Show a movie's rating summary
"""

import argparse
import sys
from typing import Optional

from .client import ReviewsClient, ReviewsClientError
from .config import Config
from .models import RATING_MAX, RATING_MIN
from .utils import confirm_action, print_header, print_status_table, prompt_with_default
from .votes import VOTE_TYPES, VoteLedger
from .widget import ReviewWidget


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="moviereviews",
        description="Movie reviews - read, write and manage reviews from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read the reviews of Fight Club
  python -m moviereviews list 550

  # Write a review
  python -m moviereviews add 550 --user Alice --rating 5 --review "Great cinematography!"

  # Edit or delete one of them
  python -m moviereviews edit 550 <review_id>
  python -m moviereviews delete 550 <review_id>

  # Vote on a review (stored on this device only)
  python -m moviereviews vote 550 <review_id> helpful
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List reviews for a movie")
    list_parser.add_argument("movie_id", type=int, help="Movie ID")

    show_parser = subparsers.add_parser("show", help="Show a single review")
    show_parser.add_argument("review_id", help="Review ID")

    add_parser = subparsers.add_parser("add", help="Write a review for a movie")
    add_parser.add_argument("movie_id", type=int, help="Movie ID")
    add_parser.add_argument("--user", help="Your display name (prompted if omitted)")
    add_parser.add_argument("--review", help="Review text (prompted if omitted)")
    add_parser.add_argument(
        "--rating",
        type=int,
        choices=range(RATING_MIN, RATING_MAX + 1),
        help="Star rating (prompted if omitted)",
    )

    edit_parser = subparsers.add_parser("edit", help="Edit a review in place")
    edit_parser.add_argument("movie_id", type=int, help="Movie ID")
    edit_parser.add_argument("review_id", help="Review ID")

    delete_parser = subparsers.add_parser("delete", help="Delete a review")
    delete_parser.add_argument("movie_id", type=int, help="Movie ID")
    delete_parser.add_argument("review_id", help="Review ID")
    delete_parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt",
    )

    vote_parser = subparsers.add_parser("vote", help="Vote on a review (local to this device)")
    vote_parser.add_argument("movie_id", type=int, help="Movie ID")
    vote_parser.add_argument("review_id", help="Review ID")
    vote_parser.add_argument("vote_type", choices=VOTE_TYPES, help="Vote")

    stats_parser = subparsers.add_parser("stats", help="Show a movie's rating summary")
    stats_parser.add_argument("movie_id", type=int, help="Movie ID")

    return parser


def _prompt_rating(default: Optional[int] = None) -> int:
    while True:
        value = prompt_with_default(
            f"Rating ({RATING_MIN}-{RATING_MAX})",
            str(default) if default else None,
        )
        try:
            rating = int(value)
        except ValueError:
            print("Please enter a number")
            continue
        if RATING_MIN <= rating <= RATING_MAX:
            return rating
        print(f"Please select a rating from {RATING_MIN} to {RATING_MAX} stars")


def _flush(widget: ReviewWidget) -> None:
    for note in widget.pop_notifications():
        print(f"[{note.level}] {note.message}")


def cmd_list(widget: ReviewWidget) -> int:
    print_header(f"Reviews for movie {widget.movie_id}")
    ok = widget.load()
    _flush(widget)
    if ok:
        print(widget.render())
    return 0 if ok else 1


def cmd_show(client: ReviewsClient, args) -> int:
    review = client.get_review(args.review_id)
    print_status_table(
        {
            "Movie": review.movie_id,
            "User": review.user,
            "Rating": review.stars(),
            "Created": review.created_at,
            "Updated": review.updated_at,
        },
        title=f"Review {review.id}",
    )
    print(review.review)
    return 0


def cmd_add(widget: ReviewWidget, args) -> int:
    print_header(f"New review for movie {widget.movie_id}")
    user = args.user or prompt_with_default("Your name")
    text = args.review or prompt_with_default("Your review")
    rating = args.rating or _prompt_rating()

    ok = widget.submit(user, text, rating)
    _flush(widget)
    if ok:
        print(widget.render())
    return 0 if ok else 1


def cmd_edit(widget: ReviewWidget, args) -> int:
    if not widget.load():
        _flush(widget)
        return 1

    form = widget.begin_edit(args.review_id)
    if form is None:
        print(f"Review {args.review_id} not found for movie {widget.movie_id}")
        return 1

    print_header("Edit review (press Enter to keep a value)")
    form.user = prompt_with_default("Your name", form.user)
    form.review = prompt_with_default("Your review", form.review)
    form.rating = _prompt_rating(form.rating)

    ok = widget.save_edit(form)
    _flush(widget)
    return 0 if ok else 1


def cmd_delete(widget: ReviewWidget, args) -> int:
    confirm = (lambda _message: True) if args.yes else confirm_action
    ok = widget.delete(args.review_id, confirm)
    failed = not ok and bool(widget.notifications)
    if not ok and not failed:
        print("Cancelled.")
    _flush(widget)
    return 1 if failed else 0


def cmd_vote(widget: ReviewWidget, args) -> int:
    tally = widget.vote(args.review_id, args.vote_type)
    print(
        f"Helpful: {tally.helpful}  Not helpful: {tally.not_helpful}  "
        f"Your vote: {tally.user_vote or 'none'}"
    )
    return 0


def cmd_stats(client: ReviewsClient, args) -> int:
    summary = client.get_summary(args.movie_id)
    print_header(f"Ratings for movie {args.movie_id}")
    table = {
        "Reviews": summary.total,
        "Average": f"{summary.average:.1f}",
        "Recommend": f"{summary.recommend_percent}%",
    }
    for star in sorted(summary.distribution, reverse=True):
        table[f"{star} star"] = summary.distribution[star]
    print_status_table(table, title="Summary")
    return 0


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 0

    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nSet REVIEWS_API_URL to the review API, e.g.")
        print("  REVIEWS_API_URL=http://localhost:8000/api/v1/reviews/")
        return 1

    client = ReviewsClient(config)
    ledger = VoteLedger(config.votes_path, config.log_dir)
    movie_id = getattr(parsed_args, "movie_id", None)
    widget = ReviewWidget(client, movie_id, ledger)

    try:
        if parsed_args.command == "list":
            return cmd_list(widget)
        elif parsed_args.command == "show":
            return cmd_show(client, parsed_args)
        elif parsed_args.command == "add":
            return cmd_add(widget, parsed_args)
        elif parsed_args.command == "edit":
            return cmd_edit(widget, parsed_args)
        elif parsed_args.command == "delete":
            return cmd_delete(widget, parsed_args)
        elif parsed_args.command == "vote":
            return cmd_vote(widget, parsed_args)
        elif parsed_args.command == "stats":
            return cmd_stats(client, parsed_args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        return 130
    except ReviewsClientError as e:
        print(f"\nError: {e.message}")
        return 1
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
