"""
Device-local helpful/not-helpful votes.

Votes decorate reviews on this device only. They are kept in a JSON
file keyed by review id and are never sent to the review API or
merged into review documents.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .utils import setup_logger

HELPFUL = "helpful"
NOT_HELPFUL = "not-helpful"
VOTE_TYPES = (HELPFUL, NOT_HELPFUL)


@dataclass
class VoteTally:
    """Vote counts for one review plus this device's own vote."""

    helpful: int = 0
    not_helpful: int = 0
    user_vote: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "helpful": self.helpful,
            "notHelpful": self.not_helpful,
            "userVote": self.user_vote,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VoteTally":
        return cls(
            helpful=data.get("helpful", 0),
            not_helpful=data.get("notHelpful", 0),
            user_vote=data.get("userVote"),
        )


class VoteLedger:
    """JSON-file store of vote tallies."""

    def __init__(self, path: Path, log_dir: Optional[Path] = None):
        self.path = Path(path)
        self.logger = setup_logger("votes", log_dir)

    def _load(self) -> Dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self.logger.error(f"Error reading votes from {self.path}: {e}")
            return {}

    def _save(self, votes: Dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(votes, indent=2), encoding="utf-8")

    def tally(self, review_id: str) -> VoteTally:
        """Current tally for a review (zeros if never voted)."""
        data = self._load().get(review_id)
        return VoteTally.from_dict(data) if data else VoteTally()

    def vote(self, review_id: str, vote_type: str) -> VoteTally:
        """
        Record this device's vote on a review.

        Repeating the current vote withdraws it; voting the other way
        moves the vote.

        Raises:
            ValueError: If vote_type is not 'helpful' or 'not-helpful'.
        """
        if vote_type not in VOTE_TYPES:
            raise ValueError(f"vote_type must be one of {', '.join(VOTE_TYPES)}")

        votes = self._load()
        current = VoteTally.from_dict(votes.get(review_id, {}))

        if current.user_vote == vote_type:
            self._adjust(current, vote_type, -1)
            current.user_vote = None
        else:
            if current.user_vote:
                self._adjust(current, current.user_vote, -1)
            self._adjust(current, vote_type, 1)
            current.user_vote = vote_type

        votes[review_id] = current.to_dict()
        self._save(votes)
        return current

    def forget(self, review_id: str) -> None:
        """Drop the tally of a deleted review."""
        votes = self._load()
        if votes.pop(review_id, None) is not None:
            self._save(votes)

    @staticmethod
    def _adjust(tally: VoteTally, vote_type: str, delta: int) -> None:
        if vote_type == HELPFUL:
            tally.helpful = max(0, tally.helpful + delta)
        else:
            tally.not_helpful = max(0, tally.not_helpful + delta)
