"""RemoteOK job board fetcher."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from jobhonter.domain.models import CandidateItem, SearchMode
from jobhonter.logging import get_logger
from jobhonter.utils.cancellation import CancellationToken
from jobhonter.utils.timestamps import parse_iso_datetime, unix_to_timestamp

from .base import BaseSourceFetcher
from .exceptions import SourceResponseError

logger = get_logger(__name__, component="source")


class RemoteOKFetcher(BaseSourceFetcher):
    """Fetcher for the RemoteOK public job feed.

    The feed is a single JSON array of every current posting; keyword
    filtering is left to the relevance engine. The first element is a
    legal notice rather than a job and is skipped.

    API Details:
        Endpoint: https://remoteok.com/api
        Method: GET
        Authentication: None (public)
        Response: JSON array; element 0 is {"legal": ...}
    """

    SOURCE_TYPE = "remoteok"
    API_URL = "https://remoteok.com/api"

    def fetch(
        self,
        keywords: Sequence[str],
        location: Optional[str] = None,
        max_age_days: int = 7,
        mode: SearchMode = SearchMode.MODERATE,
        cancellation: Optional[CancellationToken] = None,
    ) -> list[CandidateItem]:
        """Fetch the feed and transform each posting.

        Raises:
            SourceFetchError: On HTTP failure or an unexpected response shape
        """
        if self._is_cancelled(cancellation):
            logger.info(
                "RemoteOK fetch cancelled",
                extra={"event": "source.fetch.cancelled", "source_name": self.name},
            )
            return []

        logger.info(
            "Fetching jobs from RemoteOK",
            extra={"event": "source.fetch.started", "source_name": self.name, "url": self.API_URL},
        )

        response = self._make_request(self.API_URL)
        if not isinstance(response, list):
            raise SourceResponseError(
                f"Expected JSON array response, got {type(response).__name__}", source_name=self.name
            )

        postings = [
            entry for entry in response if isinstance(entry, dict) and "legal" not in entry and entry.get("id")
        ]

        candidates: List[CandidateItem] = []
        for posting in postings:
            try:
                candidates.append(self._transform_posting(posting))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to transform RemoteOK posting",
                    extra={"source_name": self.name, "job_id": posting.get("id"), "error": str(e)},
                )

        logger.info(
            "Successfully fetched jobs from RemoteOK",
            extra={"event": "source.fetch.completed", "source_name": self.name, "count": len(candidates)},
        )
        return self._truncate_items(candidates)

    def _transform_posting(self, posting: Dict[str, Any]) -> CandidateItem:
        position = (posting.get("position") or "").strip()
        company = (posting.get("company") or "").strip()
        title = f"{position} at {company}" if position and company else position or company

        lines = [self._clean_html(posting.get("description"))]
        lines.append(f"Location: {posting.get('location') or 'Remote'}")
        tags = [str(tag) for tag in posting.get("tags") or [] if tag]
        if tags:
            lines.append("Tags: " + ", ".join(tags))
        salary = self._format_salary(posting.get("salary_min"), posting.get("salary_max"))
        if salary:
            lines.append(f"Salary: {salary}")

        epoch = posting.get("epoch")
        created_at = unix_to_timestamp(float(epoch)) if epoch else parse_iso_datetime(posting.get("date"))

        return CandidateItem(
            id=str(posting["id"]),
            title=title,
            body="\n".join(line for line in lines if line),
            source_name=self.name,
            created_at=created_at,
            source_url=posting.get("url") or posting.get("apply_url") or "",
            stable_id=True,
        )

    @staticmethod
    def _format_salary(salary_min: Any, salary_max: Any) -> Optional[str]:
        """Format a salary range such as "$60,000 - $90,000"."""
        low = int(salary_min) if salary_min else 0
        high = int(salary_max) if salary_max else 0
        if low and high:
            return f"${low:,} - ${high:,}"
        if low or high:
            return f"${(low or high):,}"
        return None
