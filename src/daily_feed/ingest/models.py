"""Result models for ingestion runs."""

from dataclasses import dataclass, field


@dataclass
class IngestResult:
    """Outcome of one ingestion run.

    Attributes:
        date: Feed date the run wrote to (YYYY-MM-DD).
        ingested: Items that reached status ok in this run.
        failed: Items whose terminal state in this run is error, or whose
            write failed.
        errors: One message per failed item, plus the source error when
            the run aborted.
        skipped: Candidates left alone because their record was complete.
        aborted: Whether the source list could not be fetched.
        recalibrated: Whether the day's scores were redistributed.
    """

    date: str
    ingested: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    skipped: int = 0
    aborted: bool = False
    recalibrated: bool = False
