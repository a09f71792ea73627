"""
Record classifier.
Partitions normalized records into named buckets with ordered predicate rules.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..config import AnalyticsSettings
from .models import (
    REGISTERED_BUCKET,
    UNREGISTERED_BUCKET,
    ClaimRecord,
    ProcessedData,
    is_blank,
)

logger = logging.getLogger(__name__)


@dataclass
class BucketRule:
    """A named bucket and the predicate that claims records for it."""

    name: str
    predicate: Callable[[ClaimRecord], bool]


class Classifier:
    """
    Assigns each record to exactly one bucket.

    Rules are tried in order and the first match wins; records no rule
    claims land in the default bucket.
    """

    def __init__(
        self,
        settings: AnalyticsSettings | None = None,
        rules: list[BucketRule] | None = None,
        default_bucket: str = UNREGISTERED_BUCKET,
    ) -> None:
        self.settings = settings or AnalyticsSettings()
        self.default_bucket = default_bucket
        self.rules: list[BucketRule] = (
            rules if rules is not None else self._default_rules()
        )

    def _default_rules(self) -> list[BucketRule]:
        field = self.settings.registration_field

        def is_registered(record: ClaimRecord) -> bool:
            return not is_blank(record.get(field))

        return [BucketRule(name=REGISTERED_BUCKET, predicate=is_registered)]

    @property
    def bucket_names(self) -> list[str]:
        names = [rule.name for rule in self.rules]
        if self.default_bucket not in names:
            names.append(self.default_bucket)
        return names

    def bucket_for(self, record: ClaimRecord) -> str:
        """Name of the bucket a record belongs to."""
        for rule in self.rules:
            if rule.predicate(record):
                return rule.name
        return self.default_bucket

    def classify(self, records: Iterable[ClaimRecord]) -> ProcessedData:
        """Partition records in a single ordered pass."""
        buckets: dict[str, list[ClaimRecord]] = {name: [] for name in self.bucket_names}
        for record in records:
            buckets[self.bucket_for(record)].append(record)

        logger.debug(
            "Classified records: %s",
            {name: len(members) for name, members in buckets.items()},
        )
        return ProcessedData(buckets=buckets)
