"""Entity resolver clustering raw person records into canonical entities.

Resolution flow:
1. Each record is normalized once; records with no name tokens are skipped
   and reported (ErrorKind.INVALID_INPUT), never dropped silently.
2. The record's name is matched against the canonical name of every entity
   in the pool; the tier confidence is boosted by institutional agreement.
3. The highest-confidence entity at or above min_confidence absorbs the
   record (earliest entity wins ties). Otherwise the record seeds a new
   entity with confidence 100.

Clustering is greedy and order-dependent: A may absorb B and B would have
matched C, yet C still forms its own entity when it does not match A's
canonical name. No transitive closure is computed.

Each record is compared with every entity built so far, so a run costs
O(n·m). This is fine for reviewer searches (tens to low hundreds of
candidates); shard larger batches and merge them with `consolidate`.
"""

import re
from typing import Any, Callable, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..config import Settings, get_settings
from ..errors import ErrorKind
from ..logging import (
    log_resolution_complete,
    log_resolution_event,
    log_skipped_record,
)
from ..names.common import DEFAULT_REGISTRY, CommonNameRegistry
from ..names.normalize import NormalizedName, normalize_name
from .confidence import DEFAULT_ADJUSTER, ConfidenceAdjuster
from .institutions import InstitutionMatcher
from .matcher import DEFAULT_MATCHER, MatchResult, MatchTier, TieredNameMatcher

PUBLICATION_TITLE_KEY_LENGTH = 60
SEED_CONFIDENCE = 100
UNKNOWN_SOURCE = "unknown"

_TITLE_CLEAN_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


class Publication(BaseModel):
    """A publication attached to a candidate record."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str
    doi: str | None = None
    year: int | None = None
    journal: str | None = None
    authors: list[str] = Field(default_factory=list)
    pmid: str | None = None
    arxiv_id: str | None = Field(default=None, alias="arxivId")
    citations: int | None = None
    abstract: str | None = None


class RawRecord(BaseModel):
    """A candidate person record from one source.

    Keys that are not fields are collected into `attributes`. A missing or
    null `source` becomes "unknown". When records merge, list-valued
    attributes are concatenated without duplicates; other attributes keep
    the first non-empty value.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    source: str = UNKNOWN_SOURCE
    affiliation: str | None = None
    email: str | None = None
    website: str | None = None
    h_index: int | None = Field(default=None, alias="hIndex")
    citations: int | None = None
    publications: list[Publication] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    reason: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_attributes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        extra = data.get("attributes")
        if extra is not None and not isinstance(extra, Mapping):
            raise ValueError("attributes must be an object")

        known = set(cls.model_fields)
        known.update(f.alias for f in cls.model_fields.values() if f.alias)

        fields: dict[str, Any] = {}
        attributes = dict(extra or {})
        for key, value in data.items():
            if key == "attributes":
                continue
            if key in known:
                fields[key] = value
            else:
                attributes.setdefault(key, value)

        if fields.get("source") is None:
            fields["source"] = UNKNOWN_SOURCE

        fields["attributes"] = attributes
        return fields


class MergeEvent(BaseModel):
    """Provenance of one record merged into an entity."""

    record_index: int
    source: str
    name: str
    tier: MatchTier
    confidence: int = Field(ge=0, le=100)


class ResolvedEntity(BaseModel):
    """A canonical person built from one or more records."""

    id: int
    canonical_name: NormalizedName
    display_name: str
    alias_names: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)

    affiliation: str | None = None
    email: str | None = None
    website: str | None = None
    h_index: int | None = None
    citations: int | None = None
    reason: str | None = None

    publications: list[Publication] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    attributes: dict[str, Any] = Field(default_factory=dict)

    confidence: int = Field(default=SEED_CONFIDENCE, ge=0, le=100)
    best_tier: MatchTier = MatchTier.EXACT
    merges: list[MergeEvent] = Field(default_factory=list)
    is_common_name: bool = False
    relevance: float | None = None

    def text_fields(self) -> list[str]:
        """Text used for keyword relevance."""
        texts = [pub.title for pub in self.publications if pub.title]
        texts.extend(self.keywords)
        if self.reason:
            texts.append(self.reason)
        return texts


class SkippedRecord(BaseModel):
    """A record that could not be resolved."""

    record_index: int
    name: str | None = None
    source: str | None = None
    error: ErrorKind
    detail: str


class ResolutionReport(BaseModel):
    """Entities produced by one resolution run, with skipped inputs."""

    entities: list[ResolvedEntity] = Field(default_factory=list)
    skipped: list[SkippedRecord] = Field(default_factory=list)
    records_processed: int = 0
    merges: int = 0


PublicationKey = Callable[[Publication], str]


def default_publication_key(publication: Publication) -> str:
    """De-duplication key: DOI if present, else the normalized title prefix."""
    if publication.doi and publication.doi.strip():
        return f"doi:{publication.doi.strip().lower()}"

    title = _TITLE_CLEAN_RE.sub("", publication.title.lower())
    title = _WHITESPACE_RE.sub(" ", title).strip()
    return f"title:{title[:PUBLICATION_TITLE_KEY_LENGTH]}"


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _add_unique(target: list, values: Iterable) -> None:
    for value in values:
        if value not in target:
            target.append(value)


class EntityResolver:
    """Greedy first-fit resolver over an in-memory pool.

    Each call to `resolve` owns its pool; one resolver instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        min_confidence: int = 50,
        matcher: TieredNameMatcher | None = None,
        adjuster: ConfidenceAdjuster | None = None,
        registry: CommonNameRegistry | None = None,
        publication_key: PublicationKey | None = None,
        use_institution_boost: bool = True,
    ):
        """Initialize entity resolver.

        Args:
            min_confidence: Minimum (adjusted) confidence to merge into an entity
            matcher: Name matcher (default contract thresholds)
            adjuster: Institutional confidence adjuster
            registry: Common-name registry used to flag entities
            publication_key: Key used to de-duplicate publications
            use_institution_boost: Fold affiliation agreement into confidence
        """
        if not 0 <= min_confidence <= 100:
            raise ValueError("min_confidence must be within [0, 100]")

        self.min_confidence = min_confidence
        self.matcher = matcher or DEFAULT_MATCHER
        self.adjuster = adjuster or DEFAULT_ADJUSTER
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.publication_key = publication_key or default_publication_key
        self.use_institution_boost = use_institution_boost

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "EntityResolver":
        """Build a resolver from engine settings."""
        settings = settings or get_settings()
        registry = CommonNameRegistry(extra=settings.extra_common_names_list)
        return cls(
            min_confidence=settings.min_confidence,
            matcher=TieredNameMatcher.from_settings(settings),
            adjuster=ConfidenceAdjuster(InstitutionMatcher.from_settings(settings), registry),
            registry=registry,
        )

    def resolve(self, records: Iterable[RawRecord | dict[str, Any]]) -> ResolutionReport:
        """Resolve records, in input order, into canonical entities.

        Args:
            records: Raw records (models or plain dicts)

        Returns:
            Report with entities in creation order and skipped inputs
        """
        report = ResolutionReport()

        for index, raw in enumerate(records):
            report.records_processed += 1

            record = self._coerce(index, raw, report)
            if record is None:
                continue

            name = normalize_name(record.name)
            if name.is_empty:
                self._skip(
                    report,
                    index,
                    record.name,
                    record.source,
                    "Name normalizes to no tokens",
                )
                continue

            self._place(report, index, self._seed(index, record, name))

        self._finish(report)
        return report

    def consolidate(self, pools: Iterable[Iterable[ResolvedEntity]]) -> ResolutionReport:
        """Run a final resolution pass over independently resolved pools.

        Entities are copied, never mutated, and renumbered in order.
        Merge events refer to the entity's position in the flattened input.
        """
        report = ResolutionReport()

        index = 0
        for pool in pools:
            for entity in pool:
                report.records_processed += 1
                unit = entity.model_copy(deep=True)
                unit.relevance = None
                self._place(report, index, unit)
                index += 1

        self._finish(report)
        return report

    def _coerce(
        self,
        index: int,
        raw: RawRecord | dict[str, Any],
        report: ResolutionReport,
    ) -> RawRecord | None:
        if isinstance(raw, RawRecord):
            return raw

        try:
            return RawRecord.model_validate(raw)
        except ValidationError as e:
            name = raw.get("name") if isinstance(raw, dict) else None
            source = raw.get("source") if isinstance(raw, dict) else None
            self._skip(
                report,
                index,
                name if isinstance(name, str) else None,
                source if isinstance(source, str) else None,
                f"Invalid record: {e.error_count()} validation error(s)",
            )
            return None

    def _skip(
        self,
        report: ResolutionReport,
        index: int,
        name: str | None,
        source: str | None,
        detail: str,
    ) -> None:
        report.skipped.append(
            SkippedRecord(
                record_index=index,
                name=name,
                source=source,
                error=ErrorKind.INVALID_INPUT,
                detail=detail,
            )
        )
        log_skipped_record(index, name, detail)

    def _seed(self, index: int, record: RawRecord, name: NormalizedName) -> ResolvedEntity:
        """Build a single-record entity; its id is assigned when placed."""
        entity = ResolvedEntity(
            id=0,
            canonical_name=name,
            display_name=record.name.strip(),
            alias_names=[record.name.strip()],
            sources=[record.source],
            affiliation=record.affiliation,
            email=record.email,
            website=record.website,
            h_index=record.h_index,
            citations=record.citations,
            reason=record.reason,
            attributes={
                k: list(v) if isinstance(v, list) else v
                for k, v in record.attributes.items()
                if not _is_empty(v)
            },
            is_common_name=self.registry.is_common(name.full),
        )
        self._merge_publications(entity, record.publications)
        self._merge_keywords(entity, record.keywords)
        return entity

    def _best_match(
        self,
        unit: ResolvedEntity,
        entities: list[ResolvedEntity],
    ) -> tuple[ResolvedEntity | None, MatchResult | None, int]:
        best: ResolvedEntity | None = None
        best_result: MatchResult | None = None
        best_confidence = -1

        for entity in entities:
            result = self.matcher.match(unit.canonical_name, entity.canonical_name)
            if not result.is_match:
                continue

            confidence = result.confidence
            if self.use_institution_boost:
                confidence = self.adjuster.adjust(
                    confidence, unit.affiliation, entity.affiliation
                )

            # Strict comparison keeps the earliest entity on ties
            if confidence >= self.min_confidence and confidence > best_confidence:
                best = entity
                best_result = result
                best_confidence = confidence

        return best, best_result, best_confidence

    def _place(self, report: ResolutionReport, index: int, unit: ResolvedEntity) -> None:
        target, result, confidence = self._best_match(unit, report.entities)

        if target is None:
            unit.id = len(report.entities) + 1
            report.entities.append(unit)
            log_resolution_event(index, unit.display_name, None, unit.confidence, "new_entity")
            return

        self._absorb(target, unit, index, result.tier, confidence)
        report.merges += 1
        log_resolution_event(index, unit.display_name, target.id, confidence, result.tier.value)

    def _absorb(
        self,
        target: ResolvedEntity,
        unit: ResolvedEntity,
        index: int,
        tier: MatchTier,
        confidence: int,
    ) -> None:
        """Merge a unit into an entity; first-seen wins for scalars."""
        _add_unique(target.sources, unit.sources)
        _add_unique(target.alias_names, unit.alias_names)

        if len(unit.display_name) > len(target.display_name):
            target.display_name = unit.display_name

        for field in ("affiliation", "email", "website", "h_index", "citations", "reason"):
            if _is_empty(getattr(target, field)) and not _is_empty(getattr(unit, field)):
                setattr(target, field, getattr(unit, field))

        for key, value in unit.attributes.items():
            current = target.attributes.get(key)
            if isinstance(current, list) and isinstance(value, list):
                _add_unique(current, value)
            elif _is_empty(current) and not _is_empty(value):
                target.attributes[key] = list(value) if isinstance(value, list) else value

        self._merge_publications(target, unit.publications)
        self._merge_keywords(target, unit.keywords)

        target.is_common_name = target.is_common_name or unit.is_common_name

        target.merges.extend(unit.merges)
        target.merges.append(
            MergeEvent(
                record_index=index,
                source=unit.sources[0] if unit.sources else UNKNOWN_SOURCE,
                name=unit.display_name,
                tier=tier,
                confidence=confidence,
            )
        )

        strongest = max(target.merges, key=lambda m: m.confidence)
        target.confidence = strongest.confidence
        target.best_tier = strongest.tier

    def _merge_publications(
        self,
        entity: ResolvedEntity,
        publications: Iterable[Publication],
    ) -> None:
        seen = {self.publication_key(pub) for pub in entity.publications}
        for pub in publications:
            key = self.publication_key(pub)
            if key not in seen:
                seen.add(key)
                entity.publications.append(pub)

    @staticmethod
    def _merge_keywords(entity: ResolvedEntity, keywords: Iterable[str]) -> None:
        seen = {kw.lower() for kw in entity.keywords}
        for keyword in keywords:
            keyword = keyword.strip()
            if keyword and keyword.lower() not in seen:
                seen.add(keyword.lower())
                entity.keywords.append(keyword)

    @staticmethod
    def _finish(report: ResolutionReport) -> None:
        log_resolution_complete(
            records_processed=report.records_processed,
            entities=len(report.entities),
            merges=report.merges,
            skipped=len(report.skipped),
        )


def resolve_records(
    records: Iterable[RawRecord | dict[str, Any]],
    min_confidence: int = 50,
) -> ResolutionReport:
    """Resolve records with the default matcher and adjuster."""
    return EntityResolver(min_confidence=min_confidence).resolve(records)
