"""Orchestrator - runs one end-to-end generation cycle."""
import random
from typing import List, Optional
from synthlead.agents.factory import RecordFactory, category_distribution
from synthlead.agents.gate import UniquenessGate
from synthlead.agents.generator import CandidateGenerator, ContentGenerator
from synthlead.agents.selector import StyleSelector
from synthlead.agents.similarity import SimilarityEngine
from synthlead.config import GenerationSettings
from synthlead.data.models import GenerationCycleResult, HistoricalRecord, SourceKind
from synthlead.errors import InsufficientCorpus
from synthlead.memory.corpus import CorpusReader, PersistenceSink
from synthlead.utils.logging import get_logger, set_cycle_id

logger = get_logger(__name__)


class Orchestrator:
    """Wires corpus, generator, gate and sink into ``run_cycle``."""

    def __init__(
        self,
        corpus: CorpusReader,
        sink: PersistenceSink,
        generator: Optional[CandidateGenerator] = None,
        settings: Optional[GenerationSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or GenerationSettings.from_env()
        self.corpus = corpus
        self.sink = sink
        rng = rng or random.Random()

        self.selector = StyleSelector(self.settings, rng)
        self.engine = SimilarityEngine(self.settings.similarity_threshold, self.settings.ngram_size)
        self.generator = generator or ContentGenerator(settings=self.settings)
        self.gate = UniquenessGate(
            self.generator,
            self.selector,
            self.engine,
            max_attempts=self.settings.max_attempts,
        )
        self.factory = RecordFactory(rng)

    def run_cycle(self, dry_run: Optional[bool] = None) -> GenerationCycleResult:
        """
        Generate, dedupe and commit one synthetic lead.

        Returns:
            GenerationCycleResult (accepted or exhausted)

        Raises:
            InsufficientCorpus: too few records to sample examples from
            ProviderError: the generator failed
            PersistenceError: the accepted record could not be saved
        """
        dry_run = self.settings.dry_run if dry_run is None else dry_run
        cycle_id = set_cycle_id()
        logger.info("Starting synthetic lead generation...")

        window = self.corpus.fetch_recent_records(self.settings.window_size)
        pool = self._example_pool(window)
        logger.info(
            f"Found {len(window)} recent comments ({len(pool)} eligible as examples)",
        )

        if len(pool) < self.settings.min_corpus_size:
            raise InsufficientCorpus(len(pool), self.settings.min_corpus_size)

        result = self.gate.run(pool, window, self.settings.similarity_threshold)
        result.cycle_id = cycle_id

        if not result.accepted:
            return result

        record = self.factory.synthesize(
            result.final_attempt.candidate_text,
            category_distribution(window),
        )
        result.record = record

        logger.info(
            f"Generated synthetic lead: {record.full_name} ({record.category.value})",
            extra_data={"email": record.email, "chars": len(record.text)},
        )

        if dry_run:
            logger.info("DRY RUN MODE - No database changes made")
            return result

        # No regeneration on failure: the candidate was already valid
        result.record_id = self.sink.commit(record)
        return result

    def _example_pool(self, window: List[HistoricalRecord]) -> List[HistoricalRecord]:
        records = [r for r in window if r.text.strip()]
        if self.settings.human_only_examples:
            records = [r for r in records if r.source_kind == SourceKind.HUMAN]
        return records
