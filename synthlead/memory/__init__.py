"""Lead corpus storage."""
from synthlead.memory.corpus import LeadStore, CorpusReader, PersistenceSink

__all__ = ["LeadStore", "CorpusReader", "PersistenceSink"]
