"""Weak association analysis module for weakassoc.

This module infers undeclared foreign key relationships ("weak
associations") from column and table naming conventions:
- Match keys derived from column and table names
- Candidate parent keys (primary keys and unique indexes)
- Validation against declared foreign keys and column types
- Deterministic grouping of the results into named weak foreign keys
"""

from weakassoc.analysis.models import (
    WeakAssociation,
    WeakAssociationForeignKey,
    construct_foreign_key_name,
)
from weakassoc.analysis.match_keys import (
    MatchKeyDeriver,
    ColumnMatchIndex,
    TableMatchIndex,
    find_table_name_prefixes,
    singular_forms,
    singularize,
    split_identifier,
)
from weakassoc.analysis.candidate_keys import CandidateKeySelector
from weakassoc.analysis.validation import AssociationValidator, DeclaredForeignKeySet
from weakassoc.analysis.weak_associations import (
    AnalysisOptions,
    WeakAssociationAnalyzer,
    analyze_weak_associations,
)

__all__ = [
    # Models
    "WeakAssociation",
    "WeakAssociationForeignKey",
    "construct_foreign_key_name",
    # Match keys
    "MatchKeyDeriver",
    "ColumnMatchIndex",
    "TableMatchIndex",
    "find_table_name_prefixes",
    "singular_forms",
    "singularize",
    "split_identifier",
    # Candidates and validation
    "CandidateKeySelector",
    "AssociationValidator",
    "DeclaredForeignKeySet",
    # Orchestrator
    "AnalysisOptions",
    "WeakAssociationAnalyzer",
    "analyze_weak_associations",
]
