"""Custom exception hierarchy for the audit query engine."""


class AuditRAGError(Exception):
    """Base exception for all audit query engine errors."""


class ConfigurationError(AuditRAGError):
    """Error in system configuration."""


class CompletionError(AuditRAGError):
    """Error from the text-completion capability."""


class CompletionUnavailable(CompletionError):
    """Text-completion capability is not configured."""


class EmbeddingError(AuditRAGError):
    """Error generating embeddings."""


class SemanticSearchError(AuditRAGError):
    """Error from the semantic-similarity capability."""


class IntentParseError(AuditRAGError):
    """Completion output could not be parsed into an intent."""


class RetrievalError(AuditRAGError):
    """Error during candidate selection."""


class CapabilityTimeout(AuditRAGError):
    """An external capability did not answer within its time budget."""
