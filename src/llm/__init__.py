"""Model invocation package.

  from src.llm import build_client, invoke, extract_presentation

Architecture:
  retry.py      → RetryPolicy, attempt outcomes and records
  invoker.py    → POST with per-attempt timeout and backoff retry
  client.py     → Gemini request building and candidate-text extraction
  parser.py     → JSON extraction from raw model output
  validators.py → Structural validation into PresentationDocument
  errors.py     → ErrorCategory, PipelineError, classify_error

The pipelines (src/pipeline/) compose these in order:
  1. PROMPT: Tell the model what format to produce
  2. INVOKE: Transport with retry on 5xx / timeout / connection errors
  3. PARSE: Extract JSON, handling fences and surrounding prose
  4. VALIDATE: Required fields, section count, field types
  5. CLASSIFY: Any failure becomes a PipelineError with a stable category
"""

# Transport
from src.llm.retry import (
    AttemptOutcome,
    RetryPolicy,
    TransportAttempt,
)
from src.llm.invoker import (
    invoke,
    InvocationResult,
    TransportError,
)

# Client
from src.llm.client import (
    GeminiClient,
    build_client,
    ModelResponseError,
    EmptyResponseError,
)

# Parsing
from src.llm.parser import (
    extract_json,
    extract_presentation,
    JSONExtractionError,
)

# Validation
from src.llm.validators import (
    validate_presentation,
    DocumentValidationError,
)

# Errors
from src.llm.errors import (
    ErrorCategory,
    PipelineError,
    classify_error,
)

__all__ = [
    # Transport
    "AttemptOutcome",
    "RetryPolicy",
    "TransportAttempt",
    "invoke",
    "InvocationResult",
    "TransportError",
    # Client
    "GeminiClient",
    "build_client",
    "ModelResponseError",
    "EmptyResponseError",
    # Parser
    "extract_json",
    "extract_presentation",
    "JSONExtractionError",
    # Validators
    "validate_presentation",
    "DocumentValidationError",
    # Errors
    "ErrorCategory",
    "PipelineError",
    "classify_error",
]
