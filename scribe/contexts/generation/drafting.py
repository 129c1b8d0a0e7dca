"""
Drafting: one call to the generate collaborator, wrapped as a RawDocument.

The collaborator's output is untrusted. Whatever comes back is coerced to
text and handed to intake untouched; structure is inferred later, never
assumed here.
"""

from abc import ABC, abstractmethod
from typing import Optional

from scribe.contexts.generation.exceptions import GenerationError
from scribe.contexts.generation.logger import log_draft_received, log_generation_failure
from scribe.contexts.generation.providers import GenerateFn
from scribe.contexts.intake.document import DocumentKind, RawDocument


class DocumentStore(ABC):
    """
    Read/write interface for persisting the last drafted document.

    Implemented by the host application; scribe only calls it.
    """

    @abstractmethod
    def save(self, raw: RawDocument) -> None:
        """Persist the document, replacing any previous one."""
        pass

    @abstractmethod
    def load(self) -> Optional[RawDocument]:
        """The last persisted document, or None."""
        pass


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    raise TypeError(f"generate returned {type(value).__name__}, expected text")


async def draft_document(
    generate: GenerateFn,
    prompt: str,
    context: Optional[str] = None,
    kind=None,
    language: Optional[str] = None,
    country: Optional[str] = "International",
    store: Optional[DocumentStore] = None,
) -> RawDocument:
    """
    Draft a document through the generate collaborator.

    Args:
        generate: Async generate(prompt, context) -> str
        prompt: Passed through verbatim
        context: Passed through verbatim
        kind: DocumentKind or its value (default: detected from the text)
        language: Language tag (default: detected from the text)
        country: Target country
        store: Optional DocumentStore that receives the draft

    Returns:
        RawDocument holding the generated text

    Raises:
        GenerationError: The kind is unknown, the collaborator failed or
            returned non-text, or the store rejected the draft (the draft is
            on error.raw)

    Example:
        >>> raw = asyncio.run(draft_document(generate, prompt, kind="resume", country="Germany"))
        >>> raw.kind
        <DocumentKind.RESUME: 'resume'>
    """
    provider_name = getattr(generate, "provider_name", None)
    if kind is not None:
        try:
            kind = DocumentKind.parse(kind)
        except ValueError as e:
            log_generation_failure(e)
            raise GenerationError("Invalid document kind requested", provider_name=provider_name, original_error=e) from e

    try:
        text = _as_text(await generate(prompt, context))
    except Exception as e:
        log_generation_failure(e)
        raise GenerationError("Document generation failed", provider_name=provider_name, original_error=e) from e

    raw = RawDocument.create(text, kind=kind, language=language, country=country)
    log_draft_received(raw.kind.value, raw.language, len(raw.text))

    if store is not None:
        try:
            store.save(raw)
        except Exception as e:
            log_generation_failure(e)
            raise GenerationError("Drafted document could not be stored", original_error=e, raw=raw) from e
    return raw
