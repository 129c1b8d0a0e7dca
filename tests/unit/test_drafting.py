"""Unit tests for drafting through the generate collaborator and the provider adapter."""

import asyncio

import pytest

from scribe.contexts.generation.drafting import DocumentStore, draft_document
from scribe.contexts.generation.exceptions import GenerationError
from scribe.contexts.generation.providers import (
    DEFAULT_SYSTEM_PROMPT,
    MAX_ATTEMPTS,
    Completion,
    DraftingProvider,
    as_generate,
    backoff_delays,
    get_provider,
)
from scribe.contexts.intake.document import DocumentKind


class MemoryStore(DocumentStore):
    def __init__(self):
        self.saved = None

    def save(self, raw):
        self.saved = raw

    def load(self):
        return self.saved


class FailingStore(DocumentStore):
    def save(self, raw):
        raise OSError("disk full")

    def load(self):
        return None


class EchoProvider(DraftingProvider):
    """Provider that echoes its instructions and prompt after raising `error` on the first `failures` calls."""

    vendor = "echo"
    transient_errors = (RuntimeError,)

    def __init__(self, failures=0, error=RuntimeError):
        super().__init__("v1")
        self.failures = failures
        self.error = error
        self.calls = 0
        self.delays = []
        self.sleep = self.delays.append

    def _complete(self, instructions, prompt):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error("busy")
        return Completion(f"{instructions}|{prompt}", input_tokens=3, output_tokens=5)


def _returning(value, calls=None):
    async def generate(prompt, context=None):
        if calls is not None:
            calls.append((prompt, context))
        return value

    return generate


def _draft(generate, *args, **kwargs):
    return asyncio.run(draft_document(generate, *args, **kwargs))


# =============================================================================
# DRAFTING
# =============================================================================


@pytest.mark.unit
def test_draft_wraps_text():
    """Test generated text becomes a RawDocument with detected kind."""
    calls = []
    raw = _draft(_returning("Dear Team,\nI am writing.\nSincerely,\nJane", calls), "Write a letter", "Be brief")

    assert raw.kind == DocumentKind.COVER_LETTER
    assert raw.text.startswith("Dear Team,")
    assert raw.country == "International"
    assert calls == [("Write a letter", "Be brief")]


@pytest.mark.unit
def test_draft_explicit_metadata():
    """Test explicit kind, language and country are kept."""
    raw = _draft(_returning("JANE DOE"), "p", kind="resume", language="de", country="Germany")

    assert raw.kind == DocumentKind.RESUME
    assert raw.language == "de"
    assert raw.country == "Germany"


@pytest.mark.unit
def test_draft_coerces_output():
    """Test None and bytes outputs are coerced to text."""
    assert _draft(_returning(None), "p").is_empty
    assert _draft(_returning("Jürgen".encode("utf-8")), "p").text == "Jürgen"


@pytest.mark.unit
def test_draft_rejects_non_text():
    """Test a non-text output raises GenerationError."""
    with pytest.raises(GenerationError) as excinfo:
        _draft(_returning(42), "p")
    assert isinstance(excinfo.value.original_error, TypeError)


@pytest.mark.unit
def test_draft_wraps_collaborator_failure():
    """Test a failing collaborator raises GenerationError with the provider name."""

    async def generate(prompt, context=None):
        raise ConnectionError("offline")

    generate.provider_name = "echo/v1"

    with pytest.raises(GenerationError) as excinfo:
        _draft(generate, "p")
    assert excinfo.value.provider_name == "echo/v1"
    assert isinstance(excinfo.value.original_error, ConnectionError)
    assert "offline" in str(excinfo.value)


@pytest.mark.unit
def test_draft_saves_to_store():
    """Test the draft is handed to the store."""
    store = MemoryStore()
    raw = _draft(_returning("JANE DOE"), "p", store=store)
    assert store.load() is raw


@pytest.mark.unit
def test_store_failure_keeps_draft():
    """Test a store failure raises GenerationError carrying the draft."""
    with pytest.raises(GenerationError) as excinfo:
        _draft(_returning("JANE DOE"), "p", store=FailingStore())
    assert excinfo.value.raw.text == "JANE DOE"


@pytest.mark.unit
def test_unknown_kind_fails_before_generating():
    """Test an unknown kind raises GenerationError without calling the collaborator."""
    calls = []
    with pytest.raises(GenerationError) as excinfo:
        _draft(_returning("JANE DOE", calls), "p", kind="memo")

    assert isinstance(excinfo.value.original_error, ValueError)
    assert calls == []


# =============================================================================
# PROVIDERS
# =============================================================================


@pytest.mark.unit
def test_backoff_delays_double():
    """Test retry delays start at one second and double."""
    assert backoff_delays() == [1.0, 2.0, 4.0, 8.0]
    assert backoff_delays(1) == []


@pytest.mark.unit
def test_transient_errors_are_retried():
    """Test transient failures are retried with exponential delays."""
    provider = EchoProvider(failures=2)

    completion = provider.complete("Write")

    assert completion.text == f"{DEFAULT_SYSTEM_PROMPT}|Write"
    assert provider.delays == [1.0, 2.0]
    assert provider.calls == 3


@pytest.mark.unit
def test_retries_give_up():
    """Test the last transient failure propagates after MAX_ATTEMPTS calls."""
    provider = EchoProvider(failures=MAX_ATTEMPTS)

    with pytest.raises(RuntimeError):
        provider.complete("Write")
    assert provider.calls == MAX_ATTEMPTS
    assert len(provider.delays) == MAX_ATTEMPTS - 1


@pytest.mark.unit
def test_other_errors_are_not_retried():
    """Test non-transient errors propagate on the first call."""
    provider = EchoProvider(failures=1, error=KeyError)

    with pytest.raises(KeyError):
        provider.complete("Write")
    assert provider.delays == []


@pytest.mark.unit
def test_provider_is_the_generate_collaborator():
    """Test awaiting a provider sends context as instructions and returns text."""
    provider = EchoProvider()

    assert provider.provider_name == "echo/v1"
    assert asyncio.run(provider("Write", "Context")) == "Context|Write"
    assert asyncio.run(provider("Write", None)) == f"{DEFAULT_SYSTEM_PROMPT}|Write"
    assert as_generate(provider) is provider


@pytest.mark.unit
def test_as_generate_rejects_non_providers():
    """Test only providers are adapted."""
    with pytest.raises(TypeError):
        as_generate(lambda prompt, context: prompt)


@pytest.mark.unit
def test_draft_through_provider():
    """Test drafting end to end through a provider."""
    raw = _draft(as_generate(EchoProvider()), "JANE DOE", "SUMMARY")
    assert raw.text == "SUMMARY|JANE DOE"


@pytest.mark.unit
def test_draft_failure_names_provider():
    """Test a provider failure is reported with the provider name."""
    with pytest.raises(GenerationError) as excinfo:
        _draft(EchoProvider(failures=1, error=KeyError), "p")
    assert excinfo.value.provider_name == "echo/v1"


@pytest.mark.unit
def test_unknown_provider():
    """Test an unknown provider name is rejected."""
    with pytest.raises(ValueError):
        get_provider("acme")
