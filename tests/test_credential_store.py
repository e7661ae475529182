"""Summary: Tests for the connection record store.

Importance: Ensures legacy records are healed and stored_at stays stable.
Alternatives: Rely on manager tests only.
"""

from __future__ import annotations

from insighthub.credential_store import OPTION_NAME, CredentialStore
from insighthub.models import ConnectionRecord, ValidationState, ValidationStatus
from insighthub.storage.memory_store import MemoryOptionStore


def test_legacy_string_record_is_migrated(clock) -> None:
    """Summary: Verify a bare token string becomes a full record on read.

    Importance: Older installs stored only the token value.
    Alternatives: Treat legacy values as disconnected.
    """

    options = MemoryOptionStore()
    options.set(OPTION_NAME, {"clarity": "legacy-token"})
    record = CredentialStore(options, clock=clock).get("clarity")
    assert record is not None
    assert record.credentials == {"token": "legacy-token"}
    assert record.metadata == {}
    assert record.validation.status == ValidationStatus.UNKNOWN
    assert record.stored_at == int(clock())
    stored = options.get(OPTION_NAME)["clarity"]
    assert set(stored) == {"credentials", "metadata", "validation", "stored_at"}


def test_partial_validation_is_backfilled(clock) -> None:
    options = MemoryOptionStore()
    options.set(
        OPTION_NAME,
        {
            "activecampaign": {
                "credentials": {"api_url": "https://x.example.com", "api_key": "k"},
                "validation": {"status": "success"},
                "stored_at": 100,
            }
        },
    )
    record = CredentialStore(options, clock=clock).get("activecampaign")
    assert record is not None
    assert record.validation.status == ValidationStatus.SUCCESS
    assert record.validation.checked_at is None
    assert record.stored_at == 100
    assert options.get(OPTION_NAME)["activecampaign"]["validation"]["message"] == ""


def test_malformed_values_read_as_missing(clock) -> None:
    options = MemoryOptionStore()
    options.set(OPTION_NAME, {"clarity": 42})
    store = CredentialStore(options, clock=clock)
    assert store.get("clarity") is None
    options.set(OPTION_NAME, "not-a-dict")
    assert store.get("clarity") is None
    assert store.all() == {}


def test_put_preserves_first_stored_at(clock) -> None:
    """Summary: Ensure reconnects keep the original stored_at.

    Importance: stored_at records when a tool was first connected.
    Alternatives: Overwrite stored_at on each save.
    """

    store = CredentialStore(MemoryOptionStore(), clock=clock)
    first = store.put("clarity", ConnectionRecord(credentials={"project_id": "a"}))
    clock.advance(500)
    second = store.put(
        "clarity",
        ConnectionRecord(
            credentials={"project_id": "b"},
            validation=ValidationState(status=ValidationStatus.SUCCESS),
        ),
    )
    assert second.stored_at == first.stored_at
    record = store.get("clarity")
    assert record is not None
    assert record.credentials == {"project_id": "b"}

    store.delete("clarity")
    store.delete("clarity")
    assert store.get("clarity") is None


def test_unparseable_stored_at_is_restamped(clock) -> None:
    """Summary: Verify a non-numeric stored_at is replaced on read and on save.

    Importance: A corrupt timestamp must not break connect, validate, or sync.
    Alternatives: Raise and force the admin to reconnect.
    """

    options = MemoryOptionStore()
    options.set(
        OPTION_NAME,
        {
            "clarity": {
                "credentials": {"project_id": "proj123"},
                "metadata": {},
                "validation": ValidationState().to_dict(),
                "stored_at": "2024-01-01",
            }
        },
    )
    store = CredentialStore(options, clock=clock)
    record = store.get("clarity")
    assert record is not None
    assert record.stored_at == int(clock())
    assert options.get(OPTION_NAME)["clarity"]["stored_at"] == int(clock())

    options.set(OPTION_NAME, {"clarity": {"credentials": {}, "stored_at": "garbage"}})
    clock.advance(30)
    saved = store.put("clarity", ConnectionRecord(credentials={"project_id": "proj123"}))
    assert saved.stored_at == int(clock())
