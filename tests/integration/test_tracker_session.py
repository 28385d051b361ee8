"""
Integration tests for the tracker session.
Tests: sign-in switching, record CRUD with persistence, and profile-driven rescoring.
"""

import pytest

from optrack.contexts.targeting.eligibility import EligibilityStatus
from optrack.contexts.tracking.exceptions import NotSignedInError, OpportunityNotFoundError
from optrack.contexts.tracking.opportunity import Opportunity, Profile, UserIdentity
from optrack.contexts.tracking.state import TrackerSession, TrackerState, add_opportunity
from optrack.contexts.tracking.storage import JsonFileStore, MemoryStore, TrackerStorage

ADA = UserIdentity(id="ada", name="Ada", provider="google")
GRACE = UserIdentity(id="grace", name="Grace", provider="google")


@pytest.fixture
def session():
    session = TrackerSession(TrackerStorage(MemoryStore()))
    session.sign_in(ADA)
    return session


@pytest.mark.integration
def test_mutations_require_sign_in():
    """Test that every mutation is rejected while signed out."""
    session = TrackerSession(TrackerStorage(MemoryStore()))

    with pytest.raises(NotSignedInError, match="Sign in to save opportunities"):
        session.add(Opportunity.create(title="Job"))
    with pytest.raises(NotSignedInError):
        session.save_profile(Profile(skills="python"))
    with pytest.raises(NotSignedInError):
        session.clear()


@pytest.mark.integration
def test_add_is_newest_first_and_persisted(session):
    """Test prepending and read-modify-write persistence."""
    first = session.add(Opportunity.create(title="First"))
    second = session.add(Opportunity.create(title="Second"))

    assert [o.id for o in session.opportunities] == [second.id, first.id]
    assert [o.id for o in session.storage.load_opportunities("ada")] == [second.id, first.id]


@pytest.mark.integration
def test_add_requires_title(session):
    """Test that a blank title is rejected and nothing is written."""
    with pytest.raises(ValueError, match="title is required"):
        session.add(Opportunity.create(title="   "))

    assert session.storage.load_opportunities("ada") == []


@pytest.mark.integration
def test_duplicate_ids_rejected():
    """Test that the pure add keeps ids unique."""
    record = Opportunity(id="same", title="Job")
    state = add_opportunity(TrackerState(user=ADA), record)

    with pytest.raises(ValueError, match="already exists"):
        add_opportunity(state, Opportunity(id="same", title="Other"))


@pytest.mark.integration
def test_update_keeps_id_and_position(session):
    """Test editing a record in place."""
    older = session.add(Opportunity.create(title="Older"))
    newer = session.add(Opportunity.create(title="Newer"))

    updated = session.update(older.id, status="Interview", notes="Panel on Friday")

    assert updated.id == older.id
    assert [o.id for o in session.opportunities] == [newer.id, older.id]
    stored = session.storage.load_opportunities("ada")[1]
    assert stored.status == "Interview"
    assert stored.notes == "Panel on Friday"


@pytest.mark.integration
def test_update_and_delete_unknown_id(session):
    """Test errors for ids that are not in the list."""
    with pytest.raises(OpportunityNotFoundError, match="missing"):
        session.update("missing", status="Offer")
    with pytest.raises(OpportunityNotFoundError):
        session.delete("missing")


@pytest.mark.integration
def test_update_cannot_blank_title(session):
    """Test that an edit may not remove the title."""
    record = session.add(Opportunity.create(title="Job"))

    with pytest.raises(ValueError):
        session.update(record.id, title="")


@pytest.mark.integration
def test_delete_and_clear(session):
    """Test removing one record and then all records."""
    keep = session.add(Opportunity.create(title="Keep"))
    drop = session.add(Opportunity.create(title="Drop"))
    session.add(Opportunity.create(title="Also"))

    session.delete(drop.id)
    assert drop.id not in [o.id for o in session.storage.load_opportunities("ada")]
    assert session.state.find(keep.id) is not None

    assert session.clear() == 2
    assert session.opportunities == ()
    assert session.storage.load_opportunities("ada") == []


@pytest.mark.integration
def test_profile_save_rescores_every_record(session):
    """Test that assessments follow profile changes."""
    record = session.add(Opportunity.create(title="Data", eligibility="Must know Python and SQL"))
    assert session.state.find(record.id).assessment.status == EligibilityStatus.UNKNOWN

    saved = session.save_profile(Profile(skills="python, excel"))
    assert saved.last_updated
    assert session.state.find(record.id).assessment.status == EligibilityStatus.REVIEW

    session.save_profile(session.profile.with_updates(skills="python, sql"))
    assert session.state.find(record.id).assessment.status == EligibilityStatus.STRONG
    assert session.storage.load_profile("ada").skills == "python, sql"


@pytest.mark.integration
def test_switching_users_replaces_data(session):
    """Test that signing in as another user shows only their data."""
    session.add(Opportunity.create(title="Ada's lead"))
    session.save_profile(Profile(majors="Mathematics"))

    session.sign_in(GRACE)
    assert session.opportunities == ()
    assert session.profile.is_empty()

    session.add(Opportunity.create(title="Grace's lead"))
    session.sign_in(ADA)
    assert [o.title for o in session.opportunities] == ["Ada's lead"]
    assert session.profile.majors == "Mathematics"


@pytest.mark.integration
def test_open_restores_signed_in_user(tmp_path):
    """Test that a new session picks up the user and data from the store file."""
    storage = TrackerStorage(JsonFileStore(tmp_path / "store.json"))
    first = TrackerSession.open(storage)
    first.sign_in(ADA)
    first.save_profile(Profile(skills="sql"))
    first.add(Opportunity.create(title="Lead", eligibility="Must know SQL"))

    second = TrackerSession.open(TrackerStorage(JsonFileStore(tmp_path / "store.json")))

    assert second.state.user == ADA
    assert [o.title for o in second.opportunities] == ["Lead"]
    assert second.opportunities[0].assessment.status == EligibilityStatus.STRONG

    second.sign_out()
    assert not TrackerSession.open(storage).state.signed_in
