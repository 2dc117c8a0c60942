from collections import Counter

import pytest

from conftest import GIG_ID, JOB_ID, MISSING_ID, USER_ID, FakeCompletionClient

from talenthub.auth import CandidateIdentity
from talenthub.core.application_assembler import ApplicationAssembler
from talenthub.exceptions import (
    AIServiceUnavailableError,
    ApplicationNotFoundError,
    AuthenticationError,
    InvalidRequestError,
    ListingNotFoundError,
    PersistenceError,
)


@pytest.fixture
def assembler(fake_db, fake_completion):
    return ApplicationAssembler(fake_db, fake_completion)


def test_start_creates_scored_application(assembler, candidate, fake_db):
    application, resumed = assembler.start_application(candidate, job_id=JOB_ID)

    assert resumed is False
    assert application['job_id'] == JOB_ID
    assert application['gig_id'] is None
    assert application['listing_key'] == f'job:{JOB_ID}'
    assert application['status'] == 'in_progress'
    assert application['match_score'] == 78
    assert application['match_breakdown'] == {'skills': 80, 'experience': 70, 'level': 75, 'overall': 78}
    assert application['strengths'] == ['Python', 'API design']
    assert application['user_name'] == 'Ada Lovelace'
    assert application['user_email'] == 'ada@example.com'
    assert application['user_city'] == 'London'
    assert len(application['ai_questions']) == 6
    assert set(application['profile_snapshot']) == {'user', 'experiences', 'projects'}
    assert fake_db.insert_calls == 1


def test_second_start_resumes_without_rescoring(assembler, candidate, fake_completion):
    first, first_resumed = assembler.start_application(candidate, job_id=JOB_ID)
    calls_after_first = len(fake_completion.calls)

    second, second_resumed = assembler.start_application(candidate, job_id=JOB_ID)

    assert (first_resumed, second_resumed) == (False, True)
    assert second['id'] == first['id']
    assert len(fake_completion.calls) == calls_after_first == 2


def test_gig_application_sets_only_gig_reference(assembler, candidate):
    application, _ = assembler.start_application(candidate, gig_id=GIG_ID)

    assert application['gig_id'] == GIG_ID
    assert application['job_id'] is None
    assert application['listing_key'] == f'gig:{GIG_ID}'


@pytest.mark.parametrize('job_id, gig_id', [(None, None), ('', '  '), (JOB_ID, GIG_ID)])
def test_listing_reference_must_be_exactly_one(assembler, candidate, fake_db, fake_completion, job_id, gig_id):
    with pytest.raises(InvalidRequestError):
        assembler.start_application(candidate, job_id=job_id, gig_id=gig_id)

    assert fake_db.reads == []
    assert fake_completion.calls == []


@pytest.mark.parametrize('spelling', [
    JOB_ID.upper(),
    JOB_ID.replace('-', ''),
    '{' + JOB_ID + '}',
    'urn:uuid:' + JOB_ID,
])
def test_listing_id_spellings_share_one_application(assembler, candidate, fake_db, spelling):
    first, _ = assembler.start_application(candidate, job_id=JOB_ID)

    again, resumed = assembler.start_application(candidate, job_id=spelling)

    assert resumed is True
    assert again['id'] == first['id']
    assert fake_db.insert_calls == 1


def test_listing_id_is_stored_in_canonical_form(assembler, candidate):
    application, _ = assembler.start_application(candidate, job_id=JOB_ID.upper())

    assert application['job_id'] == JOB_ID
    assert application['listing_key'] == f'job:{JOB_ID}'


def test_malformed_listing_id_is_rejected(assembler, candidate, fake_db):
    with pytest.raises(InvalidRequestError):
        assembler.start_application(candidate, job_id='not-a-uuid')
    assert fake_db.reads == []


def test_unknown_listing_is_not_found(assembler, candidate, fake_db, fake_completion):
    with pytest.raises(ListingNotFoundError):
        assembler.start_application(candidate, job_id=MISSING_ID)

    assert fake_completion.calls == []
    assert fake_db.insert_calls == 0


def test_unconfigured_ai_rejects_new_applications(assembler, candidate, fake_db, fake_completion):
    fake_completion.configured = False

    with pytest.raises(AIServiceUnavailableError):
        assembler.start_application(candidate, job_id=JOB_ID)
    assert fake_db.applications == {}


def test_unconfigured_ai_still_resumes(assembler, candidate, fake_completion):
    first, _ = assembler.start_application(candidate, job_id=JOB_ID)
    fake_completion.configured = False

    again, resumed = assembler.start_application(candidate, job_id=JOB_ID)
    assert resumed is True
    assert again['id'] == first['id']


def test_unreachable_ai_leaves_no_record(assembler, candidate, fake_db, fake_completion):
    fake_completion.error = AIServiceUnavailableError("AI service unavailable")

    with pytest.raises(AIServiceUnavailableError):
        assembler.start_application(candidate, job_id=JOB_ID)
    assert fake_db.insert_calls == 0


def test_malformed_model_output_still_completes(fake_db, candidate):
    completion = FakeCompletionClient(analysis='no json here', questions='also not json')
    application, resumed = ApplicationAssembler(fake_db, completion).start_application(candidate, job_id=JOB_ID)

    assert resumed is False
    assert application['match_score'] == 50
    assert set(application['match_breakdown'].values()) == {50}
    assert application['profile_summary'] == ''
    assert [q['id'] for q in application['ai_questions']] == [1, 2, 3, 4, 5, 6]
    assert Counter(q['type'] for q in application['ai_questions']) == Counter(
        {'technical': 2, 'behavioral': 1, 'problem_solving': 1, 'motivation': 1, 'gap': 1}
    )


def test_question_call_is_seeded_with_weaknesses(assembler, candidate, fake_completion):
    assembler.start_application(candidate, job_id=JOB_ID)

    assert [c['call'] for c in fake_completion.calls] == ['analysis', 'questions']
    assert fake_completion.calls[1]['weaknesses'] == ['Kubernetes', 'Team leadership']
    assert 'Company: Acme' in fake_completion.calls[0]['listing_text']
    assert 'Name: Ada Lovelace' in fake_completion.calls[0]['candidate_text']


def test_sparse_profile_is_persisted(assembler, candidate, fake_db, fake_completion):
    fake_db.experiences.clear()
    fake_db.projects.clear()

    application, _ = assembler.start_application(candidate, job_id=JOB_ID)

    candidate_text = fake_completion.calls[0]['candidate_text']
    assert candidate_text.count('None listed') == 2
    assert application['profile_snapshot']['experiences'] == []
    assert application['id'] in fake_db.applications


def test_concurrent_start_returns_the_winning_record(assembler, candidate, fake_db):
    winner = {}

    def competing_insert(data):
        fake_db.before_insert = None
        row = dict(data, id='c0ffee00-0000-4000-8000-000000000000')
        winner.update(fake_db.insert_application(row))

    fake_db.before_insert = competing_insert

    application, resumed = assembler.start_application(candidate, job_id=JOB_ID)

    assert resumed is True
    assert application['id'] == winner['id']
    assert len(fake_db.applications) == 1


def test_persistence_failure_surfaces_generic_error(assembler, candidate, fake_db):
    fake_db.insert_error = RuntimeError("connection reset")

    with pytest.raises(PersistenceError):
        assembler.start_application(candidate, job_id=JOB_ID)
    assert fake_db.applications == {}


def test_check_application(assembler, candidate):
    assert assembler.check_application(candidate, job_id=JOB_ID) == {'applied': False}

    application, _ = assembler.start_application(candidate, job_id=JOB_ID)

    assert assembler.check_application(candidate, job_id=JOB_ID) == {
        'applied': True,
        'application_id': application['id'],
        'status': 'in_progress',
        'overall_score': None,
    }
    assert assembler.check_application(candidate, gig_id=GIG_ID) == {'applied': False}


def test_get_application(assembler, candidate):
    application, _ = assembler.start_application(candidate, job_id=JOB_ID)

    assert assembler.get_application(application['id'])['id'] == application['id']
    with pytest.raises(ApplicationNotFoundError):
        assembler.get_application(MISSING_ID)


def test_record_tab_switch_counts_per_owner(assembler, candidate, fake_db):
    application, _ = assembler.start_application(candidate, job_id=JOB_ID)

    assert assembler.record_tab_switch(candidate, application['id']) == 1
    assert assembler.record_tab_switch(candidate, application['id']) == 2

    stranger = CandidateIdentity(id='someone-else')
    with pytest.raises(ApplicationNotFoundError):
        assembler.record_tab_switch(stranger, application['id'])
    assert fake_db.applications[application['id']]['tab_switch_count'] == 2
    assert fake_db.applications[application['id']]['user_id'] == USER_ID


def test_missing_identity_is_rejected_before_any_work(assembler, fake_db, fake_completion):
    with pytest.raises(AuthenticationError):
        assembler.start_application(None, job_id=JOB_ID)
    with pytest.raises(AuthenticationError):
        assembler.start_application(CandidateIdentity(id=''), job_id=JOB_ID)

    assert fake_db.reads == []
    assert fake_completion.calls == []
