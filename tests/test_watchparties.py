import re
from unittest import mock

import pytest

from moodreel.exceptions import (
    ValidationFailure, NotFound, Forbidden, PreconditionFailure, UpstreamFailure, InternalFailure
)
from movies.resolver import MovieResolver
from recommendations.services import RecommendationPipeline
from watchparties.models import WatchParty, PartyMember
from watchparties.services import (
    WatchPartyService, GroupRecommendationService, generate_invite_code,
    unique_invite_code, top_labels, clean_labels
)
from watchparties.views import WatchPartyViewSet
from .conftest import FakeCatalog, FakeLLM, candidate

pytestmark = pytest.mark.django_db

GROUP_REPLY = "**Hot Fuzz (2007)** - action comedy\n**Shaun of the Dead (2004)** - zombies, laughs\n"


@pytest.fixture
def catalog():
    return FakeCatalog(results={
        'Hot Fuzz': [candidate(4638, 'Hot Fuzz')],
        'Shaun of the Dead': [candidate(747, 'Shaun of the Dead')],
    })


def group_service(llm, catalog):
    return GroupRecommendationService(RecommendationPipeline(llm_client=llm, resolver=MovieResolver(catalog=catalog)))


@pytest.fixture
def party(user):
    return WatchPartyService.create_party(user, 'Friday night')


class TestInviteCodes:
    def test_format(self):
        assert re.fullmatch(r'[A-Z0-9]{6}', generate_invite_code())

    def test_thousand_parties_get_distinct_codes(self, user):
        codes = {WatchPartyService.create_party(user, f"Party {i}").invite_code for i in range(1000)}
        assert len(codes) == 1000

    def test_collision_is_redrawn(self, party):
        with mock.patch('watchparties.services.generate_invite_code', side_effect=[party.invite_code, 'ZZZ999']):
            assert unique_invite_code() == 'ZZZ999'

    def test_insert_collision_is_retried(self, party, other_user):
        with mock.patch('watchparties.services.unique_invite_code', side_effect=[party.invite_code, 'NEW123']) as draw:
            second = WatchPartyService.create_party(other_user, 'Saturday matinee')

        assert draw.call_count == 2
        assert second.invite_code == 'NEW123'
        assert WatchParty.objects.filter(created_by=other_user).count() == 1
        assert second.members.filter(user=other_user).exists()

    def test_gives_up_after_repeated_insert_collisions(self, party, other_user):
        with mock.patch('watchparties.services.unique_invite_code', return_value=party.invite_code):
            with pytest.raises(InternalFailure):
                WatchPartyService.create_party(other_user, 'Doomed')
        assert not WatchParty.objects.filter(created_by=other_user).exists()


class TestMembership:
    def test_creator_is_first_member(self, party, user):
        assert party.status == WatchParty.Status.ACTIVE
        assert list(party.members.values_list('user', flat=True)) == [user.pk]

    def test_name_is_required(self, user):
        with pytest.raises(ValidationFailure):
            WatchPartyService.create_party(user, '  ')

    def test_join_is_case_insensitive(self, party, other_user):
        WatchPartyService.join(party.invite_code.lower(), other_user)
        assert party.members.count() == 2

    def test_join_twice_rejected(self, party, other_user):
        WatchPartyService.join(party.invite_code, other_user)
        with pytest.raises(ValidationFailure):
            WatchPartyService.join(party.invite_code, other_user)

    def test_unknown_or_inactive_code(self, party, other_user):
        with pytest.raises(NotFound):
            WatchPartyService.join('NOPE00', other_user)
        WatchPartyService.update_status(party, 'completed')
        with pytest.raises(NotFound):
            WatchPartyService.join(party.invite_code, other_user)

    def test_leave(self, party, user, other_user):
        with pytest.raises(ValidationFailure):
            WatchPartyService.leave(party, user)
        with pytest.raises(Forbidden):
            WatchPartyService.leave(party, other_user)

        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.leave(party, other_user)
        assert party.members.count() == 1

    def test_only_creator_adds_guests(self, party, other_user, user):
        WatchPartyService.join(party.invite_code, other_user)
        with pytest.raises(Forbidden):
            WatchPartyService.add_guest(party, other_user, 'Grandma')
        guest = WatchPartyService.add_guest(party, user, 'Grandma')
        assert guest.user is None
        assert guest.display_name == 'Grandma'

    def test_status_values(self, party):
        with pytest.raises(ValidationFailure):
            WatchPartyService.update_status(party, 'paused')
        WatchPartyService.update_status(party, 'cancelled')
        party.refresh_from_db()
        assert party.status == 'cancelled'

    def test_access_checks(self, party, user, other_user):
        assert WatchPartyService.get_for_member(party.pk, user) == party
        with pytest.raises(Forbidden):
            WatchPartyService.get_for_member(party.pk, other_user)
        with pytest.raises(Forbidden):
            WatchPartyService.get_for_creator(party.pk, other_user, action='delete')
        with pytest.raises(NotFound):
            WatchPartyService.get_party(party.pk + 100)


class TestPreferences:
    def test_pools_are_deduplicated_union(self, party, user, other_user):
        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.submit_preferences(party, user, genres=['Action', 'Comedy'], moods=['Fun'])
        party = WatchPartyService.submit_preferences(
            party, other_user, genres=['Action', 'Horror'], moods=['Fun', 'Tense'], avoid=['gore']
        )

        assert party.preferred_genres == ['Action', 'Comedy', 'Horror']
        assert party.preferred_moods == ['Fun', 'Tense']
        assert party.avoid == ['gore']
        assert all(m.has_responded for m in party.members.all())

    def test_resubmission_replaces_member_answers(self, party, user):
        WatchPartyService.submit_preferences(party, user, genres=['Drama'])
        WatchPartyService.submit_preferences(party, user, genres=['Comedy'])
        member = party.members.get(user=user)
        assert member.genres == ['Comedy']

    def test_non_member_cannot_submit(self, party, other_user):
        with pytest.raises(Forbidden):
            WatchPartyService.submit_preferences(party, other_user, genres=['Drama'])

    def test_creator_answers_for_guest(self, party, user, other_user):
        guest = WatchPartyService.add_guest(party, user, 'Grandma')
        WatchPartyService.submit_preferences(party, user, genres=['Musical'], member_id=guest.pk)
        guest.refresh_from_db()
        assert guest.has_responded
        assert guest.genres == ['Musical']

        WatchPartyService.join(party.invite_code, other_user)
        with pytest.raises(Forbidden):
            WatchPartyService.submit_preferences(party, other_user, genres=['Drama'], member_id=guest.pk)

    def test_labels_must_be_strings(self):
        assert clean_labels([' Action ', 'Action', '']) == ['Action']
        with pytest.raises(ValidationFailure):
            clean_labels('Action')
        with pytest.raises(ValidationFailure):
            clean_labels([1, 2])


class TestAggregation:
    def test_top_labels_by_frequency_then_first_seen(self):
        submissions = [['Drama', 'Comedy'], ['Horror', 'Comedy'], ['Horror', 'Action']]
        assert top_labels(submissions) == ['Comedy', 'Horror', 'Drama']

    def test_top_labels_ties_follow_pool_order(self):
        submissions = [['Comedy', 'Action'], ['Horror', 'Drama']]
        pool = ['Horror', 'Drama', 'Comedy', 'Action']
        assert top_labels(submissions, pool=pool) == ['Horror', 'Drama', 'Comedy']

    def test_top_labels_fewer_than_limit(self):
        assert top_labels([['Action'], []]) == ['Action']
        assert top_labels([]) == []

    def test_aggregate_counts_each_submission(self, party, user, other_user):
        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.submit_preferences(party, user, genres=['Action', 'Comedy'])
        WatchPartyService.submit_preferences(party, other_user, genres=['Action', 'Horror'])

        preferences = GroupRecommendationService.aggregate(list(party.members.all()))
        assert preferences.top_genres == ['Action', 'Comedy', 'Horror']
        assert preferences.member_count == 2

    def test_ties_use_submission_order_not_join_order(self, party, user, other_user):
        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.submit_preferences(party, other_user, genres=['Horror', 'Drama'], moods=['Tense'])
        WatchPartyService.submit_preferences(party, user, genres=['Comedy', 'Action'], moods=['Fun'])
        party.refresh_from_db()

        preferences = GroupRecommendationService.aggregate(
            list(party.members.all()), party.preferred_genres, party.preferred_moods
        )
        assert party.preferred_genres == ['Horror', 'Drama', 'Comedy', 'Action']
        assert preferences.top_genres == ['Horror', 'Drama', 'Comedy']
        assert preferences.top_moods == ['Tense', 'Fun']

    def test_generate_ranks_ties_by_pool(self, party, user, other_user, catalog):
        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.submit_preferences(party, other_user, genres=['Horror', 'Drama'])
        WatchPartyService.submit_preferences(party, user, genres=['Comedy', 'Action'])

        llm = FakeLLM(GROUP_REPLY)
        _, preferences = group_service(llm, catalog).generate(party)

        assert preferences.top_genres == ['Horror', 'Drama', 'Comedy']
        assert 'Popular genres: Horror, Drama, Comedy' in llm.calls[0]['user']


class TestGroupRecommendation:
    def test_waits_for_every_member(self, party, user, other_user, make_user, catalog):
        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.join(party.invite_code, make_user('carol'))
        WatchPartyService.submit_preferences(party, user, genres=['Action'])
        WatchPartyService.submit_preferences(party, other_user, genres=['Comedy'])

        llm = FakeLLM(GROUP_REPLY)
        with pytest.raises(PreconditionFailure):
            group_service(llm, catalog).generate(party)
        assert llm.calls == []

    def test_generate_stores_picks(self, party, user, other_user, catalog):
        WatchPartyService.join(party.invite_code, other_user)
        WatchPartyService.submit_preferences(party, user, genres=['Action', 'Comedy'], moods=['Fun'])
        WatchPartyService.submit_preferences(party, other_user, genres=['Comedy'], avoid=['gore'])

        llm = FakeLLM(GROUP_REPLY)
        party, preferences = group_service(llm, catalog).generate(party)

        assert preferences.top_genres == ['Comedy', 'Action']
        assert [m.title for m in party.group_movies] == ['Hot Fuzz', 'Shaun of the Dead']
        assert party.recommendation_explanation == GROUP_REPLY
        assert party.recommendation_generated_at is not None

        call = llm.calls[0]
        assert 'Popular genres: Comedy, Action' in call['user']
        assert 'Please avoid: gore' in call['user']
        assert 'Number of people: 2' in call['user']
        assert call['temperature'] == 0.7

    def test_regenerate_replaces_picks(self, party, user, catalog):
        WatchPartyService.submit_preferences(party, user, genres=['Comedy'])
        group_service(FakeLLM(GROUP_REPLY), catalog).generate(party)
        party, _ = group_service(FakeLLM("**Hot Fuzz (2007)**"), catalog).generate(party)

        assert [m.title for m in party.group_movies] == ['Hot Fuzz']
        assert party.members.get(user=user).has_responded

    def test_llm_failure_keeps_previous_picks(self, party, user, catalog):
        WatchPartyService.submit_preferences(party, user, genres=['Comedy'])
        group_service(FakeLLM(GROUP_REPLY), catalog).generate(party)

        with pytest.raises(UpstreamFailure):
            group_service(FakeLLM(error=UpstreamFailure('down')), catalog).generate(party)
        party.refresh_from_db()
        assert len(party.group_movies) == 2

    def test_guest_must_answer_too(self, party, user, catalog):
        WatchPartyService.submit_preferences(party, user, genres=['Comedy'])
        WatchPartyService.add_guest(party, user, 'Grandma')
        with pytest.raises(PreconditionFailure):
            group_service(FakeLLM(GROUP_REPLY), catalog).generate(party)


class TestWatchPartyAPI:
    def test_create_and_list(self, api_client):
        resp = api_client.post('/api/watchparty/', {'name': 'Movie club'}, format='json')
        assert resp.status_code == 201
        assert len(resp.data['invite_code']) == 6
        assert resp.data['members'][0]['user']['username'] == 'alice'

        resp = api_client.get('/api/watchparty/?status=active')
        assert [p['name'] for p in resp.data['results']] == ['Movie club']

    def test_join_and_submit(self, party, other_user):
        from rest_framework.test import APIClient
        client = APIClient()
        client.force_authenticate(user=other_user)

        resp = client.post(f'/api/watchparty/join/{party.invite_code}/', {}, format='json')
        assert resp.status_code == 200
        assert len(resp.data['members']) == 2

        resp = client.post(f'/api/watchparty/{party.pk}/preferences/', {'genres': ['Horror']}, format='json')
        assert resp.status_code == 200
        assert resp.data['preferences']['genres'] == ['Horror']

    def test_recommendations_before_everyone_answered(self, api_client, party, other_user, catalog):
        WatchPartyService.join(party.invite_code, other_user)
        with mock.patch.object(WatchPartyViewSet, 'get_group_service', return_value=group_service(FakeLLM(GROUP_REPLY), catalog)):
            resp = api_client.post(f'/api/watchparty/{party.pk}/recommendations/')
        assert resp.status_code == 409
        assert resp.data['error'] == 'precondition'

    def test_recommendations(self, api_client, party, user, catalog):
        WatchPartyService.submit_preferences(party, user, genres=['Comedy'])
        with mock.patch.object(WatchPartyViewSet, 'get_group_service', return_value=group_service(FakeLLM(GROUP_REPLY), catalog)):
            resp = api_client.post(f'/api/watchparty/{party.pk}/recommendations/')
        assert resp.status_code == 200
        assert resp.data['group_preferences'] == {'top_genres': ['Comedy'], 'top_moods': [], 'member_count': 1}
        assert [m['title'] for m in resp.data['group_recommendation']['movies']] == ['Hot Fuzz', 'Shaun of the Dead']

    def test_non_member_cannot_view(self, party, other_user):
        from rest_framework.test import APIClient
        client = APIClient()
        client.force_authenticate(user=other_user)
        resp = client.get(f'/api/watchparty/{party.pk}/')
        assert resp.status_code == 403

    def test_status_and_delete_by_creator_only(self, api_client, party, other_user):
        from rest_framework.test import APIClient
        client = APIClient()
        client.force_authenticate(user=other_user)
        WatchPartyService.join(party.invite_code, other_user)

        assert client.patch(f'/api/watchparty/{party.pk}/status/', {'status': 'completed'}, format='json').status_code == 403
        resp = api_client.patch(f'/api/watchparty/{party.pk}/status/', {'status': 'completed'}, format='json')
        assert resp.data['status'] == 'completed'

        assert client.delete(f'/api/watchparty/{party.pk}/').status_code == 403
        assert api_client.delete(f'/api/watchparty/{party.pk}/').status_code == 204
        assert not WatchParty.objects.exists()
        assert not PartyMember.objects.exists()
