"""
Authentication tests.

A user exchanges credentials for a JWT pair and uses the access token as a
bearer token; requests without one are rejected.
"""
import pytest
from django.urls import reverse

pytestmark = pytest.mark.django_db


class TestTokenAuth:

    def test_obtain_token_and_read_profile(self, api_client, manager):
        response = api_client.post(
            reverse('accounts:token_obtain_pair'),
            {'username': 'manager', 'password': 'testpass123'},
            format='json',
        )
        assert response.status_code == 200
        assert 'access' in response.data
        assert 'refresh' in response.data

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = api_client.get(reverse('accounts:me'))

        assert me.status_code == 200
        assert me.data['username'] == 'manager'
        assert me.data['role'] == 'MANAGER'

    def test_wrong_password_is_rejected(self, api_client, manager):
        response = api_client.post(
            reverse('accounts:token_obtain_pair'),
            {'username': 'manager', 'password': 'wrong'},
            format='json',
        )
        assert response.status_code == 401

    def test_anonymous_request_is_rejected(self, api_client):
        response = api_client.get(reverse('accounts:me'))
        assert response.status_code == 401
