"""
Tests for sign-up, sign-in, sign-out and the session provider
"""
from datetime import timedelta

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from logs.models import ActivityLog
from utils.exceptions import AuthError
from utils.factories import TestDataFactory, AuthenticatedAPIClient
from .models import CustomUser
from .session import SessionProvider


class SignUpTests(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_sign_up_creates_principal_and_tokens(self):
        response = self.client.post('/api/auth/signup/', {
            'email': 'owner@example.com',
            'password': 'secret-pass-1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['principal']['email'], 'owner@example.com')
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

        user = CustomUser.objects.get(email='owner@example.com')
        self.assertTrue(user.check_password('secret-pass-1'))
        self.assertTrue(ActivityLog.objects.filter(user=user, note='Account created').exists())

    def test_duplicate_email_is_reported(self):
        TestDataFactory.create_user(email='taken@example.com')
        response = self.client.post('/api/auth/signup/', {
            'email': 'taken@example.com',
            'password': 'secret-pass-1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'User already registered')
        self.assertEqual(response.data['code'], 'AuthError')

    def test_short_password_is_rejected(self):
        response = self.client.post('/api/auth/signup/', {
            'email': 'short@example.com',
            'password': '123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'AuthError')
        self.assertFalse(CustomUser.objects.filter(email='short@example.com').exists())


class SignInTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='owner@example.com', password='secret-pass-1')

    def test_sign_in_returns_tokens(self):
        response = self.client.post('/api/auth/signin/', {
            'email': 'owner@example.com',
            'password': 'secret-pass-1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['principal']['id'], str(self.user.id))
        self.assertTrue(ActivityLog.objects.filter(user=self.user, note='Signed in').exists())

    def test_invalid_credentials(self):
        response = self.client.post('/api/auth/signin/', {
            'email': 'owner@example.com',
            'password': 'wrong-password',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid login credentials')

    def test_sign_out_blacklists_refresh_token(self):
        signed_in = self.client.post('/api/auth/signin/', {
            'email': 'owner@example.com',
            'password': 'secret-pass-1',
        }, format='json')
        refresh = signed_in.data['refresh']

        client = AuthenticatedAPIClient().authenticate_user(self.user)
        response = client.post('/api/auth/signout/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertTrue(ActivityLog.objects.filter(user=self.user, note='Signed out').exists())

        response = self.client.post('/api/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class SessionViewTests(TestCase):

    def test_anonymous_session(self):
        response = APIClient().get('/api/auth/session/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['principal'])
        self.assertFalse(response.data['loading'])

    def test_authenticated_session(self):
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.get('/api/auth/session/')
        self.assertEqual(response.data['principal']['email'], user.email)

    def test_expired_token_reads_as_signed_out(self):
        user = TestDataFactory.create_user()
        token = AccessToken.for_user(user)
        token.set_exp(lifetime=-timedelta(minutes=1))
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = client.get('/api/auth/session/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'principal': None, 'loading': False})

    def test_garbage_token_reads_as_signed_out(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = client.get('/api/auth/session/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['principal'])

    def test_invalid_token_still_rejected_elsewhere(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        self.assertEqual(client.get('/api/items/').status_code, status.HTTP_401_UNAUTHORIZED)


class SessionProviderTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(email='owner@example.com', password='secret-pass-1')

    def test_loading_until_restored(self):
        session = SessionProvider()
        self.assertTrue(session.loading)
        self.assertIsNone(session.current_principal)

        session.restore(self.user)
        self.assertFalse(session.loading)
        self.assertEqual(session.current_principal, self.user)

    def test_subscribers_are_notified(self):
        session = SessionProvider()
        events = []
        unsubscribe = session.subscribe(lambda principal, event: events.append((principal, event)))

        session.sign_in('owner@example.com', 'secret-pass-1')
        session.sign_out()
        unsubscribe()
        session.sign_in('owner@example.com', 'secret-pass-1')

        self.assertEqual(events, [(self.user, 'signed_in'), (None, 'signed_out')])

    def test_failed_sign_in_keeps_principal(self):
        session = SessionProvider()
        session.restore(None)
        with self.assertRaises(AuthError):
            session.sign_in('owner@example.com', 'nope')
        self.assertIsNone(session.current_principal)
        self.assertIsNone(session.tokens)
