from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from utils.factories import TestDataFactory, AuthenticatedAPIClient
from .utils import log_activity


class ActivityLogListTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        log_activity(self.user, 'Item added: Red Bike', related_model='Item', related_id='1')
        log_activity(self.user, 'Enquiry received', related_model='Enquiry', related_id='2')
        log_activity(TestDataFactory.create_user(), 'Item added: Lamp', related_model='Item', related_id='3')

    def test_only_own_entries(self):
        response = self.client.get('/api/logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual({entry['user_email'] for entry in response.data}, {self.user.email})

    def test_filter_by_related_model(self):
        response = self.client.get('/api/logs/', {'related_model': 'Enquiry'})
        self.assertEqual([entry['note'] for entry in response.data], ['Enquiry received'])

    def test_requires_authentication(self):
        response = APIClient().get('/api/logs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
