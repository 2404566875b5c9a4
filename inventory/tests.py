"""
Test suite for the inventory app
Tests: catalog filtering, item creation workflow, detail/enquiry flow, enquiry inbox, orphan cleanup
"""
from datetime import timedelta
from io import StringIO
from types import SimpleNamespace
from unittest.mock import patch

from django.core.files.base import ContentFile
from django.core.management import call_command
from django.test import TestCase, SimpleTestCase, override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from logs.models import ActivityLog
from users.session import SessionProvider
from utils.exceptions import FetchError, InsertError, SubmissionInProgress, UploadError
from utils.factories import IN_MEMORY_STORAGES, TestDataFactory, AuthenticatedAPIClient
from utils.file_cleanup import FileCleanupManager, image_name, uploaded_at
from utils.file_handlers import additional_image_path, cover_image_path
from utils.gateway import StorageGateway, TableGateway, get_gateway
from utils.storage_backends import ItemImageStorage
from .forms import ItemForm
from .models import Enquiry, Item, ItemCategory
from .submission import FAILED, IDLE, SUBMITTING, SUCCESS, SubmissionFlow
from .viewmodels import (
    EnquiryInbox,
    ImageCarousel,
    ItemCatalog,
    distinct_categories,
    filter_enquiries,
    filter_items,
    reply_link,
)
from .workflows import EnquirySubmission, ItemCreationWorkflow


def _item(name, description='', category='Other'):
    return SimpleNamespace(name=name, description=description, category=category)


class ItemFilterTests(SimpleTestCase):

    def setUp(self):
        self.items = [
            _item('Red Bike', 'Barely used road bike', 'Sports Gear'),
            _item('Blue Shirt', 'Cotton, size M', 'Shirt'),
            _item('Tennis Racket', 'Comes with a red cover', 'Sports Gear'),
            _item('Novel', 'Paperback', 'Books'),
        ]

    def test_empty_filters_keep_everything(self):
        self.assertEqual(filter_items(self.items), self.items)

    def test_search_is_case_insensitive_over_name_and_description(self):
        result = filter_items(self.items, search='RED')
        self.assertEqual([i.name for i in result], ['Red Bike', 'Tennis Racket'])
        for item in result:
            self.assertIn(item, self.items)
            self.assertTrue('red' in item.name.lower() or 'red' in item.description.lower())

    def test_category_and_search_are_combined_with_and(self):
        result = filter_items(self.items, search='bike', category='Sports Gear')
        self.assertEqual([i.name for i in result], ['Red Bike'])
        self.assertEqual(filter_items(self.items, search='novel', category='Sports Gear'), [])

    def test_category_alone_is_exact_match(self):
        result = filter_items(self.items, category='Sports')
        self.assertEqual(result, [])

    def test_distinct_categories_sorted(self):
        self.assertEqual(distinct_categories(self.items), ['Books', 'Shirt', 'Sports Gear'])

    def test_enquiry_search_covers_email_item_name_and_message(self):
        bike = _item('Red Bike')
        enquiries = [
            SimpleNamespace(enquirer_email='buyer@example.com', message='Still available?', item=bike),
            SimpleNamespace(enquirer_email='other@example.com', message='Price?', item=_item('Lamp')),
        ]
        self.assertEqual(len(filter_enquiries(enquiries, 'BUYER')), 1)
        self.assertEqual(len(filter_enquiries(enquiries, 'red bike')), 1)
        self.assertEqual(len(filter_enquiries(enquiries, 'price')), 1)
        self.assertEqual(filter_enquiries(enquiries, 'nothing'), [])
        self.assertEqual(filter_enquiries(enquiries, ''), enquiries)


class SubmissionFlowTests(SimpleTestCase):

    def setUp(self):
        self.now = 100.0
        self.flow = SubmissionFlow(clock=lambda: self.now)

    def test_success_reverts_to_idle_after_three_seconds(self):
        self.flow.begin()
        self.assertEqual(self.flow.state, SUBMITTING)
        self.flow.succeed()
        self.assertEqual(self.flow.state, SUCCESS)

        self.now += 2.999
        self.assertEqual(self.flow.state, SUCCESS)
        self.now += 0.001
        self.assertEqual(self.flow.state, IDLE)

    def test_concurrent_submission_is_refused(self):
        self.flow.begin()
        with self.assertRaises(SubmissionInProgress):
            self.flow.begin()

    def test_failure_stays_until_resubmitted(self):
        self.flow.begin()
        self.flow.fail('Bucket not found')
        self.now += 60
        self.assertEqual(self.flow.state, FAILED)
        self.assertEqual(self.flow.error, 'Bucket not found')

        self.flow.begin()
        self.assertEqual(self.flow.state, SUBMITTING)
        self.assertIsNone(self.flow.error)


class ItemFormTests(SimpleTestCase):

    def test_additional_images_capped_at_five_in_selection_order(self):
        form = ItemForm()
        form.add_additional_images([TestDataFactory.image_file(f'{i}.png') for i in range(3)])
        accepted = form.add_additional_images([TestDataFactory.image_file(f'{i}.png') for i in range(3, 7)])

        self.assertEqual(len(accepted), 2)
        self.assertEqual([f.name for f in form.additional_images], ['0.png', '1.png', '2.png', '3.png', '4.png'])

    def test_previews_line_up_with_files(self):
        form = ItemForm(build_previews=True)
        files = [
            TestDataFactory.image_file('a.png', b'first'),
            TestDataFactory.image_file('b.png', b'second'),
        ]
        form.add_additional_images(files)

        self.assertEqual(form.additional_previews, [
            'data:image/png;base64,Zmlyc3Q=',
            'data:image/png;base64,c2Vjb25k',
        ])
        # Files stay readable for the upload
        self.assertEqual(files[0].read(), b'first')

        form.remove_additional_image(0)
        self.assertEqual([f.name for f in form.additional_images], ['b.png'])
        self.assertEqual(form.additional_previews, ['data:image/png;base64,c2Vjb25k'])

    def test_clear_resets_everything(self):
        form = ItemForm(name='Lamp', category='Other', description='Desk lamp', build_previews=True)
        form.set_cover_image(TestDataFactory.image_file())
        form.add_additional_images([TestDataFactory.image_file()])
        form.clear()

        self.assertEqual((form.name, form.category, form.description), ('', '', ''))
        self.assertIsNone(form.cover_image)
        self.assertEqual(form.cover_preview, '')
        self.assertEqual(form.additional_images, [])
        self.assertEqual(form.additional_previews, [])


class ImageCarouselTests(SimpleTestCase):

    def test_navigation_wraps_around(self):
        item = SimpleNamespace(images=['cover', 'a', 'b'])
        carousel = ImageCarousel(item)
        self.assertEqual(carousel.current, 'cover')
        self.assertEqual(carousel.previous(), 'b')
        self.assertEqual(carousel.next(), 'cover')
        self.assertEqual(carousel.next(), 'a')
        self.assertEqual(carousel.go_to(5), 'b')

    def test_single_image(self):
        carousel = ImageCarousel(SimpleNamespace(images=['cover']))
        self.assertEqual(carousel.next(), 'cover')
        self.assertEqual(carousel.as_dict()['count'], 1)


@override_settings(STORAGES=IN_MEMORY_STORAGES)
class ItemCreationTests(TestCase):
    """POST /api/items/"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def _payload(self, additional=0, cover=True):
        payload = {
            'name': 'Red Bike',
            'category': 'Sports Gear',
            'description': 'Barely used road bike',
        }
        if cover:
            payload['cover_image'] = TestDataFactory.image_file('cover.png')
        if additional:
            payload['additional_images'] = [
                TestDataFactory.image_file(f'extra{i}.png') for i in range(additional)
            ]
        return payload

    def _stored(self):
        return get_gateway().storage.list(str(self.user.id))

    def test_missing_cover_never_reaches_storage(self):
        with patch.object(StorageGateway, 'upload', autospec=True) as upload:
            response = self.client.post('/api/items/', self._payload(cover=False), format='multipart')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'MissingCoverImage')
        upload.assert_not_called()
        self.assertFalse(Item.objects.exists())

    def test_creates_one_item_with_ordered_image_urls(self):
        response = self.client.post('/api/items/', self._payload(additional=2), format='multipart')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'success')
        self.assertEqual(response.data['confirmation_seconds'], 3)

        item = Item.objects.get(user=self.user)
        prefix = f'https://cdn.example.com/item-images/{self.user.id}/'
        self.assertTrue(item.cover_image.startswith(prefix))
        self.assertTrue(item.cover_image.endswith('-cover-cover.png'))
        self.assertEqual(len(item.additional_images), 2)
        self.assertTrue(item.additional_images[0].endswith('-additional-0-extra0.png'))
        self.assertTrue(item.additional_images[1].endswith('-additional-1-extra1.png'))
        self.assertEqual(len(self._stored()), 3)
        self.assertTrue(ActivityLog.objects.filter(user=self.user, related_id=str(item.id)).exists())

    def test_additional_images_capped_at_five(self):
        response = self.client.post('/api/items/', self._payload(additional=7), format='multipart')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item = Item.objects.get(user=self.user)
        self.assertEqual(len(item.additional_images), 5)
        self.assertTrue(item.additional_images[4].endswith('-additional-4-extra4.png'))

    def test_cover_upload_failure_aborts_everything(self):
        with patch.object(StorageGateway, 'upload', autospec=True,
                          side_effect=UploadError('Bucket not found')) as upload:
            response = self.client.post('/api/items/', self._payload(additional=2), format='multipart')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data, {'error': 'Bucket not found', 'code': 'UploadError'})
        self.assertEqual(upload.call_count, 1)
        self.assertFalse(Item.objects.exists())

    def test_additional_upload_failure_leaves_earlier_uploads_behind(self):
        real_upload = StorageGateway.upload
        paths = []

        def flaky_upload(gateway, path, content):
            paths.append(path)
            if len(paths) == 3:
                raise UploadError('The resource already exists')
            return real_upload(gateway, path, content)

        with patch.object(StorageGateway, 'upload', autospec=True, side_effect=flaky_upload):
            response = self.client.post('/api/items/', self._payload(additional=3), format='multipart')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'The resource already exists')
        self.assertEqual(len(paths), 3)
        self.assertFalse(Item.objects.exists())
        self.assertEqual(len(self._stored()), 2)

    def test_insert_failure_keeps_uploaded_images(self):
        with patch.object(TableGateway, 'insert', autospec=True,
                          side_effect=InsertError('permission denied for table items')):
            response = self.client.post('/api/items/', self._payload(additional=1), format='multipart')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['code'], 'InsertError')
        self.assertFalse(Item.objects.exists())
        self.assertEqual(len(self._stored()), 2)

    def test_unknown_category_rejected(self):
        payload = self._payload()
        payload['category'] = 'Spaceships'
        response = self.client.post('/api/items/', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data)

    def test_requires_authentication(self):
        response = APIClient().post('/api/items/', self._payload(), format='multipart')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_workflow_clears_form_and_confirms_for_three_seconds(self):
        now = [500.0]
        flow = SubmissionFlow(clock=lambda: now[0])
        form = ItemForm(name='Red Bike', category=ItemCategory.SPORTS_GEAR, description='Road bike')
        form.set_cover_image(TestDataFactory.image_file('cover.png'))
        form.add_additional_images([TestDataFactory.image_file('a.png'), TestDataFactory.image_file('b.png')])

        item = ItemCreationWorkflow(self.user, flow=flow).submit(form)

        self.assertEqual(len(item.additional_images), 2)
        self.assertEqual((form.name, form.category, form.description), ('', '', ''))
        self.assertIsNone(form.cover_image)
        self.assertEqual(form.additional_images, [])
        self.assertEqual(form.additional_previews, [])

        self.assertEqual(flow.state, SUCCESS)
        now[0] += 2.5
        self.assertEqual(flow.state, SUCCESS)
        now[0] += 0.5
        self.assertEqual(flow.state, IDLE)

    def test_failed_workflow_keeps_form(self):
        form = ItemForm(name='Red Bike', category=ItemCategory.SPORTS_GEAR, description='Road bike')
        form.set_cover_image(TestDataFactory.image_file('cover.png'))
        workflow = ItemCreationWorkflow(self.user)

        with patch.object(StorageGateway, 'upload', autospec=True, side_effect=UploadError('Bucket not found')):
            with self.assertRaises(UploadError):
                workflow.submit(form)

        self.assertEqual(form.name, 'Red Bike')
        self.assertIsNotNone(form.cover_image)
        self.assertEqual(workflow.flow.state, FAILED)
        self.assertEqual(workflow.flow.error, 'Bucket not found')

    def test_preview_keeps_selection_order(self):
        payload = {
            'cover_image': TestDataFactory.image_file('cover.png', b'cover'),
            'additional_images': [
                TestDataFactory.image_file('b.png', b'second'),
                TestDataFactory.image_file('a.png', b'first'),
            ],
        }
        response = self.client.post('/api/items/preview/', payload, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['additional_images'], ['b.png', 'a.png'])
        self.assertEqual(response.data['additional_previews'], [
            'data:image/png;base64,c2Vjb25k',
            'data:image/png;base64,Zmlyc3Q=',
        ])
        self.assertEqual(response.data['cover_preview'], 'data:image/png;base64,Y292ZXI=')


class ItemCatalogTests(TestCase):
    """GET /api/items/ and the catalog view-model"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)
        now = timezone.now()
        self.bike = TestDataFactory.create_item(self.user, name='Red Bike', category=ItemCategory.SPORTS_GEAR,
                                                description='Road bike')
        self.shirt = TestDataFactory.create_item(self.user, name='Blue Shirt', category=ItemCategory.SHIRT,
                                                 description='Red stripes')
        self.book = TestDataFactory.create_item(self.user, name='Novel', category=ItemCategory.BOOKS,
                                                description='Paperback')
        Item.objects.filter(pk=self.bike.pk).update(created_at=now - timedelta(days=2))
        Item.objects.filter(pk=self.shirt.pk).update(created_at=now - timedelta(days=1))
        Item.objects.filter(pk=self.book.pk).update(created_at=now)
        TestDataFactory.create_item(TestDataFactory.create_user(), name='Red Lamp')

    def test_lists_own_items_newest_first(self):
        response = self.client.get('/api/items/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['name'] for i in response.data['items']], ['Novel', 'Blue Shirt', 'Red Bike'])
        self.assertEqual(response.data['categories'], ['Books', 'Shirt', 'Sports Gear'])
        self.assertEqual(response.data['view'], 'grid')

    def test_search_and_category(self):
        response = self.client.get('/api/items/', {'search': 'red'})
        self.assertEqual([i['name'] for i in response.data['items']], ['Blue Shirt', 'Red Bike'])
        self.assertEqual(response.data['total'], 3)

        response = self.client.get('/api/items/', {'search': 'red', 'category': 'Shirt', 'view': 'list'})
        self.assertEqual([i['name'] for i in response.data['items']], ['Blue Shirt'])
        self.assertEqual(response.data['view'], 'list')

    def test_reloads_when_principal_changes(self):
        session = SessionProvider()
        session.restore(self.user)
        catalog = ItemCatalog(session)
        self.assertEqual(len(catalog.items), 3)
        self.assertEqual(catalog.select(self.bike.id).name, 'Red Bike')

        session.sign_out()
        self.assertEqual(catalog.items, [])

    def test_results_after_close_are_dropped(self):
        session = SessionProvider()
        session.restore(self.user)
        catalog = ItemCatalog(session)
        catalog.close()

        TestDataFactory.create_item(self.user, name='Late Item')
        catalog.load()
        self.assertEqual(len(catalog.items), 3)

    def test_fetch_error_is_treated_as_no_data(self):
        session = SessionProvider()
        session.restore(self.user)
        with patch.object(TableGateway, 'select', autospec=True, side_effect=FetchError('timeout')):
            catalog = ItemCatalog(session)
        self.assertEqual(catalog.items, [])
        self.assertFalse(catalog.loading)

    def test_detail_with_carousel(self):
        item = TestDataFactory.create_item(
            self.user, name='Lamp',
            cover_image='https://cdn.example.com/c.png',
            additional_images=['https://cdn.example.com/a.png', 'https://cdn.example.com/b.png'],
        )
        response = self.client.get(f'/api/items/{item.id}/', {'image': 4})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['images'][0], 'https://cdn.example.com/c.png')
        self.assertEqual(response.data['carousel']['index'], 1)
        self.assertEqual(response.data['carousel']['current'], 'https://cdn.example.com/a.png')

    def test_detail_of_someone_elses_item(self):
        other = TestDataFactory.create_item(TestDataFactory.create_user())
        response = self.client.get(f'/api/items/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class EnquirySubmissionTests(TestCase):
    """Anonymous detail view and enquiry submission"""

    def setUp(self):
        self.owner = TestDataFactory.create_user()
        self.item = TestDataFactory.create_item(self.owner, name='Red Bike', category=ItemCategory.SPORTS_GEAR)
        self.client = APIClient()

    def test_public_detail(self):
        response = self.client.get(f'/api/public/items/{self.item.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Red Bike')
        self.assertNotIn('user', response.data)
        self.assertEqual(response.data['carousel']['index'], 0)

    def test_empty_message_uses_template(self):
        response = self.client.post(f'/api/public/items/{self.item.id}/enquiries/', {
            'enquirer_email': 'buyer@example.com',
            'message': '',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'success')
        enquiry = Enquiry.objects.get()
        self.assertEqual(enquiry.message, "I'm interested in your Red Bike. Please contact me for more details.")
        self.assertEqual(enquiry.user, self.owner)
        self.assertEqual(enquiry.item, self.item)
        self.assertTrue(ActivityLog.objects.filter(user=self.owner, related_model='Enquiry').exists())

    def test_message_is_stored_as_typed(self):
        response = self.client.post(f'/api/public/items/{self.item.id}/enquiries/', {
            'enquirer_email': 'buyer@example.com',
            'message': '  Is it still available?\n',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Enquiry.objects.get().message, '  Is it still available?\n')

    def test_blank_message_uses_template(self):
        enquiry = EnquirySubmission(self.item).submit('buyer@example.com', '   ')
        self.assertEqual(enquiry.message, Enquiry.default_message('Red Bike'))

    def test_email_is_required(self):
        response = self.client.post(f'/api/public/items/{self.item.id}/enquiries/', {
            'message': 'Hello',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('enquirer_email', response.data)
        self.assertFalse(Enquiry.objects.exists())

    def test_insert_failure_is_reported(self):
        with patch.object(TableGateway, 'insert', autospec=True, side_effect=InsertError('connection reset')):
            response = self.client.post(f'/api/public/items/{self.item.id}/enquiries/', {
                'enquirer_email': 'buyer@example.com',
            }, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'connection reset')

    def test_unknown_item(self):
        response = self.client.post('/api/public/items/00000000-0000-0000-0000-000000000000/enquiries/', {
            'enquirer_email': 'buyer@example.com',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class EnquiryInboxTests(TestCase):
    """GET /api/enquiries/"""

    def setUp(self):
        self.owner = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.owner)
        self.bike = TestDataFactory.create_item(self.owner, name='Red Bike', category=ItemCategory.SPORTS_GEAR)
        self.lamp = TestDataFactory.create_item(self.owner, name='Desk Lamp', category=ItemCategory.HOME_AND_GARDEN)

        older = TestDataFactory.create_enquiry(self.lamp, enquirer_email='early@example.com', message='Does it work?')
        Enquiry.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(hours=1))
        self.latest = TestDataFactory.create_enquiry(self.bike, enquirer_email='buyer@example.com',
                                                     message='Still available?')

        stranger_item = TestDataFactory.create_item(TestDataFactory.create_user(), name='Red Car')
        TestDataFactory.create_enquiry(stranger_item, enquirer_email='buyer@example.com')

    def test_newest_first_joined_with_item(self):
        response = self.client.get('/api/enquiries/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

        first = response.data['enquiries'][0]
        self.assertEqual(first['enquirer_email'], 'buyer@example.com')
        self.assertEqual(first['message'], 'Still available?')
        self.assertEqual(first['item']['name'], 'Red Bike')
        self.assertEqual(first['item']['category'], 'Sports Gear')
        self.assertEqual(response.data['enquiries'][1]['item']['name'], 'Desk Lamp')

    def test_search(self):
        response = self.client.get('/api/enquiries/', {'search': 'LAMP'})
        self.assertEqual([e['enquirer_email'] for e in response.data['enquiries']], ['early@example.com'])
        self.assertEqual(response.data['total'], 2)

    def test_item_filter(self):
        response = self.client.get('/api/enquiries/', {'item': str(self.bike.id)})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/enquiries/', {'item': 'not-a-uuid'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reply_link(self):
        link = reply_link(self.latest)
        self.assertTrue(link.startswith('mailto:buyer@example.com?subject=Re%3A%20Enquiry%20about%20Red%20Bike'))
        self.assertIn('Thank%20you%20for%20your%20enquiry%20about%20Red%20Bike', link)

        response = self.client.get('/api/enquiries/')
        self.assertEqual(response.data['enquiries'][0]['reply_link'], link)

    def test_view_model_scoped_to_principal(self):
        session = SessionProvider()
        session.restore(self.owner)
        inbox = EnquiryInbox(session)
        self.assertEqual({e.item.user_id for e in inbox.enquiries}, {self.owner.id})
        self.assertEqual(len(inbox.filtered('still')), 1)


@override_settings(STORAGES=IN_MEMORY_STORAGES)
class OrphanCleanupTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.storage = get_gateway().storage
        kept = self.storage.upload(f'{self.user.id}/1000-cover-kept.png', ContentFile(b'kept'))
        self.orphan = self.storage.upload(f'{self.user.id}/1000-cover-orphan.png', ContentFile(b'orphan'))
        self.fresh = self.storage.upload(f'{self.user.id}/99999999999999-cover-fresh.png', ContentFile(b'fresh'))
        TestDataFactory.create_item(self.user, cover_image=self.storage.get_public_url(kept))

    def test_finds_only_unreferenced_old_images(self):
        manager = FileCleanupManager()
        self.assertEqual(manager.find_orphaned_images(self.user.id), [self.orphan])

    def test_command_deletes_orphans(self):
        out = StringIO()
        call_command('cleanup_orphaned_images', '--user', str(self.user.id), stdout=out)

        self.assertIn('Deleted 1 orphaned images', out.getvalue())
        remaining = self.storage.list(str(self.user.id))
        self.assertNotIn(self.orphan, remaining)
        self.assertEqual(len(remaining), 2)

    def test_dry_run_keeps_files(self):
        call_command('cleanup_orphaned_images', '--user', str(self.user.id), '--dry-run', stdout=StringIO())
        self.assertIn(self.orphan, self.storage.list(str(self.user.id)))


LOCAL_STORAGES = {
    **IN_MEMORY_STORAGES,
    'item_images': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
        'OPTIONS': {'base_url': '/media/item-images/'},
    },
}


@override_settings(STORAGES=LOCAL_STORAGES, SITE_URL='http://localhost:8000')
class OrphanCleanupAfterSiteMoveTests(TestCase):
    """Images stay referenced when the URLs stored on items were built under other settings"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.storage = get_gateway().storage
        self.live = self.storage.upload(f'{self.user.id}/1000-cover-live bike.png', ContentFile(b'live'))
        self.extra = self.storage.upload(f'{self.user.id}/1000-additional-0-side.png', ContentFile(b'side'))
        self.orphan = self.storage.upload(f'{self.user.id}/1000-cover-orphan.png', ContentFile(b'orphan'))
        TestDataFactory.create_item(
            self.user,
            cover_image=self.storage.get_public_url(self.live),
            additional_images=[self.storage.get_public_url(self.extra)],
        )

    def test_site_url_change_keeps_live_images(self):
        with override_settings(SITE_URL='https://inventory.example.com'):
            deleted = FileCleanupManager().cleanup_orphaned_images(self.user.id)

        self.assertEqual(deleted, [self.orphan])
        remaining = self.storage.list(str(self.user.id))
        self.assertIn(self.live, remaining)
        self.assertIn(self.extra, remaining)

    def test_item_urls_from_another_host(self):
        TestDataFactory.create_item(
            self.user,
            cover_image=f'https://old-bucket.s3.eu-west-1.amazonaws.com/item-images/{self.orphan}',
        )
        self.assertEqual(FileCleanupManager().find_orphaned_images(self.user.id), [])


class ImageNameTests(SimpleTestCase):

    def test_name_is_independent_of_host_and_location(self):
        expected = 'u1/1000-cover-red bike.png'
        for url in [
            'http://localhost:8000/media/item-images/u1/1000-cover-red%20bike.png',
            'https://inventory.s3.eu-west-1.amazonaws.com/item-images/u1/1000-cover-red%20bike.png',
            'https://cdn.example.com/item-images/u1/1000-cover-red%20bike.png',
        ]:
            self.assertEqual(image_name(url), expected)


class ImagePathTests(SimpleTestCase):

    def test_paths_are_namespaced_by_principal(self):
        self.assertEqual(cover_image_path('u1', 'bike.png', timestamp=1700000000000),
                         'u1/1700000000000-cover-bike.png')
        self.assertEqual(additional_image_path('u1', 3, 'C:\\photos\\side.jpg', timestamp=1700000000000),
                         'u1/1700000000000-additional-3-side.jpg')

    def test_upload_time_read_back_from_name(self):
        self.assertEqual(uploaded_at('u1/1700000000000-cover-bike.png'), 1700000000000)
        self.assertIsNone(uploaded_at('u1/notes.txt'))

    def test_s3_public_url(self):
        storage = ItemImageStorage(bucket_name='inventory', region_name='eu-west-1', endpoint_url=None)
        self.assertEqual(
            storage.url('u1/1700000000000-cover-red bike.png'),
            'https://inventory.s3.eu-west-1.amazonaws.com/item-images/u1/1700000000000-cover-red%20bike.png',
        )
