# inventory/viewmodels.py
"""
Read side of the app: the catalog of the principal's own items, the
image carousel of the detail view and the enquiry inbox.

Each view-model holds its own copy of what it fetched and re-fetches
when the session it is bound to changes principal.
"""
import logging
from urllib.parse import quote

from utils.exceptions import FetchError
from utils.gateway import get_gateway
from .models import Enquiry, Item

logger = logging.getLogger(__name__)

GRID = 'grid'
LIST = 'list'
VIEW_MODES = (GRID, LIST)


def _contains(value, term):
    return term in (value or '').lower()


def filter_items(items, search='', category=''):
    """Items matching the search term (name or description) and the category"""
    term = (search or '').lower()
    return [
        item for item in items
        if (not term or _contains(item.name, term) or _contains(item.description, term))
        and (not category or item.category == category)
    ]


def filter_enquiries(enquiries, search=''):
    """Enquiries whose enquirer email, item name or message contain the term"""
    term = (search or '').lower()
    if not term:
        return list(enquiries)
    return [
        enquiry for enquiry in enquiries
        if _contains(enquiry.enquirer_email, term)
        or _contains(enquiry.item.name, term)
        or _contains(enquiry.message, term)
    ]


def distinct_categories(items):
    return sorted({item.category for item in items})


def reply_link(enquiry):
    """Pre-filled mailto: URL answering an enquiry"""
    item_name = enquiry.item.name
    subject = quote(f"Re: Enquiry about {item_name}")
    body = quote(f"Hi,\r\n\r\nThank you for your enquiry about {item_name}.\r\n\r\nBest regards")
    return f"mailto:{enquiry.enquirer_email}?subject={subject}&body={body}"


class _SessionBoundViewModel:
    """Loads on creation and again whenever the session's principal changes"""

    def __init__(self, session, gateway=None):
        self.session = session
        self.gateway = gateway or get_gateway()
        self.records = []
        self.loading = True
        self._mounted = True
        self._unsubscribe = session.subscribe(self._on_session_changed)
        self.load()

    def load(self):
        principal = self.session.current_principal
        if principal is None:
            self._commit([])
            return self.records
        try:
            records = self.fetch(principal)
        except FetchError as e:
            logger.error(f"Error fetching {self.__class__.__name__} records for {principal.email}: {e.message}")
            records = []
        self._commit(records)
        return self.records

    def fetch(self, principal):
        raise NotImplementedError

    def close(self):
        self._mounted = False
        self._unsubscribe()

    def _commit(self, records):
        # A result arriving after close() is dropped
        if not self._mounted:
            return
        self.records = records
        self.loading = False

    def _on_session_changed(self, principal, event):
        self.load()


class ItemCatalog(_SessionBoundViewModel):

    def __init__(self, session, gateway=None, view_mode=GRID):
        self.view_mode = view_mode if view_mode in VIEW_MODES else GRID
        super().__init__(session, gateway=gateway)

    def fetch(self, principal):
        return self.gateway.tables.select(Item, order_by=('-created_at',), user=principal)

    @property
    def items(self):
        return self.records

    @property
    def categories(self):
        return distinct_categories(self.records)

    def filtered(self, search='', category=''):
        return filter_items(self.records, search=search, category=category)

    def set_view_mode(self, mode):
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode}")
        self.view_mode = mode

    def select(self, item_id):
        """The full record of an already loaded item, or None"""
        item_id = str(item_id)
        for item in self.records:
            if str(item.id) == item_id:
                return item
        return None


class EnquiryInbox(_SessionBoundViewModel):

    def __init__(self, session, gateway=None, item_id=None):
        # Optional equality filter narrowing the inbox to one item
        self.item_id = item_id
        super().__init__(session, gateway=gateway)

    def fetch(self, principal):
        filters = {'user': principal}
        if self.item_id:
            filters['item_id'] = self.item_id
        return self.gateway.tables.select(
            Enquiry,
            order_by=('-created_at',),
            related=('item',),
            **filters
        )

    @property
    def enquiries(self):
        return self.records

    def filtered(self, search=''):
        return filter_enquiries(self.records, search=search)

    def reply_link(self, enquiry):
        return reply_link(enquiry)


class ImageCarousel:
    """Cover image followed by the additional images, navigated with wrap-around"""

    def __init__(self, item):
        self.images = item.images
        self.index = 0

    @property
    def current(self):
        return self.images[self.index]

    def __len__(self):
        return len(self.images)

    def next(self):
        self.index = (self.index + 1) % len(self.images)
        return self.current

    def previous(self):
        self.index = (self.index - 1) % len(self.images)
        return self.current

    def go_to(self, index):
        self.index = index % len(self.images)
        return self.current

    def as_dict(self):
        return {
            'index': self.index,
            'count': len(self.images),
            'current': self.current,
            'next': self.images[(self.index + 1) % len(self.images)],
            'previous': self.images[(self.index - 1) % len(self.images)],
        }
