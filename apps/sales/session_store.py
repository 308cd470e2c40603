"""
Per-terminal cart storage.

Each terminal is identified by its Django session. The cart and the id of
the order it checked out are kept in the cache under the session key rather
than inside the session dict, so SessionMiddleware saving the request's own
session copy at the end of the response never overwrites a newer cart.

Mutations for one session are serialized by a lock taken with ``cache.add``
(SET NX with an expiry on Redis), which holds across worker processes and
expires on its own, so no lock registry has to be kept.
"""

import logging
import time
import uuid
from contextlib import contextmanager

from django.conf import settings
from django.core.cache import cache

from .cart import CartSession
from .exceptions import PersistenceFailure

logger = logging.getLogger(__name__)

CART_KEY_PREFIX = "pos:cart"
LOCK_KEY_PREFIX = "pos:cart:lock"
LOCK_POLL_INTERVAL = 0.01


def cart_key(session_key):
    return f"{CART_KEY_PREFIX}:{session_key}"


def lock_key(session_key):
    return f"{LOCK_KEY_PREFIX}:{session_key}"


def _session_key(request, create=False):
    """Key of a live session; unknown or expired cookie keys count as no session."""
    session = request.session
    key = session.session_key
    if key is not None and not session.exists(key):
        key = None
    if key is None and create:
        session.create()
        key = session.session_key
    return key


def _read_state(session_key):
    if session_key is None:
        return {}
    return cache.get(cart_key(session_key)) or {}


def _decode_cart(session_key, data) -> CartSession:
    try:
        return CartSession.from_dict(data)
    except (AssertionError, KeyError, TypeError, ValueError, ArithmeticError) as e:
        logger.warning(f"Discarding invalid stored cart for session {session_key}: {e}")
        return CartSession()


def load_cart(request) -> CartSession:
    """Cart of the request's session; an unreadable stored cart counts as empty."""
    session_key = _session_key(request)
    return _decode_cart(session_key, _read_state(session_key).get("cart"))


def save_cart(request, cart: CartSession, checkout_order_id=None):
    session_key = _session_key(request, create=True)
    cache.set(
        cart_key(session_key),
        {"cart": cart.to_dict(), "checkout_order_id": checkout_order_id},
        timeout=settings.SESSION_COOKIE_AGE,
    )


@contextmanager
def session_lock(session_key):
    """
    Hold the cart lock of one session.

    Raises:
        PersistenceFailure: the lock could not be taken within
            BILLING_CART_LOCK_WAIT seconds
    """
    key = lock_key(session_key)
    token = uuid.uuid4().hex
    deadline = time.monotonic() + settings.BILLING_CART_LOCK_WAIT

    while not cache.add(key, token, timeout=settings.BILLING_CART_LOCK_TIMEOUT):
        if time.monotonic() >= deadline:
            logger.error(f"Timed out waiting for cart lock of session {session_key}")
            raise PersistenceFailure("Cart is busy, try again")
        time.sleep(LOCK_POLL_INTERVAL)

    try:
        yield
    finally:
        # An expired lock may already belong to another request
        if cache.get(key) == token:
            cache.delete(key)


class CartHandle:
    """Mutable holder for the cart being edited inside ``cart_session``."""

    def __init__(self, cart, checkout_order_id=None):
        self.cart = cart
        self.checkout_order_id = checkout_order_id


@contextmanager
def cart_session(request):
    """
    Lock the session's cart, yield a handle and store it on exit.

    The stored state is read after the lock is taken, so each block sees the
    result of every block that finished before it. Nothing is stored if the
    block raises.
    """
    session_key = _session_key(request, create=True)

    with session_lock(session_key):
        state = _read_state(session_key)
        handle = CartHandle(
            _decode_cart(session_key, state.get("cart")), state.get("checkout_order_id")
        )
        yield handle
        save_cart(request, handle.cart, handle.checkout_order_id)
