"""Checkout Session Manager.

Keeps exactly one open checkout per browsing context. The open checkout id
lives in the shared key-value store, so concurrent tabs see the same id with
last-writer-wins semantics. A session the platform reports as missing or
completed is never an error for the caller: it is discarded and a fresh one
is created in its place.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog
from protean.exceptions import ValidationError

from checkout.address.address import Address
from checkout.session.contact import is_valid_email
from checkout.session.session import CheckoutSession, normalize_custom_attributes
from checkout.storefront import get_storefront
from checkout.storefront.port import StorefrontPort
from shared.errors import NetworkError, PlatformError, SessionUnavailableError, StorefrontError, retry_once
from shared.store import get_store
from shared.store.port import ACCESS_TOKEN_KEY, CHECKOUT_ID_KEY, KeyValueStore

logger = structlog.get_logger(__name__)


@dataclass
class PreparationResult:
    customer_associated: bool = False
    address_updated: bool = False
    email_updated: bool = False
    checkout_url: str | None = None
    errors: list[str] = field(default_factory=list)


class CheckoutSessionManager:
    def __init__(self, storefront: StorefrontPort | None = None, store: KeyValueStore | None = None) -> None:
        self.storefront = storefront or get_storefront()
        self.store = store or get_store()
        self.snapshot: CheckoutSession | None = None

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def get_or_create_session(self) -> CheckoutSession:
        """Resume the persisted checkout, or create one when it is gone or completed."""
        checkout_id = self.store.get(CHECKOUT_ID_KEY)
        if checkout_id:
            try:
                payload = retry_once(
                    lambda: self.storefront.fetch_checkout(checkout_id),
                    operation_name="fetch_checkout",
                )
            except (NetworkError, PlatformError) as exc:
                logger.warning("Could not resume checkout", checkout_id=checkout_id, error=str(exc))
                payload = None

            if payload and not payload.get("completed_at"):
                return self._remember(payload)

            logger.info(
                "Discarding checkout",
                checkout_id=checkout_id,
                reason="completed" if payload else "unavailable",
            )
            self.store.delete(CHECKOUT_ID_KEY)

        return self._create()

    def invalidate(self, session_id: str | None = None) -> None:
        """Forget the persisted checkout id so the next access creates a new session."""
        current = self.store.get(CHECKOUT_ID_KEY)
        if session_id is None or current == session_id:
            self.store.delete(CHECKOUT_ID_KEY)
        if self.snapshot is not None and (session_id is None or str(self.snapshot.id) == session_id):
            self.snapshot = None
        logger.info("Checkout invalidated", checkout_id=session_id or current)

    def clear(self) -> CheckoutSession:
        """Abandon the current checkout and start an empty one."""
        self.invalidate()
        return self._create()

    # -------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------
    def add_line_item(
        self,
        session_id: str,
        variant_ref: str,
        quantity: int = 1,
        attrs=None,
    ) -> CheckoutSession:
        if not variant_ref:
            raise ValidationError({"variant_id": ["Variant is required"]})
        _check_quantity(quantity)
        line_item = {
            "variant_id": variant_ref,
            "quantity": quantity,
            "custom_attributes": normalize_custom_attributes(attrs),
        }
        return self._mutate(
            session_id,
            lambda checkout_id: self.storefront.add_line_items(checkout_id, [line_item]),
            operation="add_line_item",
        )

    def update_line_item_quantity(self, session_id: str, line_item_id: str, quantity: int) -> CheckoutSession:
        _check_quantity(quantity)
        return self._mutate(
            session_id,
            lambda checkout_id: self.storefront.update_line_items(
                checkout_id, [{"id": line_item_id, "quantity": quantity}]
            ),
            operation="update_line_item_quantity",
        )

    def remove_line_item(self, session_id: str, line_item_id: str) -> CheckoutSession:
        return self._mutate(
            session_id,
            lambda checkout_id: self.storefront.remove_line_items(checkout_id, [line_item_id]),
            operation="remove_line_item",
        )

    # -------------------------------------------------------------------
    # Buyer details
    # -------------------------------------------------------------------
    def update_email(self, session_id: str, email: str) -> CheckoutSession:
        email = (email or "").strip()
        if not is_valid_email(email):
            raise ValidationError({"email": ["Valid email required"]})
        return self._mutate(
            session_id,
            lambda checkout_id: self.storefront.update_email(checkout_id, email),
            operation="update_email",
        )

    def update_shipping_address(self, session_id: str, address: Address | dict) -> CheckoutSession:
        if isinstance(address, dict):
            address = Address(**address)
        mailing_address = address.to_storefront_input()
        return self._mutate(
            session_id,
            lambda checkout_id: self.storefront.update_shipping_address(checkout_id, mailing_address),
            operation="update_shipping_address",
        )

    def associate_customer(self, session_id: str, access_token: str | None = None) -> CheckoutSession:
        access_token = access_token or self.store.get(ACCESS_TOKEN_KEY)
        if not access_token:
            raise ValidationError({"access_token": ["Customer is not signed in"]})
        return self._mutate(
            session_id,
            lambda checkout_id: self.storefront.associate_customer(checkout_id, access_token),
            operation="associate_customer",
        )

    def prepare_for_customer(
        self,
        session_id: str,
        access_token: str | None = None,
        customer: dict | None = None,
    ) -> PreparationResult:
        """Attach a signed-in customer and pre-fill what we know about them.

        Each step is attempted independently; failures are collected in
        ``errors`` rather than raised so a partial preparation still yields a
        usable checkout.
        """
        result = PreparationResult()
        customer = customer or {}

        try:
            session = self.associate_customer(session_id, access_token)
            session_id = str(session.id)
            result.customer_associated = True
        except (ValidationError, StorefrontError) as exc:
            result.errors.append(f"Customer association failed: {_describe(exc)}")

        default_address = customer.get("default_address")
        if default_address:
            address = Address.from_storefront(default_address)
            if address is None:
                result.errors.append("Address update failed: saved address is incomplete")
            else:
                try:
                    session = self.update_shipping_address(session_id, address)
                    session_id = str(session.id)
                    result.address_updated = True
                except (ValidationError, StorefrontError) as exc:
                    result.errors.append(f"Address update failed: {_describe(exc)}")

        email = customer.get("email")
        if email and not result.customer_associated:
            try:
                self.update_email(session_id, email)
                result.email_updated = True
            except (ValidationError, StorefrontError) as exc:
                result.errors.append(f"Email update failed: {_describe(exc)}")

        if self.snapshot is not None:
            result.checkout_url = self.snapshot.web_url

        logger.info(
            "Checkout prepared for customer",
            checkout_id=session_id,
            customer_associated=result.customer_associated,
            address_updated=result.address_updated,
            errors=len(result.errors),
        )
        return result

    # -------------------------------------------------------------------
    # Derived state (always from the latest server-confirmed snapshot)
    # -------------------------------------------------------------------
    def item_count(self) -> int:
        return self.snapshot.item_count if self.snapshot else 0

    def subtotal(self) -> float:
        return self.snapshot.subtotal if self.snapshot else 0.0

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _create(self) -> CheckoutSession:
        payload = self.storefront.create_checkout()
        self.store.set(CHECKOUT_ID_KEY, payload["id"])
        logger.info("Checkout created", checkout_id=payload["id"])
        return self._remember(payload)

    def _remember(self, payload: dict) -> CheckoutSession:
        self.snapshot = CheckoutSession.from_payload(payload)
        return self.snapshot

    def _mutate(self, session_id: str | None, call: Callable[[str], dict], operation: str) -> CheckoutSession:
        if not session_id:
            session_id = str(self.get_or_create_session().id)
        try:
            payload = call(session_id)
        except SessionUnavailableError as exc:
            logger.info(
                "Checkout unavailable, recreating",
                checkout_id=session_id,
                operation=operation,
                error=str(exc),
            )
            self.invalidate(session_id)
            fresh = self._create()
            payload = call(str(fresh.id))
        return self._remember(payload)


def _check_quantity(quantity: int) -> None:
    if quantity is None or int(quantity) < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(f"{key}: {', '.join(msgs)}" for key, msgs in exc.messages.items())
    return str(exc)


_manager: CheckoutSessionManager | None = None


def get_session_manager() -> CheckoutSessionManager:
    global _manager
    if _manager is None:
        _manager = CheckoutSessionManager()
    return _manager


def set_session_manager(manager: CheckoutSessionManager) -> None:
    global _manager
    _manager = manager


def reset_session_manager() -> None:
    global _manager
    _manager = None
