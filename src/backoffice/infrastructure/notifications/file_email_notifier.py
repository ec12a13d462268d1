"""EmailNotifier that drops each message as an ``.eml`` file in an outbox.

The files are plain RFC 2822 messages that any mail client (or a relay
job) can pick up.  Filenames start with a UTC timestamp so a directory
listing is chronological.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from pathlib import Path

from backoffice.application.notifications import EmailNotifier
from backoffice.domain.model.online_order import OnlineOrder

logger = logging.getLogger(__name__)


class FileEmailNotifier(EmailNotifier):

    def __init__(self, outbox_dir: Path, sender: str = "pedidos@localhost") -> None:
        self._outbox_dir = Path(outbox_dir)
        self._sender = sender

    def send_order_confirmation(self, order: OnlineOrder) -> None:
        if not order.customer.email:
            raise ValueError(f"Order {order.order_number} has no customer email")

        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = order.customer.email
        message["Subject"] = f"Order {order.order_number} received"
        message["Date"] = formatdate(localtime=False)
        message["Message-ID"] = make_msgid()
        message.set_content(self._body(order))

        self._outbox_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        path = self._outbox_dir / f"{stamp}_{order.order_number}.eml"
        path.write_bytes(bytes(message))
        logger.info("Queued confirmation email for %s at %s", order.order_number, path)

    @staticmethod
    def _body(order: OnlineOrder) -> str:
        lines = [
            f"Hello {order.customer.name},",
            "",
            f"We received your order {order.order_number}. We will confirm it shortly.",
            "",
        ]
        for item in order.items:
            variant = f" ({item.selected_variant.describe()})" if item.selected_variant else ""
            lines.append(f"  {item.quantity.value} x {item.product_name}{variant}  {item.line_total}")
        lines += [
            "",
            f"Shipping: {order.shipping_cost}",
            f"Discount: {order.discount_amount}",
            f"Total:    {order.total}",
            f"Delivery: {order.delivery_type}",
            f"Payment:  {order.payment_method}",
        ]
        return "\n".join(lines) + "\n"
