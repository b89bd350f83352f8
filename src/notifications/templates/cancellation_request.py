"""Cancellation request template: alerts the seller to a buyer's request."""


class CancellationRequestTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        requested_at = context.get("requested_at", "")
        return {
            "subject": f"[URGENT] Cancellation Request - Order #{order_number}",
            "body": (
                "CANCELLATION REQUEST\n\n"
                "Order Details:\n"
                f"- Order Number: #{order_number}\n"
                f"- Order Total: {context.get('order_total') or 'N/A'}\n"
                f"- Date Requested: {requested_at}\n\n"
                "Customer Details:\n"
                f"- Name: {context.get('customer_name') or 'Customer'}\n"
                f"- Email: {context.get('customer_email') or 'N/A'}\n\n"
                "Shipping Address:\n"
                f"{context.get('shipping_address') or 'N/A'}\n\n"
                "Reason for Cancellation:\n"
                f"{context.get('reason') or 'No reason provided'}\n\n"
                "---\n"
                "Please process this cancellation request as soon as possible.\n"
                "If the order has already been shipped, please initiate the return process.\n\n"
                f"This is an automated message from the {context.get('store_name', 'store')} website."
            ),
        }
