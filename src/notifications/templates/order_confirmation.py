"""Order confirmation template: sent once an order has been placed."""

from html import escape

from shared.money import format_price


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        """Render subject, plain-text body and HTML body.

        ``context`` keys: order_id, customer_name, created_at, status,
        address, phone, total_cents, items (dicts with name, quantity,
        price_cents), app_name, currency_symbol.
        """
        order_id = context.get("order_id", "N/A")
        app_name = context.get("app_name", "Mini E-Commerce")
        symbol = context.get("currency_symbol", "€")
        items = context.get("items", [])
        total = format_price(context.get("total_cents", 0), symbol)

        text_lines = [
            f"Dear {context.get('customer_name', '')},",
            "",
            "Thank you for your order! We have received it and it is being processed.",
            "",
            f"Order Number: #{order_id}",
            f"Date: {context.get('created_at', '')}",
            f"Status: {context.get('status', '')}",
            "",
            "Shipping Information:",
            context.get("customer_name", ""),
            context.get("address", ""),
            f"Phone: {context.get('phone', '')}",
            "",
            "Order Items:",
        ]
        for item in items:
            subtotal = format_price(item["price_cents"] * item["quantity"], symbol)
            text_lines.append(
                f"  {item['name']} x{item['quantity']} @ {format_price(item['price_cents'], symbol)} = {subtotal}"
            )
        text_lines += ["", f"Total: {total}", "", f"This email was sent from {app_name}. Please do not reply."]

        rows = "".join(
            "<tr>"
            f"<td>{escape(item['name'])}</td>"
            f"<td style='text-align: center;'>{item['quantity']}</td>"
            f"<td style='text-align: right;'>{escape(format_price(item['price_cents'], symbol))}</td>"
            f"<td style='text-align: right;'>{escape(format_price(item['price_cents'] * item['quantity'], symbol))}</td>"
            "</tr>"
            for item in items
        )
        html_body = (
            "<!DOCTYPE html><html><head><meta charset='UTF-8'><title>Order Confirmation</title></head>"
            "<body style='font-family: Arial, sans-serif;'>"
            "<h1>Order Confirmation</h1>"
            f"<p>Dear {escape(str(context.get('customer_name', '')))},</p>"
            "<p>Thank you for your order! We have received it and it is being processed.</p>"
            f"<p><strong>Order Number:</strong> #{escape(str(order_id))}<br>"
            f"<strong>Date:</strong> {escape(str(context.get('created_at', '')))}<br>"
            f"<strong>Status:</strong> {escape(str(context.get('status', '')))}</p>"
            "<h3>Shipping Information</h3>"
            f"<p>{escape(str(context.get('customer_name', '')))}<br>"
            f"{escape(str(context.get('address', '')))}<br>"
            f"Phone: {escape(str(context.get('phone', '')))}</p>"
            "<table style='width: 100%; border-collapse: collapse;'>"
            "<thead><tr><th>Product</th><th>Qty</th><th>Price</th><th>Subtotal</th></tr></thead>"
            f"<tbody>{rows}</tbody>"
            f"<tfoot><tr><td colspan='3' style='text-align: right;'><strong>Total:</strong></td>"
            f"<td style='text-align: right;'><strong>{escape(total)}</strong></td></tr></tfoot>"
            "</table>"
            f"<p style='color: #7f8c8d; font-size: 12px;'>This email was sent from {escape(app_name)}. "
            "Please do not reply to this email.</p>"
            "</body></html>"
        )

        return {
            "subject": f"Order Confirmation #{order_id} - {app_name}",
            "body": "\n".join(text_lines),
            "html_body": html_body,
        }
