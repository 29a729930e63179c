from notifications.templates.order_confirmation import OrderConfirmationTemplate


def _context(**overrides):
    context = {
        "order_id": 17,
        "customer_name": "Jane Doe",
        "created_at": "2026-01-16 12:00:00",
        "status": "pending",
        "address": "Rua Augusta 100, Lisboa",
        "phone": "+351 912 345 678",
        "total_cents": 2599,
        "items": [
            {"name": "Widget", "quantity": 2, "price_cents": 1000},
            {"name": "Gadget", "quantity": 1, "price_cents": 599},
        ],
        "app_name": "Mini E-Commerce",
        "currency_symbol": "€",
    }
    context.update(overrides)
    return context


def test_subject_carries_order_number_and_shop_name():
    content = OrderConfirmationTemplate.render(_context())
    assert content["subject"] == "Order Confirmation #17 - Mini E-Commerce"


def test_text_body_lists_items_and_total():
    body = OrderConfirmationTemplate.render(_context())["body"]
    assert "Dear Jane Doe," in body
    assert "Widget x2 @ €10.00 = €20.00" in body
    assert "Gadget x1 @ €5.99 = €5.99" in body
    assert "Total: €25.99" in body
    assert "Rua Augusta 100, Lisboa" in body


def test_html_body_escapes_customer_input():
    html = OrderConfirmationTemplate.render(_context(customer_name="<script>x</script>"))["html_body"]
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_html_body_has_item_rows_and_total():
    html = OrderConfirmationTemplate.render(_context())["html_body"]
    assert html.count("<tr>") == 4
    assert "€25.99" in html
