import pytest


@pytest.fixture(autouse=True)
def ordering_ctx():
    """Push the ordering domain context for each test."""
    from ordering.domain import ordering

    ctx = ordering.domain_context()
    ctx.push()

    yield ordering

    ctx.pop()


@pytest.fixture()
def edit_product():
    """Change a stored product behind the cart's back."""
    from inventory.domain import inventory
    from inventory.product import Product

    def _edit(product_id, **changes):
        with inventory.domain_context():
            products = inventory.repository_for(Product)
            product = products.get(product_id)
            for attribute, value in changes.items():
                setattr(product, attribute, value)
            products.add(product)

    return _edit


@pytest.fixture()
def delete_product():
    from inventory.domain import inventory
    from inventory.product import Product

    def _delete(product_id):
        with inventory.domain_context():
            products = inventory.repository_for(Product)
            products.remove(products.get(product_id))

    return _delete


@pytest.fixture()
def customer_details():
    from ordering.checkout.details import CustomerDetails

    def _details(**overrides):
        fields = {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "+351 912 345 678",
            "address": "Rua Augusta 100, Lisboa",
        }
        fields.update(overrides)
        return CustomerDetails.create(**fields)

    return _details


@pytest.fixture()
def place_order():
    """Write an order directly, bypassing checkout."""
    from ordering.domain import ordering
    from ordering.order.order import Order, OrderItem

    def _place(
        user_id="user-1",
        name="Jane Doe",
        email="jane@example.com",
        status="pending",
        items=(("product-7", "Widget", 2, 500),),
    ):
        order = Order(
            user_id=user_id,
            customer_name=name,
            customer_email=email,
            phone="+351912345678",
            address="Rua Augusta 100",
            total_cents=sum(quantity * price for _, _, quantity, price in items),
            status=status,
            items=[
                OrderItem(
                    product_id=product_id,
                    product_name=product_name,
                    quantity=quantity,
                    price_cents=price,
                    line_number=line_number,
                )
                for line_number, (product_id, product_name, quantity, price) in enumerate(items, start=1)
            ],
        )
        with ordering.domain_context():
            ordering.repository_for(Order).add(order)
        return order

    return _place


@pytest.fixture()
def order_count():
    from ordering.domain import ordering
    from ordering.order.order import Order

    def _count():
        with ordering.domain_context():
            return ordering.repository_for(Order).query.all().total

    return _count
