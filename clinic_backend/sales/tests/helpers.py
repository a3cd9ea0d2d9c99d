# sales/tests/helpers.py

from inventory.services.stock_guard import create_item


def optics_stock():
    frame = create_item(
        sku="FR-10", name="Titanium Frame", kind="frame", unit_price="1500.00", quantity=10
    )
    lens = create_item(
        sku="LN-20", name="Progressive Lens", kind="lens", unit_price="1000.00", quantity=4
    )
    return frame, lens
