"""Unit tests for bundle authoring.

Run with: pytest backend/tests/test_bundles.py -v
"""

from core.bundles import create_bundle
from schemas.inventory import InventoryItemRead


class TestCreateBundle:
    def test_prices_are_snapshotted(self, speaker, mixer):
        bundle = create_bundle("basic dj", [(mixer, 1), (speaker, 2)])

        assert bundle.name == "BASIC DJ"
        assert [(l.name, l.quantity, l.price) for l in bundle.items] == [
            ("Mixer", 1, 80),
            ("PA-Speaker", 2, 50),
        ]
        assert bundle.item_count == 2

    def test_later_price_change_does_not_touch_bundle(self, speaker):
        bundle = create_bundle("PA", [(speaker, 1)])
        speaker.rent_price = 999
        assert bundle.items[0].price == 50

    def test_quantity_below_one_is_raised_to_one(self, speaker, mixer):
        bundle = create_bundle("PA", [(speaker, 0), (mixer, -4)])
        assert [l.quantity for l in bundle.items] == [1, 1]

    def test_empty_name_is_refused(self, speaker):
        assert create_bundle("   ", [(speaker, 1)]) is None

    def test_empty_selection_is_refused(self):
        assert create_bundle("PA", []) is None

    def test_missing_price_defaults_to_zero(self):
        item = InventoryItemRead(id="x", name="CABLE", rent_price=None)
        assert create_bundle("CABLES", [(item, 5)]).items[0].price == 0
