"""
Adjustment upsert orchestration and the queries around it.
"""
from decimal import Decimal
from threading import Thread

import pytest

from profile_pricing.errors import InvalidReference, NotFound, ValidationError
from profile_pricing.storage.memory import KeyedLock
from tests.conftest import profile_data


@pytest.fixture
def retail(services):
    """Dynamic +10% profile on wholesale prices."""
    return services.profiles.create(profile_data())


def test_upsert_computes_from_wholesale(services, retail):
    adjustment = services.adjustments.upsert(retail.id, '3', 10)
    assert adjustment.based_price == Decimal('100.00')
    assert adjustment.adjustment_value == Decimal('10')
    assert adjustment.price == Decimal('110.00')


def test_upsert_fixed_decrease(services):
    profile = services.profiles.create(profile_data(adjustment_mode='fixed', adjustment_increment='decrease'))
    assert services.adjustments.upsert(profile.id, 3, '15').price == Decimal('85.00')


def test_upsert_is_idempotent(services, store, retail):
    first = services.adjustments.upsert(retail.id, '1', 10)
    second = services.adjustments.upsert(retail.id, '1', 10)

    stored = store.adjustments.find_by_profile(retail.id)
    assert len(stored) == 1
    assert first.id == second.id == stored[0].id
    assert first.price == second.price == stored[0].price


def test_upsert_overwrites_pair_and_keeps_id(services, store, retail):
    first = services.adjustments.upsert(retail.id, '1', 10)
    second = services.adjustments.upsert(retail.id, '1', 20)

    stored = store.adjustments.find_by_profile(retail.id)
    assert len(stored) == 1
    assert second.id == first.id
    assert stored[0].price == Decimal('334.87')  # 279.06 + 55.81


def test_at_most_one_adjustment_per_pair(services, store, retail):
    other = services.profiles.create(profile_data(name='Wholesale+', adjustment_mode='fixed'))
    for value in (1, 2, 3):
        for product_id in ('1', '2', '3'):
            services.adjustments.upsert(retail.id, product_id, value)
            services.adjustments.upsert(other.id, product_id, value)

    pairs = [a.key for p in (retail, other) for a in store.adjustments.find_by_profile(p.id)]
    assert len(pairs) == len(set(pairs)) == 6


def test_concurrent_upserts_keep_one_adjustment(services, store, retail):
    threads = [
        Thread(target=services.adjustments.upsert, args=(retail.id, '2', value))
        for value in range(20)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.adjustments.find_by_profile(retail.id)) == 1


def test_chained_profile_uses_upstream_price(services, retail):
    services.adjustments.upsert(retail.id, '3', 10)  # 110.00
    promo = services.profiles.create(profile_data(
        name='Promo', based_on_id=retail.id, adjustment_mode='fixed', adjustment_increment='decrease',
    ))

    chained = services.adjustments.upsert(promo.id, '3', 5)
    assert chained.based_price == Decimal('110.00')
    assert chained.price == Decimal('105.00')

    # Products without an upstream adjustment fall back to wholesale
    assert services.adjustments.upsert(promo.id, '2', 5).based_price == Decimal('120.00')


def test_based_price_is_a_snapshot(services, retail):
    services.adjustments.upsert(retail.id, '3', 10)
    promo = services.profiles.create(profile_data(name='Promo', based_on_id=retail.id))
    chained = services.adjustments.upsert(promo.id, '3', 0)

    services.adjustments.upsert(retail.id, '3', 50)  # upstream now 150.00

    assert services.profiles.get(promo.id).adjustments[0][0].based_price == Decimal('110.00')
    assert chained.price == Decimal('110.00')


def test_unknown_profile_is_invalid_reference(services):
    with pytest.raises(InvalidReference, match="Pricing profile 'nope' does not exist"):
        services.adjustments.upsert('nope', '1', 10)


def test_unknown_product_is_invalid_reference(services, retail):
    with pytest.raises(InvalidReference, match="Product '42' does not exist"):
        services.adjustments.upsert(retail.id, '42', 10)


@pytest.mark.parametrize("profile_id, product_id, value, message", [
    (None, '1', 10, "pricingProfileId is required"),
    ('p', None, 10, "productId is required"),
    ('p', '1', None, "adjustmentValue is required"),
    ('p', '1', 'ten', "adjustmentValue must be a number"),
])
def test_upsert_validation(services, profile_id, product_id, value, message):
    with pytest.raises(ValidationError) as excinfo:
        services.adjustments.upsert(profile_id, product_id, value)
    assert message in excinfo.value.errors


def test_list_for_profile_decorates_with_product(services, retail):
    services.adjustments.upsert(retail.id, '1', 10)
    rows = services.adjustments.list_for_profile(retail.id)
    assert len(rows) == 1
    assert rows[0]['title'] == 'High Garden Pinot Noir 2021'
    assert rows[0]['sku'] == 'HGVPIN216'
    assert rows[0]['category'] == 'Alcoholic Beverage'
    assert rows[0]['price'] == '306.97'


def test_list_for_profile_requires_id(services):
    with pytest.raises(ValidationError):
        services.adjustments.list_for_profile(None)


def test_delete_adjustment(services, store, retail):
    adjustment = services.adjustments.upsert(retail.id, '1', 10)
    services.adjustments.delete(adjustment.id)
    assert store.adjustments.find_by_profile(retail.id) == []
    with pytest.raises(NotFound):
        services.adjustments.delete(adjustment.id)


def test_price_table_previews_without_storing(services, store):
    rows = services.adjustments.price_table('dynamic', 'increase', [
        {'id': 1, 'basedPrice': '100', 'adjustmentValue': '10'},
        {'id': 'missing', 'basedPrice': '50', 'adjustmentValue': '10'},
        {'id': '2', 'basedPrice': 200, 'adjustmentValue': 5},
    ])
    assert [(r.id, r.price) for r in rows] == [('1', Decimal('110.00')), ('2', Decimal('210.00'))]
    assert store.adjustments.find_by_profile('anything') == []


def test_price_table_validates_enums_and_amounts(services):
    with pytest.raises(ValidationError) as excinfo:
        services.adjustments.price_table('percent', 'increase', [{'id': '1', 'adjustmentValue': 1}])
    assert "Adjustment mode must be one of: fixed, dynamic" in excinfo.value.errors
    assert "Item #1: basedPrice is required" in excinfo.value.errors


def test_upsert_rejects_out_of_range_value(services, store, retail):
    with pytest.raises(ValidationError) as excinfo:
        services.adjustments.upsert(retail.id, '1', '1e30')
    assert "adjustmentValue must be below 1000000000000 in magnitude" in excinfo.value.errors
    assert store.adjustments.find_by_profile(retail.id) == []


def test_upsert_rejects_out_of_range_price(services, store, retail):
    with pytest.raises(ValidationError) as excinfo:
        services.adjustments.upsert(retail.id, '1', '999999999999')
    assert "Adjusted price must be below 1000000000000 in magnitude" in excinfo.value.errors
    assert store.adjustments.find_by_profile(retail.id) == []


def test_price_table_rejects_out_of_range_price(services):
    with pytest.raises(ValidationError):
        services.adjustments.price_table('fixed', 'increase', [
            {'id': '1', 'basedPrice': '999999999999.99', 'adjustmentValue': '1'},
        ])


def test_profile_delete_waits_for_inflight_upsert(services, store, retail, monkeypatch):
    promo = services.profiles.create(profile_data(name='Promo', based_on_id=retail.id))
    deleter = Thread(target=services.profiles.delete, args=(promo.id,))
    original = store.adjustments.find_by_profile_and_product
    started = []

    def find_while_deleting(profile_id, product_id):
        # Start the delete once the upsert has resolved the profile
        if not started:
            started.append(True)
            deleter.start()
            deleter.join(timeout=0.2)
        return original(profile_id, product_id)

    monkeypatch.setattr(store.adjustments, 'find_by_profile_and_product', find_while_deleting)
    services.adjustments.upsert(promo.id, '3', 10)
    deleter.join()

    assert store.profiles.get_by_id(promo.id) is None
    assert store.adjustments.find_by_profile(promo.id) == []


def test_pair_locks_are_released(services, retail):
    threads = [
        Thread(target=services.adjustments.upsert, args=(retail.id, product_id, 5))
        for product_id in ('1', '2', '3') * 5
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    with pytest.raises(InvalidReference):
        services.adjustments.upsert(retail.id, '42', 10)
    assert len(services.adjustments.locks) == 0


def test_keyed_lock_tracks_held_keys():
    locks = KeyedLock()
    with locks.hold(('1', 'a')):
        with locks.hold(('2', 'a')):
            assert len(locks) == 2
        assert len(locks) == 1
    assert len(locks) == 0
