"""
Pricing profile CRUD, validation and delete cascade.
"""
import uuid
from decimal import Decimal

import pytest

from profile_pricing.engine.models import AdjustmentMode, BasedOn, ProfileType
from profile_pricing.errors import NotFound, ValidationError
from profile_pricing.services.profile_service import validate_profile
from tests.conftest import profile_data


def test_create_assigns_uuid_and_draft_status(services):
    profile = services.profiles.create(profile_data())
    assert uuid.UUID(profile.id).version == 4
    assert profile.status == 'draft'
    assert profile.type == ProfileType.SINGLE
    assert profile.based_on == BasedOn.GLOBAL


def test_create_with_profile_reference(services):
    profile = services.profiles.create(profile_data(based_on_id='abc123'))
    assert profile.based_on == BasedOn.profile('abc123')
    assert profile.to_dict()['basedOnId'] == 'abc123'


@pytest.mark.parametrize("overrides, message", [
    ({'name': ''}, "Name is required"),
    ({'type': None}, "Type is required"),
    ({'type': 'bundle'}, "Type must be one of: single, multiple"),
    ({'adjustment_mode': None}, "Adjustment mode is required"),
    ({'adjustment_mode': 'percent'}, "Adjustment mode must be one of: fixed, dynamic"),
    ({'adjustment_increment': 'up'}, "Adjustment increment must be one of: increase, decrease"),
])
def test_create_rejects_invalid_input(services, store, overrides, message):
    with pytest.raises(ValidationError, match="Input is not valid") as excinfo:
        services.profiles.create(profile_data(**overrides))
    assert message in excinfo.value.errors
    assert store.profiles.list_all() == []


def test_validate_profile_collects_all_errors():
    result = validate_profile({'description': 'no required fields'})
    assert not result.valid
    assert len(result.errors) == 4


def test_update_replaces_settings_in_place(services):
    profile = services.profiles.create(profile_data(status='active'))
    updated = services.profiles.update(profile.id, profile_data(
        name='Retail v2', adjustment_mode='fixed', based_on_id='other',
    ))
    assert updated.id == profile.id
    assert updated.name == 'Retail v2'
    assert updated.adjustment_mode == AdjustmentMode.FIXED
    assert updated.based_on.profile_id == 'other'
    assert updated.status == 'active'
    assert services.profiles.get(profile.id).profile.name == 'Retail v2'


def test_update_unknown_profile(services):
    with pytest.raises(NotFound):
        services.profiles.update('missing', profile_data())


def test_update_does_not_recompute_adjustments(services):
    profile = services.profiles.create(profile_data())
    before = services.adjustments.upsert(profile.id, '3', 10).price
    services.profiles.update(profile.id, profile_data(adjustment_increment='decrease'))
    assert services.profiles.get(profile.id).adjustments[0][0].price == before


def test_get_includes_adjustments_with_products(services):
    profile = services.profiles.create(profile_data())
    services.adjustments.upsert(profile.id, '1', 10)

    detail = services.profiles.get(profile.id).to_dict()
    assert detail['name'] == 'Retail'
    assert len(detail['pricingAdjustments']) == 1
    assert detail['pricingAdjustments'][0]['product']['sku'] == 'HGVPIN216'


def test_list_profiles(services):
    services.profiles.create(profile_data(name='A'))
    services.profiles.create(profile_data(name='B'))
    assert [d.profile.name for d in services.profiles.list_profiles()] == ['A', 'B']


def test_delete_cascades_to_adjustments(services, store):
    profile = services.profiles.create(profile_data())
    keep = services.profiles.create(profile_data(name='Keep'))
    for product_id in ('1', '2', '3'):
        services.adjustments.upsert(profile.id, product_id, 10)
        services.adjustments.upsert(keep.id, product_id, 10)

    services.profiles.delete(profile.id)

    assert store.adjustments.find_by_profile(profile.id) == []
    assert len(store.adjustments.find_by_profile(keep.id)) == 3
    with pytest.raises(NotFound):
        services.profiles.get(profile.id)


def test_delete_unknown_profile(services):
    with pytest.raises(NotFound, match="Pricing profile 'missing' not found"):
        services.profiles.delete('missing')


def test_update_rejects_self_reference(services):
    profile = services.profiles.create(profile_data())
    with pytest.raises(ValidationError) as excinfo:
        services.profiles.update(profile.id, profile_data(based_on_id=profile.id))
    assert excinfo.value.errors == ["basedOnId cannot reference the profile itself or a profile based on it"]
    assert services.profiles.get(profile.id).profile.based_on == BasedOn.GLOBAL

    first = services.adjustments.upsert(profile.id, '3', 10)
    second = services.adjustments.upsert(profile.id, '3', 10)
    assert first.price == second.price == Decimal('110.00')


def test_update_rejects_reference_cycle(services):
    retail = services.profiles.create(profile_data())
    promo = services.profiles.create(profile_data(name='Promo', based_on_id=retail.id))
    clearance = services.profiles.create(profile_data(name='Clearance', based_on_id=promo.id))

    with pytest.raises(ValidationError):
        services.profiles.update(retail.id, profile_data(based_on_id=clearance.id))
    assert services.profiles.get(retail.id).profile.based_on == BasedOn.GLOBAL


def test_update_allows_chaining_onto_unrelated_profile(services):
    retail = services.profiles.create(profile_data())
    promo = services.profiles.create(profile_data(name='Promo', based_on_id=retail.id))
    other = services.profiles.create(profile_data(name='Other'))

    updated = services.profiles.update(other.id, profile_data(based_on_id=promo.id))
    assert updated.based_on == BasedOn.profile(promo.id)
