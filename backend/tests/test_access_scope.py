"""Visibility filters: clause construction and the rows they let through."""

import pytest

from database.models import (
    Alert, Animal, Farm, Herd, LandChange, LandSurvey, LandZone, Report, User,
)
from services import access_scope
from services.access_scope import Requester

ADMIN = Requester(id='admin-1', role='ADMIN')
FARMER = Requester(id='user-1', role='FARMER')


class TestVisibilityFilter:

    def test_admin_is_unrestricted(self, app):
        for model in (Farm, Herd, Animal, Alert, Report):
            assert access_scope.visibility_filter(model, ADMIN) is None

    @pytest.mark.parametrize('model', [LandZone, LandSurvey, LandChange])
    def test_land_data_is_never_restricted(self, app, model):
        assert access_scope.visibility_filter(model, FARMER) is None

    def test_farm_filters_on_owner(self, app):
        clause = access_scope.visibility_filter(Farm, FARMER)
        assert 'farms.owner_id' in str(clause)

    def test_animal_filter_walks_herd_and_farm(self, app):
        sql = str(access_scope.visibility_filter(Animal, FARMER))
        assert 'herds' in sql
        assert 'farms.owner_id' in sql

    def test_alert_filter_is_assignee_or_farm_owner(self, app):
        sql = str(access_scope.visibility_filter(Alert, FARMER))
        assert 'alerts.assigned_to_id' in sql
        assert 'farms.owner_id' in sql
        assert ' OR ' in sql

    def test_unknown_model_raises(self, app):
        with pytest.raises(LookupError):
            access_scope.visibility_filter(User, FARMER)

    def test_assigned_filter(self, app):
        assert access_scope.assigned_filter(ADMIN) is None
        assert 'alerts.assigned_to_id' in str(access_scope.assigned_filter(FARMER))

    def test_apply_with_no_clause_returns_query_unchanged(self, app):
        with app.app_context():
            query = Farm.query
            assert access_scope.apply(query, None) is query


class TestScopedQueries:

    def test_animals_only_visible_through_owned_farm(self, app, seed, farmer_a, farmer_b):
        farm_a, farm_b = seed(
            Farm(owner_id=farmer_a.id, name='A', location='x', latitude=0, longitude=0),
            Farm(owner_id=farmer_b.id, name='B', location='y', latitude=0, longitude=0),
        )
        herd_a, herd_b = seed(
            Herd(farm_id=farm_a, name='Herd A', animal_type='cattle'),
            Herd(farm_id=farm_b, name='Herd B', animal_type='goat'),
        )
        seed(
            Animal(herd_id=herd_a, tag_id='A-1'),
            Animal(herd_id=herd_a, tag_id='A-2'),
            Animal(herd_id=herd_b, tag_id='B-1'),
        )

        requester = Requester(id=farmer_a.id, role='FARMER')
        with app.app_context():
            tags = {a.tag_id for a in access_scope.scoped(Animal.query, Animal, requester).all()}
            everything = access_scope.scoped(Animal.query, Animal, ADMIN).count()

        assert tags == {'A-1', 'A-2'}
        assert everything == 3

    def test_alert_visible_to_assignee_without_owning_farm(self, app, seed, farmer_a, farmer_b):
        (farm_a,) = seed(Farm(owner_id=farmer_a.id, name='A', location='x', latitude=0, longitude=0))
        seed(
            Alert(type='HEALTH', severity='HIGH', title='Fever', message='m', module='farm',
                  farm_id=farm_a, assigned_to_id=farmer_b.id),
            Alert(type='HEALTH', severity='LOW', title='Limp', message='m', module='farm',
                  farm_id=farm_a),
        )

        with app.app_context():
            owner_sees = access_scope.scoped(
                Alert.query, Alert, Requester(farmer_a.id, 'FARMER')).count()
            assignee_sees = [a.title for a in access_scope.scoped(
                Alert.query, Alert, Requester(farmer_b.id, 'FARMER')).all()]

        assert owner_sees == 2
        assert assignee_sees == ['Fever']
