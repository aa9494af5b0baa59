from datetime import datetime, timedelta

import pytest

from models import db, Favorite
from services.collection import assemble_collection
from services.errors import ValidationFailed
from services.unified import PageRequest

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0)


def favorite(user_id, key, minutes):
    db.session.add(Favorite(user_id=user_id, recipe_key=key,
                            created_at=BASE_TIME + timedelta(minutes=minutes)))
    db.session.commit()


def test_owned_and_favorited_recipes_are_merged(app, gateway, make_recipe, fake_session, respond, provider_recipe):
    mine = make_recipe('My Chili', user_id='alice', visibility='private')
    mine.updated_at = BASE_TIME + timedelta(minutes=5)
    theirs = make_recipe("Bob's Bread", user_id='bob')
    db.session.commit()

    favorite('alice', str(theirs.id), 10)
    favorite('alice', str(mine.id), 20)  # already owned, listed once
    favorite('alice', 'spoon_42', 1)
    fake_session.add('/recipes/42/information', respond(200, provider_recipe(42, 'Ramen')))

    result = assemble_collection('alice', PageRequest(limit=20), gateway=gateway)

    assert [r.title for r in result['items']] == ["Bob's Bread", 'My Chili', 'Ramen']
    assert all(r.is_favorited for r in result['items'])
    assert result['stats'] == {'owned_count': 1, 'favorited_count': 2, 'total_count': 3}
    assert result['paging']['total'] == 3


def test_failed_external_favorite_is_dropped(app, gateway, make_recipe, fake_session, respond, provider_recipe):
    make_recipe('My Chili', user_id='alice')
    for i in range(1, 6):
        favorite('alice', f'spoon_{i}', i)
        if i == 3:
            fake_session.add('/recipes/3/information', respond(500, reason='Server Error'))
        else:
            fake_session.add(f'/recipes/{i}/information', respond(200, provider_recipe(i, f'R{i}')))

    result = assemble_collection('alice', gateway=gateway)

    assert len(fake_session.calls) == 5
    assert sorted(r.title for r in result['items']) == ['My Chili', 'R1', 'R2', 'R4', 'R5']
    assert result['stats'] == {'owned_count': 1, 'favorited_count': 4, 'total_count': 5}


def test_external_fetches_are_capped(app, gateway, fake_session, respond, provider_recipe):
    for i in range(1, 8):
        favorite('alice', f'spoon_{i}', i)
        fake_session.add(f'/recipes/{i}/information', respond(200, provider_recipe(i, f'R{i}')))

    result = assemble_collection('alice', gateway=gateway, fetch_cap=5)

    assert len(fake_session.calls) == 5
    assert len(result['items']) == 5
    # Newest favorites are fetched first
    assert sorted(r.key for r in result['items']) == ['spoon_3', 'spoon_4', 'spoon_5', 'spoon_6', 'spoon_7']


def test_deleted_and_hidden_local_favorites_are_skipped(app, gateway, make_recipe):
    hidden = make_recipe('Carol Private', user_id='carol', visibility='private')
    favorite('alice', str(hidden.id), 1)
    favorite('alice', '9999', 2)

    result = assemble_collection('alice', gateway=gateway)

    assert result['items'] == []
    assert result['stats']['total_count'] == 0


def test_drafts_are_not_part_of_the_collection(app, gateway, make_recipe):
    make_recipe('Half Done', user_id='alice', status='draft')
    result = assemble_collection('alice', gateway=gateway)
    assert result['stats']['owned_count'] == 0


def test_favorited_own_draft_stays_out(app, gateway, make_recipe):
    draft = make_recipe('Half Done', user_id='alice', visibility='private', status='draft')
    archived = make_recipe('Old Stew', user_id='alice', status='archived')
    favorite('alice', str(draft.id), 1)
    favorite('alice', str(archived.id), 2)

    result = assemble_collection('alice', gateway=gateway)

    assert result['items'] == []
    assert result['stats'] == {'owned_count': 0, 'favorited_count': 0, 'total_count': 0}


def test_pagination(app, gateway, make_recipe):
    for i in range(5):
        recipe = make_recipe(f'Recipe {i}', user_id='alice')
        recipe.updated_at = BASE_TIME + timedelta(minutes=i)
    db.session.commit()

    result = assemble_collection('alice', PageRequest(limit=2, offset=2), gateway=gateway)

    assert [r.title for r in result['items']] == ['Recipe 2', 'Recipe 1']
    assert result['paging']['has_more'] is True
    assert result['stats']['total_count'] == 5


def test_caller_is_required(app, gateway):
    with pytest.raises(ValidationFailed):
        assemble_collection(None, gateway=gateway)
