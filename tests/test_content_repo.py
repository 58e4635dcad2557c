from datetime import timedelta

import pytest
from sqlalchemy import create_engine

from beebright.errors import StoreError, ValidationError
from beebright.infra.content_repo import ContentStore
from beebright.services.content_service import ContentService


@pytest.fixture()
def store(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'nested' / 'content.db'}", future=True)
    s = ContentStore(engine)
    s.create_schema()
    return s


def test_get_empty_document(store):
    assert store.get() == {}


def test_update_creates_then_merges(store):
    store.update({"title": "Hola", "about": {"text": "Somos"}})
    store.update({"title": "Adiós", "gallery": ["a.png", "b.png"]})
    assert store.get() == {
        "title": "Adiós",
        "about": {"text": "Somos"},
        "gallery": ["a.png", "b.png"],
    }


def test_update_replaces_nested_values_whole(store):
    store.update({"about": {"text": "Somos", "img": "x.png"}})
    store.update({"about": {"text": "Nuevo"}})
    assert store.get()["about"] == {"text": "Nuevo"}


def test_store_errors_are_wrapped(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'never.db'}", future=True)
    s = ContentStore(engine)  # schema never created
    with pytest.raises(StoreError):
        s.get()


def test_service_rejects_non_objects(store):
    service = ContentService(store)
    for payload in (None, [], "texto", 3):
        with pytest.raises(ValidationError):
            service.update_section(payload)
    assert service.get_content() == {}


def test_service_empty_object_is_noop(store):
    service = ContentService(store)
    service.update_section({})
    assert service.get_content() == {}


def test_updated_at_is_aware_utc(store):
    from sqlalchemy import select
    from sqlalchemy.orm import Session

    from beebright.infra.content_repo import SiteContent, _utcnow

    assert _utcnow().utcoffset() == timedelta(0)

    store.update({"title": "Hola"})
    with Session(store.engine) as db:
        first = db.execute(select(SiteContent)).scalar_one().updated_at
    store.update({"title": "Adiós"})
    with Session(store.engine) as db:
        second = db.execute(select(SiteContent)).scalar_one().updated_at
    assert first is not None
    assert second >= first
