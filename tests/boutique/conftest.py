import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def boutique_bed():
    from boutique.domain import boutique
    from boutique.utils.db import drop_db, setup_db

    bed = DomainFixture(boutique)
    bed.setup()
    setup_db(boutique)
    yield bed
    drop_db(boutique)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(boutique_bed):
    with boutique_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        for _, broker in current_domain.brokers.items():
            broker._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture
def catalog_item():
    """A catalog item with no promotion, priced at 10000."""
    from boutique.catalog.item import CatalogItem

    item = CatalogItem.create(name="Boubou brodé", base_price=10000.0, category="Vêtements")
    item._events.clear()
    return item


@pytest.fixture
def customer_info():
    return {
        "name": "Awa Ndiaye",
        "email": "awa@example.sn",
        "phone": "+221 77 123 45 67",
        "address": "12 Rue Carnot, Dakar",
    }
