from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [provider for _, provider in domain.providers.items() if provider.conn_info["provider"] in _SQL_PROVIDERS]


def setup_db(domain: Domain):
    """Create tables for every aggregate, entity and projection on a SQL provider"""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # DAOs register their tables on the provider's metadata when first built
            for registry in (domain.registry.aggregates, domain.registry.entities, domain.registry.projections):
                for _, record in registry.items():
                    if record.cls.meta_.provider == provider.name:
                        domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop all tables created by ``setup_db``"""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
