"""Schema management for the storefront's protean domains.

Every domain's SQLAlchemy provider points at the same database, so creating
the schema is done once per domain: the repositories are touched to register
their models on the provider's metadata, and the tables are then created.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider_name: str) -> None:
    records = (
        list(domain.registry.aggregates.values())
        + list(domain.registry.entities.values())
        + list(domain.registry.projections.values())
    )
    for record in records:
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create the tables of every aggregate and entity registered with ``domain``."""
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue
            _register_models(domain, name)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.create_all(engine)
            engine.dispose()
            logger.info("Schema created", domain=domain.name, provider=name)


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue
            _register_models(domain, name)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            engine.dispose()
            logger.info("Schema dropped", domain=domain.name, provider=name)
