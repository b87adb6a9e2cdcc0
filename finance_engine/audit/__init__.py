"""Domain debug logging package."""

from finance_engine.audit.logger import (
    DomainLogger,
    NullDomainLogger,
    create_domain_logger,
    resolve_logger,
)

__all__ = [
    "DomainLogger",
    "NullDomainLogger",
    "create_domain_logger",
    "resolve_logger",
]
