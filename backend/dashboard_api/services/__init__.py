# Services package init
"""
Dashboard API — Services Layer
===============================

What:  Everything between the HTTP routes and the database.

Service Inventory:
    - coercion:         query-string / payload value coercion, id normalization
    - query_builder:    ListQuery parsing, WHERE and ORDER BY construction
    - serialization:    JSON-safe rendering of rows (BIGINT and NUMERIC as strings)
    - resource_service: list / get / create / update / delete orchestration

Services never see Request objects, so they can be driven from tests or
scripts with nothing but an AsyncSession and a ResourceDescriptor.
"""
